# blogapi/conftest.py
"""
Shared pytest fixtures.

The domain services talk to Firestore through the small surface below
(collections, documents, where/order_by/offset/limit, count aggregation,
write batches and Increment transforms), so tests run against an in-memory
double of that surface instead of a live project.
"""
import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, NotFound

from blogapi import create_app
from blogapi.core.config import TestingConfig
from blogapi.services.ai_service import AIContentService
from blogapi.services.payment_service import PaymentService
from blogapi.services.storage_service import StorageService

_MISSING = object()
INT32_MAX = 2 ** 31 - 1


def _lookup(data, field_path):
    value = data
    for part in field_path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(data, field_path, op, expected):
    value = _lookup(data, field_path)
    if value is _MISSING:
        return False
    if op == '==':
        return value == expected
    if op == 'in':
        return value in expected
    if op == 'array_contains':
        return isinstance(value, list) and expected in value
    raise NotImplementedError(f"Unsupported operator in fake Firestore: {op}")


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self._collection.docs.get(self.id))

    def create(self, data):
        if self.id in self._collection.docs:
            raise AlreadyExists(f"Document already exists: {self._collection.name}/{self.id}")
        self._collection.docs[self.id] = copy.deepcopy(data)

    def set(self, data, merge=False):
        if merge and self.id in self._collection.docs:
            self._collection.docs[self.id].update(copy.deepcopy(data))
        else:
            self._collection.docs[self.id] = copy.deepcopy(data)

    def update(self, changes):
        doc = self._collection.docs.get(self.id)
        if doc is None:
            raise NotFound(f"No document to update: {self._collection.name}/{self.id}")
        for key, value in changes.items():
            if isinstance(value, firestore.Increment):
                doc[key] = doc.get(key, 0) + value.value
            else:
                doc[key] = copy.deepcopy(value)

    def delete(self):
        self._collection.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=(), orders=(), offset=0, limit=None):
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes):
        state = dict(filters=self._filters, orders=self._orders, offset=self._offset, limit=self._limit)
        state.update(changes)
        return FakeQuery(self._collection, **state)

    def where(self, field_path, op, value):
        return self._copy(filters=self._filters + ((field_path, op, value),))

    def order_by(self, field_path, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field_path, direction),))

    def offset(self, num_to_skip):
        # Offsets travel as int32 in the query protobuf.
        if num_to_skip > INT32_MAX:
            raise ValueError(f"Value out of range: {num_to_skip}")
        return self._copy(offset=num_to_skip)

    def limit(self, count):
        return self._copy(limit=count)

    def _results(self):
        items = [
            (doc_id, data) for doc_id, data in self._collection.docs.items()
            if all(_matches(data, *flt) for flt in self._filters)
        ]
        for field_path, direction in reversed(self._orders):
            items.sort(key=lambda item: _lookup(item[1], field_path),
                       reverse=direction == firestore.Query.DESCENDING)
        items = items[self._offset:]
        if self._limit is not None:
            items = items[:self._limit]
        return items

    def stream(self):
        for doc_id, data in self._results():
            yield FakeSnapshot(FakeDocumentReference(self._collection, doc_id), data)

    def get(self):
        return list(self.stream())

    def count(self):
        total = len(self._results())
        return SimpleNamespace(get=lambda: [[SimpleNamespace(alias='count', value=total)]])


class FakeCollection(FakeQuery):
    def __init__(self, name):
        self.name = name
        self.docs = {}
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentReference(self, doc_id or uuid.uuid4().hex)


class FakeWriteBatch:
    def __init__(self):
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(lambda: ref.set(data, merge=merge))

    def update(self, ref, changes):
        self._ops.append(lambda: ref.update(changes))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        for op in self._ops:
            op()
        self._ops = []


class FakeFirestore:
    def __init__(self):
        self._collections = {}

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def batch(self):
        return FakeWriteBatch()


# =====================================================================================
# External gateway fakes
# =====================================================================================
class FakePaymentService(PaymentService):
    """Checkout sessions are recorded locally. Webhook signature checks stay real."""

    def __init__(self):
        super().__init__()
        self.webhook_secret = TestingConfig.STRIPE_WEBHOOK_SECRET
        self.sessions = []

    def create_checkout_session(self, amount, post, donor_id):
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.sessions.append({
            "id": session_id,
            "amount": amount,
            "post_id": post['post_id'],
            "author_id": post['author']['user_id'],
            "donor_id": donor_id,
        })
        return {"url": f"https://checkout.stripe.test/{session_id}", "session_id": session_id}


class FakeBlob:
    def __init__(self, name):
        self.name = name
        self.signed_with = None

    def generate_signed_url(self, **kwargs):
        self.signed_with = kwargs
        return f"https://storage.test/{self.name}?X-Goog-Signature=fake"


class FakeBucket:
    def __init__(self):
        self.blobs = []

    def blob(self, name):
        blob = FakeBlob(name)
        self.blobs.append(blob)
        return blob


class FakeCompletions:
    def __init__(self, reply="Generated draft"):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_storage_service():
    service = StorageService()
    service.bucket = FakeBucket()
    return service


def make_ai_service(reply="Generated draft"):
    service = AIContentService()
    service.model = TestingConfig.OPENAI_MODEL
    service.client = SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(reply)))
    return service


# =====================================================================================
# Fixtures
# =====================================================================================
@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def app(db):
    app = create_app('testing', db=db, services={
        'payments': FakePaymentService(),
        'storage': make_storage_service(),
        'ai': make_ai_service(),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, username, password="password123"):
    response = client.post('/api/v1/users/register', json={
        "username": username,
        "email": f"{username}@example.com",
        "full_name": username.title(),
        "password": password,
    })
    assert response.status_code == 201, response.get_json()
    data = response.get_json()['data']
    return {
        "user": data['user'],
        "access_token": data['access_token'],
        "refresh_token": data['refresh_token'],
        "headers": auth_headers(data['access_token']),
    }


@pytest.fixture
def alice(client):
    return register(client, "alice")


@pytest.fixture
def bob(client):
    return register(client, "bob")


def seed_post(db, author, title, created_at=None, **fields):
    """Writes a post straight into the store, bypassing the API."""
    post_id = uuid.uuid4().hex
    created_at = created_at or datetime.now(timezone.utc)
    doc = {
        "post_id": post_id,
        "author": {
            "user_id": author['user_id'],
            "username": author['username'],
            "full_name": author['full_name'],
            "avatar_url": author.get('avatar_url'),
        },
        "title": title,
        "content": fields.pop('content', f"Content of {title}"),
        "image": None,
        "description": None,
        "category": None,
        "tags": [],
        "views": 0,
        "created_at": created_at,
        "updated_at": created_at,
    }
    doc.update(fields)
    db.collection('posts').document(post_id).set(doc)
    return doc


def seed_posts(db, author, count, start=None):
    """Seeds ``count`` posts one minute apart. Title N is the N-th oldest."""
    start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [seed_post(db, author, f"Post {i}", created_at=start + timedelta(minutes=i)) for i in range(1, count + 1)]
