# blogapi/services/firestore_service.py
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore

from blogapi.utils.datetime_utils import DateTimeUtils

# Firestore caps 'in' filters at 30 values and write batches at 500 operations.
IN_QUERY_CHUNK = 30
BATCH_LIMIT = 500


class FirestoreService:
    """
    Base class for the domain services.
    Holds the Firestore client and the collection references, plus the query helpers every service shares.
    """

    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')
        self.comments_ref = self.db.collection('comments')
        self.reviews_ref = self.db.collection('reviews')
        self.donations_ref = self.db.collection('donations')

    @staticmethod
    def _snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
        if snapshot is None or not snapshot.exists:
            return None
        return DateTimeUtils.from_firestore(snapshot.to_dict())

    def _get(self, collection_ref, doc_id: str) -> Optional[Dict[str, Any]]:
        if not doc_id:
            return None
        return self._snapshot_to_dict(collection_ref.document(doc_id).get())

    def _stream(self, query) -> List[Dict[str, Any]]:
        return [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]

    @staticmethod
    def _count(query) -> int:
        """Server-side count aggregation, without reading the documents."""
        result = query.count().get()
        return int(result[0][0].value)

    def _stream_in(self, collection_ref, field: str, values: Iterable[Any]) -> List[Dict[str, Any]]:
        """Runs ``field in values`` in chunks the backend accepts."""
        values = list(values)
        found: List[Dict[str, Any]] = []
        for i in range(0, len(values), IN_QUERY_CHUNK):
            chunk = values[i:i + IN_QUERY_CHUNK]
            found.extend(self._stream(collection_ref.where(field, 'in', chunk)))
        return found

    def _count_in(self, collection_ref, field: str, values: Iterable[Any]) -> int:
        """Counts ``field in values`` with one aggregation per chunk."""
        values = list(values)
        return sum(
            self._count(collection_ref.where(field, 'in', values[i:i + IN_QUERY_CHUNK]))
            for i in range(0, len(values), IN_QUERY_CHUNK)
        )

    def _delete_refs(self, refs: List[Any]) -> int:
        """Deletes document references in as few write batches as possible."""
        deleted = 0
        for i in range(0, len(refs), BATCH_LIMIT):
            batch = self.db.batch()
            for ref in refs[i:i + BATCH_LIMIT]:
                batch.delete(ref)
            batch.commit()
            deleted += len(refs[i:i + BATCH_LIMIT])
        return deleted
