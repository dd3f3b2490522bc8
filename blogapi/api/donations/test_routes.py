# blogapi/api/donations/test_routes.py
import hashlib
import hmac
import json
import time

import pytest

from blogapi.conftest import seed_post
from blogapi.core.config import TestingConfig

WEBHOOK_URL = '/api/v1/donations/webhook'


def _signed(payload: str, secret: str = TestingConfig.STRIPE_WEBHOOK_SECRET, timestamp: int = None) -> dict:
    timestamp = timestamp or int(time.time())
    signature = hmac.new(secret.encode('utf-8'), f"{timestamp}.{payload}".encode('utf-8'), hashlib.sha256).hexdigest()
    return {"Stripe-Signature": f"t={timestamp},v1={signature}"}


def _completed_event(session_id, post, donor_id="", amount="25.5"):
    return json.dumps({
        "id": f"evt_{session_id}",
        "type": "checkout.session.completed",
        "data": {"object": {
            "id": session_id,
            "object": "checkout.session",
            "currency": "usd",
            "amount_total": 2550,
            "metadata": {
                "post_id": post['post_id'],
                "author_id": post['author']['user_id'],
                "donor_id": donor_id,
                "amount": amount,
            },
        }},
    })


@pytest.fixture
def post(db, alice):
    return seed_post(db, alice['user'], "Worth supporting")


def test_checkout_session_targets_post_author(client, app, bob, post):
    response = client.post('/api/v1/donations', headers=bob['headers'],
                           json={"post_id": post['post_id'], "amount": 12.5})
    data = response.get_json()['data']

    assert response.status_code == 201
    assert data['session_id'] == "cs_test_1"
    assert data['url'].endswith("cs_test_1")

    session = app.services['payments'].sessions[0]
    assert session['author_id'] == post['author']['user_id']
    assert session['donor_id'] == bob['user']['user_id']
    assert session['amount'] == 12.5


@pytest.mark.parametrize("amount", [0, -5, 0.001, 0.49, 10000.01])
def test_checkout_amount_bounds(client, bob, post, amount):
    response = client.post('/api/v1/donations', headers=bob['headers'],
                           json={"post_id": post['post_id'], "amount": amount})
    assert response.status_code == 400


def test_checkout_accepts_minimum_amount(client, bob, post):
    response = client.post('/api/v1/donations', headers=bob['headers'],
                           json={"post_id": post['post_id'], "amount": 0.5})
    assert response.status_code == 201


def test_checkout_for_missing_post(client, bob):
    response = client.post('/api/v1/donations', headers=bob['headers'], json={"post_id": "missing", "amount": 5})
    assert response.status_code == 404


def test_webhook_records_donation(client, db, bob, post):
    payload = _completed_event("cs_live_1", post, donor_id=bob['user']['user_id'])

    response = client.post(WEBHOOK_URL, data=payload, headers=_signed(payload), content_type='application/json')

    assert response.status_code == 200
    assert response.get_json()['data'] == {"received": True}
    donation = db.collection('donations').document("cs_live_1").get().to_dict()
    assert donation['amount'] == 25.5
    assert donation['author_id'] == post['author']['user_id']
    assert donation['donor_id'] == bob['user']['user_id']


def test_webhook_replay_creates_one_donation(client, db, post):
    payload = _completed_event("cs_live_2", post)

    for _ in range(3):
        response = client.post(WEBHOOK_URL, data=payload, headers=_signed(payload), content_type='application/json')
        assert response.status_code == 200

    assert list(db.collection('donations').docs) == ["cs_live_2"]
    assert db.collection('donations').document("cs_live_2").get().to_dict()['donor_id'] is None


def test_webhook_bad_signature(client, db, post):
    payload = _completed_event("cs_live_3", post)

    response = client.post(WEBHOOK_URL, data=payload, headers=_signed(payload, secret="whsec_wrong"),
                           content_type='application/json')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_SIGNATURE"
    assert db.collection('donations').docs == {}


def test_webhook_rejects_stale_signature(client, db, post):
    payload = _completed_event("cs_live_old", post)
    thirty_days_ago = int(time.time()) - 30 * 24 * 3600

    response = client.post(WEBHOOK_URL, data=payload, headers=_signed(payload, timestamp=thirty_days_ago),
                           content_type='application/json')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_SIGNATURE"
    assert db.collection('donations').docs == {}


def test_webhook_without_signature(client, post):
    payload = _completed_event("cs_live_4", post)
    response = client.post(WEBHOOK_URL, data=payload, content_type='application/json')
    assert response.status_code == 400


def test_webhook_ignores_other_events(client, db):
    payload = json.dumps({"id": "evt_1", "type": "payment_intent.created", "data": {"object": {"id": "pi_1"}}})

    response = client.post(WEBHOOK_URL, data=payload, headers=_signed(payload), content_type='application/json')

    assert response.status_code == 200
    assert db.collection('donations').docs == {}


def test_listings_with_total_amount(client, alice, bob, post):
    for session_id, amount in (("cs_a", "10"), ("cs_b", "5.25")):
        payload = _completed_event(session_id, post, donor_id=bob['user']['user_id'], amount=amount)
        client.post(WEBHOOK_URL, data=payload, headers=_signed(payload), content_type='application/json')

    by_author = client.get(f"/api/v1/donations/author/{alice['user']['user_id']}", headers=alice['headers'])
    by_post = client.get(f"/api/v1/donations/post/{post['post_id']}", headers=alice['headers'])
    by_donor = client.get(f"/api/v1/donations/donor/{bob['user']['user_id']}", headers=bob['headers'])

    for response in (by_author, by_post, by_donor):
        data = response.get_json()['data']
        assert response.status_code == 200
        assert len(data['donations']) == 2
        assert data['totalAmount'] == 15.25


def test_record_donation_is_create_once(app, post):
    donation_service = app.services['donations']
    session = json.loads(_completed_event("cs_live_5", post, amount="7"))['data']['object']

    first, created = donation_service.record_donation(session)
    again, created_again = donation_service.record_donation(dict(session, metadata=dict(session['metadata'], amount="99")))

    assert created is True
    assert created_again is False
    assert again['amount'] == first['amount'] == 7.0
