# blogapi/api/donations/services.py
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists

from blogapi.core.exceptions import BadRequestError, NotFoundError
from blogapi.models.donation import Donation
from blogapi.services.firestore_service import FirestoreService
from blogapi.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = 'checkout.session.completed'


class DonationService(FirestoreService):
    """
    Donations to post authors. Checkout goes through the payment gateway.
    A donation record is only written once the processor confirms the payment.
    """

    def __init__(self, db=None, payment_service=None):
        super().__init__(db)
        self.payment_service = payment_service

    def start_checkout(self, donor_id: Optional[str], post_id: str, amount: float) -> Dict[str, str]:
        post = self._get(self.posts_ref, post_id)
        if not post:
            raise NotFoundError("Blog not found", error_code="POST_NOT_FOUND")
        return self.payment_service.create_checkout_session(amount, post, donor_id)

    def handle_event(self, event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Applies a verified processor event. Only completed checkouts produce a record.
        """
        event_type = event.get('type')
        if event_type != CHECKOUT_COMPLETED:
            logger.info(f"Ignoring payment event (type: {event_type})")
            return None

        session = event.get('data', {}).get('object', {})
        donation, created = self.record_donation(session)
        if not created:
            logger.info(f"Duplicate checkout completion ignored (session_id: {donation['donation_id']})")
        return donation

    def record_donation(self, session: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """
        Stores the donation under the checkout session id, so a redelivered event is a no-op.
        :return: (donation, created)
        """
        session_id = session.get('id')
        metadata = session.get('metadata') or {}
        if not session_id or not metadata.get('post_id') or not metadata.get('author_id'):
            raise BadRequestError("Checkout session is missing donation metadata", error_code="INVALID_PAYLOAD")

        try:
            amount = float(metadata.get('amount'))
        except (TypeError, ValueError):
            amount = (session.get('amount_total') or 0) / 100

        donation = Donation(
            donation_id=session_id,
            post_id=metadata['post_id'],
            author_id=metadata['author_id'],
            amount=amount,
            donor_id=metadata.get('donor_id') or None,
            currency=session.get('currency') or 'usd',
        )
        donation_data = DateTimeUtils.for_firestore(asdict(donation))
        donation_ref = self.donations_ref.document(session_id)
        try:
            donation_ref.create(donation_data)
        except AlreadyExists:
            return self._snapshot_to_dict(donation_ref.get()), False
        logger.info(f"Donation recorded (session_id: {session_id}, post_id: {donation.post_id}, amount: {amount})")
        return donation_data, True

    def _list_by(self, field: str, value: str) -> Dict[str, Any]:
        query = self.donations_ref.where(field, '==', value).order_by('created_at', direction=firestore.Query.DESCENDING)
        donations = self._stream(query)
        return {
            "donations": donations,
            "total_amount": round(sum(d.get('amount', 0) for d in donations), 2),
        }

    def get_donations_by_author(self, author_id: str) -> Dict[str, Any]:
        return self._list_by('author_id', author_id)

    def get_donations_by_post(self, post_id: str) -> Dict[str, Any]:
        return self._list_by('post_id', post_id)

    def get_donations_by_donor(self, donor_id: str) -> Dict[str, Any]:
        return self._list_by('donor_id', donor_id)
