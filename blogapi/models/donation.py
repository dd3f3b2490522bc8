# blogapi/models/donation.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from blogapi.utils.datetime_utils import DateTimeUtils


@dataclass
class Donation:
    """
    Document shape of the Firestore 'donations' collection.
    The document id is the payment processor's checkout session id.
    """
    donation_id: str
    post_id: str
    author_id: str  # recipient
    amount: float
    donor_id: Optional[str] = None
    currency: str = "usd"
    created_at: datetime = field(default_factory=DateTimeUtils.now)
