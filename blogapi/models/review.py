# blogapi/models/review.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from blogapi.utils.datetime_utils import DateTimeUtils


def review_document_id(user_id: str, post_id: str) -> str:
    """One review per (author, post): the pair is the document id."""
    return f"{user_id}_{post_id}"


@dataclass
class Review:
    """
    Document shape of the Firestore 'reviews' collection.
    """
    review_id: str
    post_id: str
    author: Dict[str, Any]
    rating: int
    comment: str = ""
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
