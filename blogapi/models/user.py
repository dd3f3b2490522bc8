# blogapi/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from blogapi.utils.datetime_utils import DateTimeUtils


@dataclass
class User:
    """
    Document shape of the Firestore 'users' collection.
    """
    user_id: str
    username: str
    email: str
    full_name: str
    password_hash: str
    avatar_url: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

