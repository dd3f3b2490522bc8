# blogapi/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from blogapi.utils.datetime_utils import DateTimeUtils


@dataclass
class Comment:
    """
    Document shape of the Firestore 'comments' collection.
    ``parent_id`` is None for top-level comments and otherwise names a top-level comment of the same post.
    """
    comment_id: str
    post_id: str
    author: Dict[str, Any]
    content: str
    parent_id: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
