# blogapi/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from blogapi.utils.datetime_utils import DateTimeUtils


@dataclass
class Post:
    """
    Document shape of the Firestore 'posts' collection.
    """
    post_id: str
    author: Dict[str, Any]  # {'user_id', 'username', 'full_name', 'avatar_url'}
    title: str
    content: str
    image: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    views: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
