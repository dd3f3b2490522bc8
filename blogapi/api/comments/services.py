# blogapi/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore

from blogapi.core.exceptions import BadRequestError, NotFoundError
from blogapi.core.security import ensure_owner
from blogapi.models.comment import Comment
from blogapi.services.firestore_service import FirestoreService
from blogapi.utils.datetime_utils import DateTimeUtils
from blogapi.utils.pagination import Pagination

logger = logging.getLogger(__name__)


class CommentService(FirestoreService):
    """
    Comment logic.
    - Threads are one level deep: a reply always points at a top-level comment.
    - Deleting a comment removes its replies too.
    """

    def __init__(self, db=None, auth_service=None):
        super().__init__(db)
        self.auth_service = auth_service

    def _require_post(self, post_id: str) -> Dict[str, Any]:
        post = self._get(self.posts_ref, post_id)
        if not post:
            raise NotFoundError("Blog not found", error_code="POST_NOT_FOUND")
        return post

    def _resolve_parent(self, post_id: str, parent_id: Optional[str]) -> Optional[str]:
        """
        Returns the id replies should be stored against.
        A reply to a reply is attached to that reply's top-level ancestor.
        """
        if not parent_id:
            return None
        parent = self._get(self.comments_ref, parent_id)
        if not parent:
            raise NotFoundError("Parent comment not found", error_code="PARENT_COMMENT_NOT_FOUND")
        if parent.get('post_id') != post_id:
            raise BadRequestError("Parent comment belongs to a different blog", error_code="INVALID_PARENT_COMMENT")
        return parent.get('parent_id') or parent['comment_id']

    def create_comment(self, user_id: str, post_id: str, content: str,
                       parent_id: Optional[str] = None) -> Dict[str, Any]:
        self._require_post(post_id)
        resolved_parent = self._resolve_parent(post_id, parent_id)
        author = self.auth_service.get_author_summary(user_id)

        comment = Comment(
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            author=author,
            content=content,
            parent_id=resolved_parent,
        )
        comment_data = DateTimeUtils.for_firestore(asdict(comment))
        self.comments_ref.document(comment.comment_id).set(comment_data)
        return comment_data

    def get_comments_for_post(self, post_id: str, pagination: Pagination) -> Tuple[List[Dict[str, Any]], Pagination]:
        """
        Top-level comments newest first, paginated. Each carries its replies oldest first.
        ``total`` counts top-level comments only.
        """
        self._require_post(post_id)
        top_level = self.comments_ref.where('post_id', '==', post_id).where('parent_id', '==', None)
        total = self._count(top_level)
        if pagination.offset >= total:
            return [], pagination.with_total(total)

        query = top_level.order_by('created_at', direction=firestore.Query.DESCENDING) \
            .offset(pagination.offset).limit(pagination.limit)
        comments = self._stream(query)
        for comment in comments:
            comment['replies'] = self.get_replies(comment['comment_id'])
        return comments, pagination.with_total(total)

    def get_replies(self, comment_id: str) -> List[Dict[str, Any]]:
        query = self.comments_ref.where('parent_id', '==', comment_id) \
            .order_by('created_at', direction=firestore.Query.ASCENDING)
        return self._stream(query)

    def update_comment(self, comment_id: str, user_id: str, content: str) -> Dict[str, Any]:
        comment_ref = self.comments_ref.document(comment_id)
        comment = ensure_owner(self._snapshot_to_dict(comment_ref.get()), user_id, "Comment")

        changes = {'content': content, 'updated_at': DateTimeUtils.now()}
        comment_ref.update(changes)
        comment.update(changes)
        return comment

    def delete_comment(self, comment_id: str, user_id: str) -> int:
        """Deletes a comment and all replies pointing at it. Returns the number of removed documents."""
        comment_ref = self.comments_ref.document(comment_id)
        ensure_owner(self._snapshot_to_dict(comment_ref.get()), user_id, "Comment")

        reply_refs = [doc.reference for doc in self.comments_ref.where('parent_id', '==', comment_id).stream()]
        try:
            return self._delete_refs(reply_refs + [comment_ref])
        except Exception as e:
            logger.error(f"Failed to delete comment (comment_id: {comment_id}): {e}", exc_info=True)
            raise
