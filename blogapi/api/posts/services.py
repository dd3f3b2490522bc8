# blogapi/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from firebase_admin import firestore

from blogapi.core.exceptions import NotFoundError
from blogapi.core.security import ensure_owner
from blogapi.models.post import Post
from blogapi.services.firestore_service import FirestoreService
from blogapi.utils.datetime_utils import DateTimeUtils
from blogapi.utils.pagination import Pagination, paginate

logger = logging.getLogger(__name__)

# Fields a post update may change. Anything else on the document is server-owned.
UPDATABLE_FIELDS = ('title', 'content', 'image', 'tags', 'category', 'description')


def matches_search(post: Dict[str, Any], term: str) -> bool:
    """Case-insensitive match against title, content and the author's names."""
    needle = term.casefold()
    author = post.get('author') or {}
    haystacks = (
        post.get('title'),
        post.get('content'),
        author.get('username'),
        author.get('full_name'),
    )
    return any(needle in (value or '').casefold() for value in haystacks)


class PostService(FirestoreService):
    """
    Blog post logic: creation, filtered listing, reads with view counting, and owner-only mutation.
    """

    def __init__(self, db=None, auth_service=None):
        super().__init__(db)
        self.auth_service = auth_service

    def create_post(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        author = self.auth_service.get_author_summary(user_id)
        post = Post(
            post_id=str(uuid.uuid4()),
            author=author,
            title=data['title'],
            content=data['content'],
            image=data.get('image'),
            description=data.get('description'),
            category=data.get('category'),
            tags=data.get('tags') or [],
        )
        post_data = DateTimeUtils.for_firestore(asdict(post))
        self.posts_ref.document(post.post_id).set(post_data)
        logger.info(f"Post created (post_id: {post.post_id}, author: {user_id})")
        return post_data

    def list_posts(self, pagination: Pagination, search: Optional[str] = None,
                   category: Optional[str] = None, tag: Optional[str] = None,
                   author_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Pagination]:
        """
        Lists posts newest first.
        Exact filters (author, category, tag) run in the store. The free-text ``search`` filter runs
        here, before slicing, so the totals describe the filtered set.
        """
        query = self.posts_ref
        if author_id:
            query = query.where('author.user_id', '==', author_id)
        if category:
            query = query.where('category', '==', category)
        if tag:
            query = query.where('tags', 'array_contains', tag)
        query = query.order_by('created_at', direction=firestore.Query.DESCENDING)

        search = (search or '').strip()
        if search:
            posts = [p for p in self._stream(query) if matches_search(p, search)]
            return paginate(posts, pagination)

        total = self._count(query)
        if pagination.offset >= total:
            return [], pagination.with_total(total)
        posts = self._stream(query.offset(pagination.offset).limit(pagination.limit))
        return posts, pagination.with_total(total)

    def get_post(self, post_id: str) -> Dict[str, Any]:
        """Reads a post and counts the view. The counter is incremented atomically in the store."""
        post_ref = self.posts_ref.document(post_id)
        post = self._snapshot_to_dict(post_ref.get())
        if not post:
            raise NotFoundError("Blog not found", error_code="POST_NOT_FOUND")

        post_ref.update({'views': firestore.Increment(1)})
        post['views'] = post.get('views', 0) + 1
        post['comments_count'] = self._count(self.comments_ref.where('post_id', '==', post_id))
        post['reviews_count'] = self._count(self.reviews_ref.where('post_id', '==', post_id))
        return post

    def update_post(self, post_id: str, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        post_ref = self.posts_ref.document(post_id)
        post = ensure_owner(self._snapshot_to_dict(post_ref.get()), user_id, "Blog")

        changes = {key: data[key] for key in UPDATABLE_FIELDS if data.get(key) is not None}
        changes['updated_at'] = DateTimeUtils.now()
        post_ref.update(changes)

        post.update(changes)
        return post

    def delete_post(self, post_id: str, user_id: str) -> None:
        """Deletes the post together with its comments and reviews."""
        post_ref = self.posts_ref.document(post_id)
        ensure_owner(self._snapshot_to_dict(post_ref.get()), user_id, "Blog")

        refs = [post_ref]
        refs += [doc.reference for doc in self.comments_ref.where('post_id', '==', post_id).stream()]
        refs += [doc.reference for doc in self.reviews_ref.where('post_id', '==', post_id).stream()]
        self._delete_refs(refs)
        logger.info(f"Post deleted (post_id: {post_id}, removed {len(refs) - 1} dependent documents)")

    def get_posts_by_author(self, author_id: str) -> List[Dict[str, Any]]:
        """All posts of one author, newest first. Used by the dashboard."""
        query = self.posts_ref.where('author.user_id', '==', author_id) \
            .order_by('created_at', direction=firestore.Query.DESCENDING)
        return self._stream(query)
