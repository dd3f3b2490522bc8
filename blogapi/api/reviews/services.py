# blogapi/api/reviews/services.py
import logging
from dataclasses import asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from firebase_admin import firestore

from blogapi.core.exceptions import NotFoundError
from blogapi.core.security import ensure_owner
from blogapi.models.review import Review, review_document_id
from blogapi.services.firestore_service import FirestoreService
from blogapi.utils.datetime_utils import DateTimeUtils
from blogapi.utils.pagination import Pagination, paginate

logger = logging.getLogger(__name__)


def average_rating(ratings: Iterable[float]) -> float:
    """Arithmetic mean rounded half-up to one decimal. 0 when there are no ratings."""
    ratings = list(ratings)
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


class ReviewService(FirestoreService):
    """
    Star ratings. Each author has at most one review per post, keyed by ``{user_id}_{post_id}``.
    """

    def __init__(self, db=None, auth_service=None):
        super().__init__(db)
        self.auth_service = auth_service

    def _require_post(self, post_id: str) -> Dict[str, Any]:
        post = self._get(self.posts_ref, post_id)
        if not post:
            raise NotFoundError("Blog not found", error_code="POST_NOT_FOUND")
        return post

    def create_or_update_review(self, user_id: str, post_id: str, rating: int,
                                comment: Optional[str] = None) -> Tuple[Dict[str, Any], bool]:
        """
        Inserts the caller's review, or overwrites it in place when one exists.
        :return: (review, created)
        """
        self._require_post(post_id)
        review_ref = self.reviews_ref.document(review_document_id(user_id, post_id))
        existing = self._snapshot_to_dict(review_ref.get())

        if existing:
            changes = {'rating': rating, 'updated_at': DateTimeUtils.now()}
            if comment:
                changes['comment'] = comment
            review_ref.update(changes)
            existing.update(changes)
            return existing, False

        review = Review(
            review_id=review_ref.id,
            post_id=post_id,
            author=self.auth_service.get_author_summary(user_id),
            rating=rating,
            comment=comment or "",
        )
        review_data = DateTimeUtils.for_firestore(asdict(review))
        review_ref.set(review_data)
        logger.info(f"Review created (review_id: {review_ref.id}, rating: {rating})")
        return review_data, True

    def get_reviews_for_post(self, post_id: str, pagination: Pagination) -> Dict[str, Any]:
        """One page of reviews, newest first, with the average over all of the post's reviews."""
        self._require_post(post_id)
        by_post = self.reviews_ref.where('post_id', '==', post_id)

        all_reviews = self._stream(by_post.order_by('created_at', direction=firestore.Query.DESCENDING))
        page, pagination = paginate(all_reviews, pagination)
        return {
            "reviews": page,
            "average_rating": average_rating(r['rating'] for r in all_reviews),
            "pagination": pagination,
        }

    def get_user_review(self, user_id: str, post_id: str) -> Optional[Dict[str, Any]]:
        return self._get(self.reviews_ref, review_document_id(user_id, post_id))

    def delete_review(self, review_id: str, user_id: str) -> None:
        review_ref = self.reviews_ref.document(review_id)
        ensure_owner(self._snapshot_to_dict(review_ref.get()), user_id, "Review")
        review_ref.delete()

    def get_reviews_for_posts(self, post_ids: List[str]) -> List[Dict[str, Any]]:
        return self._stream_in(self.reviews_ref, 'post_id', post_ids)
