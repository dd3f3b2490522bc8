# blogapi/api/dashboard/services.py
import logging
from typing import Any, Dict

from blogapi.api.reviews.services import average_rating
from blogapi.services.firestore_service import FirestoreService

logger = logging.getLogger(__name__)

RECENT_POSTS = 5


class DashboardService(FirestoreService):
    """
    Per-author totals for the personal dashboard.
    """

    def __init__(self, db=None, post_service=None, review_service=None):
        super().__init__(db)
        self.post_service = post_service
        self.review_service = review_service

    def get_stats(self, user_id: str) -> Dict[str, Any]:
        posts = self.post_service.get_posts_by_author(user_id)  # newest first
        post_ids = [p['post_id'] for p in posts]

        total_comments = 0
        reviews = []
        if post_ids:
            total_comments = self._count_in(self.comments_ref, 'post_id', post_ids)
            reviews = self.review_service.get_reviews_for_posts(post_ids)

        stats = {
            "totalPosts": len(posts),
            "totalViews": sum(p.get('views', 0) for p in posts),
            "totalComments": total_comments,
            "totalReviews": len(reviews),
            "averageRating": average_rating(r['rating'] for r in reviews),
        }
        logger.info(f"Dashboard stats computed (user_id: {user_id}, posts: {stats['totalPosts']})")
        return {"stats": stats, "recent_posts": posts[:RECENT_POSTS]}
