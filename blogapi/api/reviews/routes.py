# blogapi/api/reviews/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from blogapi.api.reviews.schemas import ReviewResponseSchema, ReviewCreateSchema
from blogapi.utils.pagination import parse_pagination_args
from blogapi.utils.responses import api_response

reviews_bp = Blueprint('reviews_bp', __name__)


@reviews_bp.route('/post/<string:post_id>', methods=['GET'])
def get_reviews(post_id: str):
    review_service = current_app.services['reviews']
    result = review_service.get_reviews_for_post(post_id, parse_pagination_args(request.args))
    pagination = result['pagination']
    return api_response({
        "reviews": ReviewResponseSchema(many=True).dump(result['reviews']),
        "averageRating": result['average_rating'],
        "totalReviews": pagination.total,
        "pagination": pagination.to_dict(),
    }, "Reviews fetched successfully")


@reviews_bp.route('/post/<string:post_id>', methods=['POST'])
@jwt_required()
def submit_review(post_id: str):
    """
    Creates the caller's review (201) or overwrites the existing one (200).
    """
    review_service = current_app.services['reviews']
    data = ReviewCreateSchema().load(request.get_json(silent=True) or {})
    review, created = review_service.create_or_update_review(
        get_jwt_identity(), post_id, data['rating'], data.get('comment'))
    body = {"review": ReviewResponseSchema().dump(review)}
    if created:
        return api_response(body, "Review created successfully", 201)
    return api_response(body, "Review updated successfully", 200)


@reviews_bp.route('/user/<string:post_id>', methods=['GET'])
@jwt_required()
def get_my_review(post_id: str):
    review_service = current_app.services['reviews']
    review = review_service.get_user_review(get_jwt_identity(), post_id)
    if review is None:
        return api_response({"review": None}, "No review found")
    return api_response({"review": ReviewResponseSchema().dump(review)}, "User review fetched successfully")


@reviews_bp.route('/<string:review_id>', methods=['DELETE'])
@jwt_required()
def delete_review(review_id: str):
    """[Owner only]"""
    review_service = current_app.services['reviews']
    review_service.delete_review(review_id, get_jwt_identity())
    return api_response({}, "Review deleted successfully")
