# blogapi/api/comments/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from blogapi.api.comments.schemas import CommentCreateSchema, CommentResponseSchema, CommentUpdateSchema
from blogapi.utils.pagination import parse_pagination_args
from blogapi.utils.responses import api_response

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/post/<string:post_id>', methods=['GET'])
def get_comments(post_id: str):
    """
    Threaded comments of a post: paginated top-level comments, each with its replies.
    """
    comment_service = current_app.services['comments']
    pagination = parse_pagination_args(request.args)
    comments, pagination = comment_service.get_comments_for_post(post_id, pagination)
    return api_response({
        "comments": CommentResponseSchema(many=True).dump(comments),
        "pagination": pagination.to_dict(),
    }, "Comments fetched successfully")


@comments_bp.route('', methods=['POST'])
@jwt_required()
def create_comment():
    """Comments on a post, or replies when ``parent_id`` is given."""
    comment_service = current_app.services['comments']
    data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    comment = comment_service.create_comment(
        get_jwt_identity(), data['post_id'], data['content'], data.get('parent_id'))
    return api_response({"comment": CommentResponseSchema().dump(comment)}, "Comment created successfully", 201)


@comments_bp.route('/<string:comment_id>', methods=['PUT'])
@jwt_required()
def update_comment(comment_id: str):
    comment_service = current_app.services['comments']
    data = CommentUpdateSchema().load(request.get_json(silent=True) or {})
    comment = comment_service.update_comment(comment_id, get_jwt_identity(), data['content'])
    return api_response({"comment": CommentResponseSchema().dump(comment)}, "Comment updated successfully")


@comments_bp.route('/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """[Owner only] Deletes a comment and its replies."""
    comment_service = current_app.services['comments']
    deleted = comment_service.delete_comment(comment_id, get_jwt_identity())
    return api_response({"deleted": deleted}, "Comment deleted successfully")
