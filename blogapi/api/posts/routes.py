# blogapi/api/posts/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from blogapi.api.posts.schemas import PostCreateSchema, PostResponseSchema, PostUpdateSchema
from blogapi.utils.pagination import parse_pagination_args
from blogapi.utils.responses import api_response

posts_bp = Blueprint('posts_bp', __name__)


def _listing(posts, pagination):
    return {
        "blogs": PostResponseSchema(many=True).dump(posts),
        "pagination": pagination.to_dict(),
    }


@posts_bp.route('', methods=['GET'])
def list_posts():
    """
    Public post listing, newest first.
    Query: page, limit, search (title/content/author), category, tag.
    """
    post_service = current_app.services['posts']
    pagination = parse_pagination_args(request.args)
    posts, pagination = post_service.list_posts(
        pagination,
        search=request.args.get('search'),
        category=request.args.get('category') or None,
        tag=request.args.get('tag') or None,
    )
    return api_response(_listing(posts, pagination), "Blogs fetched successfully")


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    post = post_service.create_post(get_jwt_identity(), data)
    return api_response({"blog": PostResponseSchema().dump(post)}, "Blog created successfully", 201)


@posts_bp.route('/user', methods=['GET'])
@jwt_required()
def list_my_posts():
    """Posts written by the signed-in user."""
    post_service = current_app.services['posts']
    pagination = parse_pagination_args(request.args)
    posts, pagination = post_service.list_posts(pagination, author_id=get_jwt_identity())
    return api_response(_listing(posts, pagination), "User blogs fetched successfully")


@posts_bp.route('/author/<string:author_id>', methods=['GET'])
def list_posts_by_author(author_id: str):
    post_service = current_app.services['posts']
    pagination = parse_pagination_args(request.args)
    posts, pagination = post_service.list_posts(pagination, author_id=author_id)
    return api_response(_listing(posts, pagination), "Blogs by author fetched successfully")


@posts_bp.route('/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    """Single post read. Each read counts one view."""
    post_service = current_app.services['posts']
    post = post_service.get_post(post_id)
    return api_response({"blog": PostResponseSchema().dump(post)}, "Blog fetched successfully")


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    """[Owner only] Updates a post. Omitted optional fields keep their values."""
    post_service = current_app.services['posts']
    data = PostUpdateSchema().load(request.get_json(silent=True) or {})
    post = post_service.update_post(post_id, get_jwt_identity(), data)
    return api_response({"blog": PostResponseSchema().dump(post)}, "Blog updated successfully")


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """[Owner only] Deletes a post with its comments and reviews."""
    post_service = current_app.services['posts']
    post_service.delete_post(post_id, get_jwt_identity())
    return api_response({}, "Blog deleted successfully")
