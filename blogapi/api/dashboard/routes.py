# blogapi/api/dashboard/routes.py
from flask import Blueprint, current_app
from flask_jwt_extended import get_jwt_identity, jwt_required

from blogapi.api.posts.schemas import PostResponseSchema
from blogapi.utils.responses import api_response

dashboard_bp = Blueprint('dashboard_bp', __name__)


@dashboard_bp.route('/stats', methods=['GET'])
@jwt_required()
def get_dashboard_stats():
    """Totals over the signed-in user's posts plus the five most recent ones."""
    dashboard_service = current_app.services['dashboard']
    result = dashboard_service.get_stats(get_jwt_identity())
    return api_response({
        "stats": result['stats'],
        "recentBlogs": PostResponseSchema(many=True).dump(result['recent_posts']),
    }, "Dashboard stats fetched successfully")
