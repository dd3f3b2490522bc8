# blogapi/api/uploads/routes.py
import logging

from flask import Blueprint, current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import Schema, fields, validate

from blogapi.utils.responses import api_response

logger = logging.getLogger(__name__)

uploads_bp = Blueprint('uploads_bp', __name__)


class UploadUrlSchema(Schema):
    upload_type = fields.Str(required=True, validate=validate.OneOf(["post_image", "user_avatar"]))
    filename = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    content_type = fields.Str(required=True, validate=validate.Regexp(
        r'^image/[\w.+-]+$', error="Only image uploads are allowed"))


@uploads_bp.route('/url', methods=['POST'])
@jwt_required()
def get_upload_url():
    """
    Issues a pre-signed URL the client PUTs the file to directly.
    The returned ``file_path`` is what gets stored on the post or user afterwards.
    """
    user_id = get_jwt_identity()
    data = UploadUrlSchema().load(request.get_json(silent=True) or {})

    storage_service = current_app.services['storage']
    url_info = storage_service.generate_upload_url(user_id, data['upload_type'], data['filename'], data['content_type'])
    logger.info(f"Upload URL issued (user_id: {user_id}, path: {url_info['file_path']})")
    return api_response(url_info, "Upload URL created")
