# blogapi/api/ai/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from marshmallow import Schema, fields, validate

from blogapi.utils.responses import api_response

ai_bp = Blueprint('ai_bp', __name__)


class GenerateContentSchema(Schema):
    prompt = fields.Str(required=True, validate=validate.Length(min=1, max=2000))


@ai_bp.route('/generate-content', methods=['POST'])
@jwt_required()
def generate_content():
    data = GenerateContentSchema().load(request.get_json(silent=True) or {})
    content = current_app.services['ai'].generate_content(data['prompt'].strip())
    return api_response({"content": content}, "Content generated successfully")
