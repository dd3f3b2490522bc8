# blogapi/api/auth/routes.py
from flask import Blueprint, current_app, request
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
)

from blogapi.api.auth.schemas import LoginSchema, LogoutSchema, RegisterSchema, UserResponseSchema
from blogapi.core.exceptions import BadRequestError
from blogapi.utils.responses import api_response

auth_bp = Blueprint('auth_bp', __name__)


def _issue_tokens(user: dict) -> dict:
    identity = user['user_id']
    return {
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "user": UserResponseSchema().dump(user),
    }


@auth_bp.route('/register', methods=['POST'])
def register():
    """Creates an account and signs the new user in."""
    auth_service = current_app.services['auth']
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user = auth_service.register_user(data)
    return api_response(_issue_tokens(user), "User registered successfully", 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = auth_service.authenticate(data.get('email') or data.get('username'), data['password'])
    return api_response(_issue_tokens(user), "Logged in successfully")


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    auth_service = current_app.services['auth']
    user = auth_service.get_user(get_jwt_identity())
    return api_response({"user": UserResponseSchema().dump(user)}, "Current user fetched successfully")


@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """Exchanges a valid refresh token for a new access token."""
    access_token = create_access_token(identity=get_jwt_identity())
    return api_response({"access_token": access_token}, "Token refreshed successfully")


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """Revokes the presented access token and, when supplied, the refresh token."""
    auth_service = current_app.services['auth']
    data = LogoutSchema().load(request.get_json(silent=True) or {})

    refresh_payload = None
    if data.get('refresh_token'):
        try:
            refresh_payload = decode_token(data['refresh_token'], allow_expired=True)
        except Exception as e:
            raise BadRequestError("Invalid refresh token", error_code="INVALID_TOKEN") from e
        if refresh_payload.get('sub') != get_jwt_identity():
            raise BadRequestError("Refresh token does not belong to this user", error_code="INVALID_TOKEN")

    auth_service.logout_user(get_jwt(), refresh_payload)
    return api_response({}, "Logged out successfully")
