# blogapi/__init__.py

# =====================================================================================
# 1. Environment variables (load before anything reads them)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - Settings and errors
from blogapi.core.config import config_by_name
from blogapi.core.exceptions import ApiError
from blogapi.utils.responses import api_response, error_response

# - API blueprints
from blogapi.api.auth.routes import auth_bp
from blogapi.api.posts.routes import posts_bp
from blogapi.api.comments.routes import comments_bp
from blogapi.api.reviews.routes import reviews_bp
from blogapi.api.donations.routes import donations_bp
from blogapi.api.dashboard.routes import dashboard_bp
from blogapi.api.uploads.routes import uploads_bp
from blogapi.api.ai.routes import ai_bp

# - Services
from blogapi.services.storage_service import StorageService
from blogapi.services.payment_service import PaymentService
from blogapi.services.ai_service import AIContentService
from blogapi.api.auth.services import AuthService
from blogapi.api.posts.services import PostService
from blogapi.api.comments.services import CommentService
from blogapi.api.reviews.services import ReviewService
from blogapi.api.donations.services import DonationService
from blogapi.api.dashboard.services import DashboardService

API_PREFIX = '/api/v1'


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name=None, db=None, services=None):
    """
    Flask application factory.

    :param config_name: key of ``config_by_name``. Defaults to ``FLASK_ENV`` or 'development'.
    :param db: Firestore client to use instead of the one from ``firebase_admin``.
    :param services: entries that replace the default ``app.services`` members (payments, storage, ai, ...).
    """
    # =====================================================================================
    # 3. Flask app and configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    jwt = JWTManager(app)
    CORS(app, resources={rf"{API_PREFIX}/*": {"origins": app.config['CORS_ORIGINS']}})

    if db is None:
        _init_firebase(app)
        db = firestore.client()

    # =====================================================================================
    # 5. Service instances in 'app.services' (dependency injection)
    # =====================================================================================
    overrides = services or {}
    app.services = {}

    # 5-1. Gateways with no dependencies on other services
    for name, service_class in (('storage', StorageService), ('payments', PaymentService), ('ai', AIContentService)):
        if name in overrides:
            app.services[name] = overrides[name]
            continue
        instance = service_class()
        instance.init_app(app)
        app.services[name] = instance

    # 5-2. Domain services, wired to the services they depend on
    auth_service = AuthService(db=db)
    app.services['auth'] = auth_service
    app.services['posts'] = PostService(db=db, auth_service=auth_service)
    app.services['comments'] = CommentService(db=db, auth_service=auth_service)
    app.services['reviews'] = ReviewService(db=db, auth_service=auth_service)
    app.services['donations'] = DonationService(db=db, payment_service=app.services['payments'])
    app.services['dashboard'] = DashboardService(
        db=db,
        post_service=app.services['posts'],
        review_service=app.services['reviews'],
    )
    for name, instance in overrides.items():
        app.services[name] = instance

    # =====================================================================================
    # 6. JWT callbacks
    # =====================================================================================
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return error_response("Not authorized, no token", 401, "AUTHORIZATION_REQUIRED")

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return error_response("Not authorized, invalid token", 401, "INVALID_TOKEN")

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return error_response("Token has expired", 401, "TOKEN_EXPIRED")

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return error_response("Token has been revoked", 401, "TOKEN_REVOKED")

    # =====================================================================================
    # 7. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix=f'{API_PREFIX}/users')
    app.register_blueprint(posts_bp, url_prefix=f'{API_PREFIX}/blogs')
    app.register_blueprint(comments_bp, url_prefix=f'{API_PREFIX}/comments')
    app.register_blueprint(reviews_bp, url_prefix=f'{API_PREFIX}/reviews')
    app.register_blueprint(donations_bp, url_prefix=f'{API_PREFIX}/donations')
    app.register_blueprint(dashboard_bp, url_prefix=f'{API_PREFIX}/dashboard')
    app.register_blueprint(uploads_bp, url_prefix=f'{API_PREFIX}/uploads')
    app.register_blueprint(ai_bp, url_prefix=f'{API_PREFIX}/ai')

    @app.route('/healthz', methods=['GET'])
    def healthz():
        return api_response({"status": "ok"}, "Service is healthy")

    # =====================================================================================
    # 8. Global error handlers
    # =====================================================================================
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return error_response(err.message, err.status_code, err.error_code, err.details)

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return error_response("Validation failed", 400, "VALIDATION_ERROR", err.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        if err.code == 404:
            return error_response("API route not found", 404, "NOT_FOUND")
        error_code = (err.name or "HTTP_ERROR").upper().replace(' ', '_')
        return error_response(err.description or err.name, err.code, error_code)

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return error_response("Internal server error", 500, "INTERNAL_SERVER_ERROR")

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
