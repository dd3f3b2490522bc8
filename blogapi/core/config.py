# blogapi/core/config.py

import os
from datetime import timedelta


def _csv(value: str):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Settings shared by every environment. Values come from the process environment (.env)."""
    # Signs and verifies access/refresh tokens.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv('JWT_ACCESS_TOKEN_MINUTES', '60')))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_REFRESH_TOKEN_DAYS', '14')))
    JWT_TOKEN_LOCATION = ['headers']

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    STRIPE_SECRET_KEY = os.getenv('STRIPE_SECRET_KEY')
    STRIPE_WEBHOOK_SECRET = os.getenv('STRIPE_WEBHOOK_SECRET')
    STRIPE_CURRENCY = os.getenv('STRIPE_CURRENCY', 'usd')
    # Checkout redirects land back on the frontend.
    CLIENT_URL = os.getenv('CLIENT_URL', 'http://localhost:5173')

    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')

    CORS_ORIGINS = _csv(os.getenv('CORS_ORIGINS', 'http://localhost:5173'))


class DevelopmentConfig(Config):
    """Local development: debug on, development Firebase project."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH') or Config.FIREBASE_CREDENTIALS_PATH


class TestingConfig(Config):
    """Test runs. The Firestore client is injected by the test suite."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    STRIPE_WEBHOOK_SECRET = 'whsec_test_secret'


class ProductionConfig(Config):
    DEBUG = False


config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig,
)
