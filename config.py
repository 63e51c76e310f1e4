import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SESSION_SECRET') or os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None

    # External user service ("who am I", login, student record)
    IDENTITY_API_URL = os.environ.get('IDENTITY_API_URL', 'http://localhost:5000')
    IDENTITY_API_TIMEOUT = int(os.environ.get('IDENTITY_API_TIMEOUT', 15))

    # Single switch for the mock identity; resolved once in create_app
    DEV_MODE = _env_flag('ACADEMY_DEV_MODE')

    # firestore | memory | session (cookie, capped at MAX_COOKIE_SIZE)
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'firestore')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID', '')

    MAX_CONTENT_LENGTH = 100 * 1024 * 1024
    UPLOAD_BASE_URL = os.environ.get('UPLOAD_BASE_URL', 'https://storage.example.com')
    SEED_SAMPLE_VIDEOS = _env_flag('SEED_SAMPLE_VIDEOS', 'true')

    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '')
    PING_MESSAGE = os.environ.get('PING_MESSAGE', 'ping')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEV_MODE = True
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'memory')


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    DEV_MODE = False
    STORAGE_BACKEND = 'memory'
    SEED_SAMPLE_VIDEOS = False
    IDENTITY_API_URL = 'http://identity.test'
