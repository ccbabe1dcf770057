import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'opportunityhub.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Optional shared key for the JSON API (X-API-Key header)
    API_KEY = os.environ.get('API_KEY')

    # Celery
    CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL') or 'redis://localhost:6379/0'
    CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND') or 'redis://localhost:6379/0'

    # Collectors
    COLLECTOR_TIMEOUT = int(os.environ.get('COLLECTOR_TIMEOUT', 30))
    COLLECTOR_MAX_ITEMS = int(os.environ.get('COLLECTOR_MAX_ITEMS', 10))
    COLLECTOR_USER_AGENT = os.environ.get('COLLECTOR_USER_AGENT') or (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/124.0 Safari/537.36'
    )

    # Normalization: order of the first two components in "A/B/YYYY" deadlines
    DEADLINE_DATE_ORDER = os.environ.get('DEADLINE_DATE_ORDER', 'MDY')

    # Quality scoring policy
    SCORING_POINTS = {
        'title': 20,
        'organization': 20,
        'url': 20,
        'description': 20,
        'deadline': 10,
        'prize': 10,
        'location': 20,
    }
    VERIFIED_THRESHOLD = int(os.environ.get('VERIFIED_THRESHOLD', 80))
    PENDING_THRESHOLD = int(os.environ.get('PENDING_THRESHOLD', 60))

    # Exports
    EXPORTS_DIR = os.environ.get('EXPORTS_DIR') or os.path.join(basedir, 'exports')
    EXPORT_HISTORY_LIMIT = 20

    # Google Drive
    GOOGLE_CLIENT_ID = os.environ.get('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.environ.get('GOOGLE_CLIENT_SECRET')
    GOOGLE_REDIRECT_URI = os.environ.get('GOOGLE_REDIRECT_URI') or \
        'http://localhost:5000/api/auth/google/callback'
    DRIVE_FOLDER_NAME = os.environ.get('DRIVE_FOLDER_NAME', 'OpportunityHub')
    DRIVE_SESSION_TTL_HOURS = int(os.environ.get('DRIVE_SESSION_TTL_HOURS', 24))
    FRONTEND_URL = os.environ.get('FRONTEND_URL') or 'http://localhost:5173'

    # Pagination
    ITEMS_PER_PAGE = 100
