import pytest

from config import Config
from opportunityhub import create_app, db
from opportunityhub.models import CollectedItem, DataSource


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    API_KEY = None
    CELERY_BROKER_URL = 'memory://'
    CELERY_RESULT_BACKEND = 'cache+memory://'
    GOOGLE_CLIENT_ID = None
    GOOGLE_CLIENT_SECRET = None
    DEADLINE_DATE_ORDER = 'MDY'


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig)
    app.config['EXPORTS_DIR'] = str(tmp_path / 'exports')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_source(app):
    def _add(user_id, category, name=None, url=None, is_active=True):
        source = DataSource(
            user_id=user_id,
            name=name or f'{category} source',
            url=url or f'https://example.com/{category}',
            category=category,
            is_active=is_active,
        )
        db.session.add(source)
        db.session.commit()
        return source
    return _add


@pytest.fixture
def add_item(app):
    def _add(user_id, title, url=None, category='job', status='verified', score=100, **fields):
        item = CollectedItem(
            user_id=user_id,
            title=title,
            url=url,
            category=category,
            status=status,
            quality_score=score,
            **fields,
        )
        db.session.add(item)
        db.session.commit()
        return item
    return _add
