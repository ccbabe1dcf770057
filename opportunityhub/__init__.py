from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from config import Config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    migrate.init_app(app, db)

    # Initialize Celery with app context
    from opportunityhub.celery import make_celery
    make_celery(app)

    from opportunityhub.api import bp as api_bp
    from opportunityhub.auth import bp as auth_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)

    # Register CLI commands
    from opportunityhub.cli import register_commands
    register_commands(app)

    return app


from opportunityhub import models
