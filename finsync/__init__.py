"""
Application factory and initialization.
"""

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from dotenv import load_dotenv
from sqlalchemy.engine import make_url
import logging
import os

# Load environment variables
load_dotenv()

# Initialize extensions
db = SQLAlchemy()

logger = logging.getLogger(__name__)


def describe_database(uri: str) -> str:
    """Backend and database name, without credentials."""
    url = make_url(uri)
    return f"{url.get_backend_name()}:{url.database or 'memory'}"


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret-key-change-me')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///finsync.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ECHO'] = os.getenv('SQLALCHEMY_ECHO', 'False') == 'True'
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO').upper()

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    # Initialize extensions with app
    db.init_app(app)

    # One store for the life of the process; services receive it explicitly
    from finsync.store import RecordStore
    app.extensions['record_store'] = RecordStore(db.session)

    from finsync.utils.errors import FinSyncError

    @app.errorhandler(FinSyncError)
    def handle_finsync_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    # Register blueprints
    from finsync.routes.main import main_bp
    from finsync.routes.users import users_bp
    from finsync.routes.income import income_bp
    from finsync.routes.commitments import commitments_bp
    from finsync.routes.payments import payments_bp
    from finsync.routes.dashboard import dashboard_bp
    from finsync.routes.groups import groups_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(income_bp)
    app.register_blueprint(commitments_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(groups_bp)

    from finsync.utils.init_db import register_commands
    register_commands(app)

    # Create database tables
    with app.app_context():
        import finsync.models  # noqa: F401  (registers tables on db.metadata)
        db.create_all()

    logger.debug("App created with database %s", describe_database(app.config['SQLALCHEMY_DATABASE_URI']))

    return app
