from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException
from config import Config
import logging

db = SQLAlchemy()
login_manager = LoginManager()

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    from tracker.utils.errors import TrackerError

    @app.errorhandler(TrackerError)
    def handle_tracker_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.__class__.__name__}: {error.message}")
        return jsonify({'success': False, 'error': error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    login_manager.init_app(app)

    from tracker.models import user

    @login_manager.user_loader
    def load_user(user_id):
        try:
            loaded_user = db.session.get(user.User, int(user_id))
        except (TypeError, ValueError):
            return None
        if loaded_user and loaded_user.is_active:
            return loaded_user
        return None

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    from tracker.routes import auth, assignments, classes, admin

    app.register_blueprint(auth.bp)
    app.register_blueprint(assignments.bp)
    app.register_blueprint(classes.bp)
    app.register_blueprint(admin.bp)

    register_error_handlers(app)

    with app.app_context():
        from tracker.utils import init_db
        init_db.initialize_database()

    from tracker.utils.scheduler import init_scheduler
    init_scheduler(app)

    return app
