import os
from flask import Flask, jsonify, redirect, url_for
from werkzeug.exceptions import HTTPException

# Extensions live in extensions.py (avoids circular imports)
from extensions import db, migrate, login_manager, mail, csrf, executor, limiter


def create_app(config_name=None):
    """
    Application Factory Pattern
    Builds and configures the Flask application instance
    """
    app = Flask(__name__)

    # Load configuration
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    from config import config
    config_class = config[config_name]
    app.config.from_object(config_class)
    config_class.init_app(app)

    # Initialise extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    mail.init_app(app)
    csrf.init_app(app)
    executor.init_app(app)
    limiter.init_app(app)

    # Flask-Login: anonymous requests go to the landing view
    login_manager.login_view = 'public.landing'
    login_manager.login_message = 'Please sign in to access this page.'
    login_manager.login_message_category = 'warning'

    # Session store: user loader resolves the identity or fails closed
    from modules.auth.session import init_session_store
    init_session_store(app)

    # Blueprints (modules)
    register_blueprints(app)

    # Error handlers (JSON error bodies)
    register_error_handlers(app)

    return app


def register_blueprints(app):
    """
    Registers every blueprint (application module)
    """

    # Auth module
    from modules.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    # Public module (landing page)
    from modules.public import public_bp
    app.register_blueprint(public_bp)

    # Dashboards
    from modules.dashboard import dashboard_bp
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')

    # Layout shell (header, navigation)
    from modules.layout import layout_bp
    app.register_blueprint(layout_bp, url_prefix='/layout')

    # Notifications
    from modules.notifications import notifications_bp
    app.register_blueprint(notifications_bp, url_prefix='/notifications')

    # Surveys (CRUD, question builder, status transitions)
    from modules.surveys import surveys_bp
    app.register_blueprint(surveys_bp, url_prefix='/surveys')

    # Responses (answering surveys)
    from modules.responses import responses_bp
    app.register_blueprint(responses_bp, url_prefix='/responses')

    # Reports
    from modules.reports import reports_bp
    app.register_blueprint(reports_bp, url_prefix='/reports')

    # Admin module (user management)
    from modules.admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix='/admin')

    # Catch-all: unknown paths go back to the landing page
    @app.route('/<path:unknown_path>')
    def catch_all(unknown_path):
        return redirect(url_for('public.landing'))


def register_error_handlers(app):
    """Registers JSON error handlers"""
    from utils.exceptions import AppError

    @app.errorhandler(AppError)
    def handle_app_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            'success': False,
            'error': error.description
        }), error.code

    @app.errorhandler(500)
    def internal_server_error(error):
        db.session.rollback()  # roll back in case of a database error
        app.logger.error(f'Unhandled error: {error}')
        return jsonify({
            'success': False,
            'error': 'Internal server error'
        }), 500


# Run the application (development only)
if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5001, debug=True)
