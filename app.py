"""
Main Flask application for the expense tracker API.
"""
import os
import logging

from flask import Flask, jsonify, request, redirect
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from extensions import db, limiter, cors
from config import config, get_config_name
from errors import ApiError
from blueprints import register_blueprints

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Build and configure the Flask app.

    Args:
        config_name: Key into config.config; defaults to the FLASK_ENV/TESTING choice

    Raises:
        RuntimeError: If a required setting (signing secret, database URL) is missing
    """
    config_name = config_name or get_config_name()
    config_class = config[config_name]

    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.validate(app.config)

    logging.basicConfig(level=app.config['LOG_LEVEL'])

    # Initialize extensions with app
    db.init_app(app)
    limiter.init_app(app)  # Reads RATELIMIT_* from app.config
    cors.init_app(app, resources={
        r'/api/*': {'origins': app.config['CORS_ORIGINS']},
        r'/login': {'origins': app.config['CORS_ORIGINS']},
        r'/register': {'origins': app.config['CORS_ORIGINS']},
        r'/export-excel': {'origins': app.config['CORS_ORIGINS']},
    })

    register_blueprints(app)
    register_error_handlers(app)
    register_security_middleware(app)
    register_cli(app)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    init_db(app)

    logger.info(
        f"Expense tracker started with '{config_name}' config "
        f"({app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]} database)"
    )
    return app


# ============================================================================
# Error Handling
# ============================================================================

def register_error_handlers(app):
    """Render every error as a {"message": ...} JSON body."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        db.session.rollback()
        logger.exception(f"Database error on {request.method} {request.path}")
        return jsonify({'message': 'Server error. Try again later.'}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        response = jsonify({'message': error.description or error.name})
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'message': 'Internal server error'}), 500


# ============================================================================
# Security Middleware
# ============================================================================

def register_security_middleware(app):

    @app.before_request
    def enforce_https():
        """Redirect HTTP to HTTPS in production."""
        if not app.debug and not app.testing:
            # Check X-Forwarded-Proto header (set by reverse proxies)
            if request.headers.get('X-Forwarded-Proto') == 'http':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        # Strict Transport Security (HTTPS only in production)
        if not app.debug and not app.testing:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response


# ============================================================================
# Schema Setup
# ============================================================================

def init_db(app):
    """Create tables if they don't exist and apply the legacy column rename."""
    with app.app_context():
        db.create_all()
        if app.config.get('AUTO_MIGRATE_SCHEMA'):
            migrate_legacy_schema()


def migrate_legacy_schema():
    """Rename expenses.description to expenses.title on databases created by older versions.

    Returns:
        bool: True if the column was renamed
    """
    inspector = inspect(db.engine)
    if 'expenses' not in inspector.get_table_names():
        return False

    columns = {col['name'] for col in inspector.get_columns('expenses')}
    if 'description' not in columns or 'title' in columns:
        return False

    try:
        db.session.execute(text('ALTER TABLE expenses RENAME COLUMN description TO title'))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to rename expenses.description to expenses.title")
        raise

    logger.info("Renamed legacy column expenses.description to expenses.title")
    return True


def register_cli(app):

    @app.cli.command('init-db')
    def init_db_command():
        """Create database tables."""
        db.create_all()
        print('Database initialized!')

    @app.cli.command('migrate-schema')
    def migrate_schema_command():
        """Rename the legacy expenses.description column to title."""
        if migrate_legacy_schema():
            print('Renamed expenses.description to expenses.title')
        else:
            print('Schema already up to date')


if __name__ == '__main__':
    app = create_app()

    # Allow disabling auto-reload for stable testing (NO_RELOAD=1 python app.py)
    use_reloader = os.environ.get('NO_RELOAD') != '1'

    # Debug mode is set by config (True for development, False for production)
    app.run(debug=app.debug, host='0.0.0.0', port=app.config['PORT'], use_reloader=use_reloader)
