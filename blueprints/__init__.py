"""
Flask blueprints for organizing routes by domain.
"""
from blueprints.auth import auth_bp
from blueprints.expenses import expenses_bp
from blueprints.export import export_bp


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(export_bp)
