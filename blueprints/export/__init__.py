"""
Export blueprint: spreadsheet download of a user's expenses.
"""
from flask import Blueprint

export_bp = Blueprint('export', __name__)

from blueprints.export import routes  # noqa: F401, E402
