"""
Expenses blueprint: authenticated expense CRUD and spending reports.
"""
from flask import Blueprint

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api')

from blueprints.expenses import routes  # noqa: F401, E402
