"""
Export routes.

Endpoints:
- GET /export-excel - Download all of the current user's expenses as .xlsx
"""
from datetime import datetime

from flask import g, send_file

from api_decorators import jwt_required
from services.expense_service import ExpenseService
from services.export_service import XLSX_MIMETYPE, build_expense_workbook, sanitize_filename
from blueprints.export import export_bp


@export_bp.route('/export-excel', methods=['GET'])
@jwt_required
def export_excel():
    """Export all expenses as an Excel workbook."""
    expenses = ExpenseService.list_expenses(g.current_user_id)
    workbook = build_expense_workbook(expenses)

    filename = sanitize_filename(
        f"expenses_{g.current_user.username}_{datetime.utcnow().strftime('%Y%m%d')}"
    )
    return send_file(
        workbook,
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f'{filename}.xlsx'
    )
