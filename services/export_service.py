"""
Spreadsheet export.

Renders a user's expenses as an .xlsx workbook.
"""
import logging
import re
from io import BytesIO

import openpyxl
from openpyxl.utils import get_column_letter

from errors import ExportError

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

COLUMNS = [
    # (header, width)
    ('Category', 20),
    ('Amount', 15),
    ('Description', 30),
    ('Date', 20),
]


def sanitize_filename(name):
    """Sanitize filename to prevent header injection attacks."""
    if not name:
        return 'expenses'
    return re.sub(r'[^\w\-.]', '_', str(name))


def sanitize_cell(value):
    """Prefix values that a spreadsheet would evaluate as a formula."""
    if value is None:
        return ''
    value = str(value)
    if value and value[0] in ('=', '+', '-', '@', '|', '%', '\t', '\r', '\n'):
        return "'" + value
    return value


def build_expense_workbook(expenses):
    """
    Render expenses into an .xlsx file.

    Args:
        expenses: Iterable of Expense

    Returns:
        BytesIO: The workbook, positioned at the start

    Raises:
        ExportError: If the workbook could not be built
    """
    try:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = 'Expenses'

        ws.append([header for header, _ in COLUMNS])
        for index, (_, width) in enumerate(COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width

        for expense in expenses:
            ws.append([
                sanitize_cell(expense.category),
                float(expense.amount),
                sanitize_cell(expense.title),
                expense.date.strftime('%Y-%m-%d'),
            ])

        bio = BytesIO()
        wb.save(bio)
        bio.seek(0)
        return bio
    except Exception as e:
        logger.exception("Failed to build expense workbook")
        raise ExportError() from e
