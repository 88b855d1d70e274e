"""
Expense API routes.

Endpoints:
- POST /api/expenses/add - Create expense
- GET /api/expenses - List expenses (optional ?category= and ?date= filters)
- GET /api/expenses/date/<date> - List expenses on one day
- GET /api/expenses/category/<category> - List expenses in one category
- DELETE /api/expenses/<id> - Delete expense
- GET /api/expenses/calendar - Daily series and averages
"""
from flask import request, jsonify, g

from api_decorators import jwt_required
from schemas import ExpenseCreate, ExpenseFilters, parse_payload
from services.expense_service import ExpenseService
from services.aggregation_service import AggregationService
from blueprints.expenses import expenses_bp


def _list_response(filters=None):
    expenses = ExpenseService.list_expenses(g.current_user_id, filters)
    return jsonify([expense.to_dict() for expense in expenses])


@expenses_bp.route('/expenses/add', methods=['POST'])
@jwt_required
def add_expense():
    """Create a new expense.

    Request body:
        {
            "category": "Food",
            "amount": 12.50,
            "title": "Lunch",
            "date": "2024-01-15"  # optional, defaults to now
        }

    Returns:
        {"message": "Expense added successfully", "expense": {...}}
    """
    payload = parse_payload(ExpenseCreate, request.get_json(silent=True))

    expense = ExpenseService.add_expense(g.current_user_id, payload)

    return jsonify({
        'message': 'Expense added successfully',
        'expense': expense.to_dict()
    }), 201


@expenses_bp.route('/expenses', methods=['GET'])
@jwt_required
def list_expenses():
    """List the current user's expenses, most recent first.

    Query Parameters:
        category (str): Exact category match
        date (str): Calendar day (YYYY-MM-DD)
    """
    filters = parse_payload(ExpenseFilters, request.args.to_dict())
    return _list_response(filters)


@expenses_bp.route('/expenses/date/<day>', methods=['GET'])
@jwt_required
def list_expenses_on_date(day):
    """List the current user's expenses on a single day."""
    filters = parse_payload(ExpenseFilters, {'date': day})
    return _list_response(filters)


@expenses_bp.route('/expenses/category/<category>', methods=['GET'])
@jwt_required
def list_expenses_in_category(category):
    """List the current user's expenses in a single category."""
    filters = parse_payload(ExpenseFilters, {'category': category})
    return _list_response(filters)


@expenses_bp.route('/expenses/<expense_id>', methods=['DELETE'])
@jwt_required
def delete_expense(expense_id):
    """Delete one of the current user's expenses."""
    ExpenseService.delete_expense(g.current_user_id, expense_id)
    return jsonify({'message': 'Expense deleted successfully'})


@expenses_bp.route('/expenses/calendar', methods=['GET'])
@jwt_required
def expense_calendar():
    """Spending report for the calendar view.

    Returns:
        {
            "series": [["2024-01-01", 100.0], ...],
            "dailyAvg": 175.0,
            "monthlyAvg": 29.17,
            "topCategoryBySpend": "Travel",
            "topCategoryByCount": "Food",
            "categoryTotals": {...},
            "total": 350.0,
            "count": 3
        }
    """
    return jsonify(AggregationService.summarize_for_owner(g.current_user_id))
