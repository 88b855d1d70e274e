"""
Service layer for the expense tracker.

Services encapsulate business logic separate from route handlers.
"""
from services.user_service import UserService
from services.expense_service import ExpenseService
from services.aggregation_service import AggregationService, summarize
from services.export_service import build_expense_workbook

__all__ = [
    'UserService',
    'ExpenseService',
    'AggregationService',
    'summarize',
    'build_expense_workbook',
]
