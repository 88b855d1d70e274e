"""
Expense service.

Handles expense create/list/delete and ownership checks.
"""
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from errors import AuthorizationError, NotFoundError, StorageError, ValidationError
from extensions import db
from models import Expense

logger = logging.getLogger(__name__)

# Largest value a signed 64-bit INTEGER column can hold
MAX_EXPENSE_ID = 2**63 - 1


class ExpenseService:
    """Service for expense operations.

    Every method takes the owner's user ID and never touches another user's rows.
    """

    @staticmethod
    def _commit(action):
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Database error while trying to {action}")
            raise StorageError()

    @staticmethod
    def parse_expense_id(expense_id):
        """
        Convert a path parameter into an expense ID.

        Raises:
            ValidationError: If the value is not a positive integer that fits the ID column
        """
        try:
            value = int(expense_id)
        except (TypeError, ValueError):
            raise ValidationError('Invalid expense ID')
        if value <= 0 or value > MAX_EXPENSE_ID:
            raise ValidationError('Invalid expense ID')
        return value

    @staticmethod
    def add_expense(owner_id, data):
        """
        Create a new expense.

        Args:
            owner_id (int): The owner's user ID
            data (ExpenseCreate): Validated request payload

        Returns:
            Expense: The created expense

        Raises:
            StorageError: If the expense could not be saved
        """
        expense = Expense(
            owner_id=owner_id,
            category=data.category,
            amount=data.amount,
            title=data.title,
            date=data.date or datetime.utcnow(),
        )

        db.session.add(expense)
        ExpenseService._commit('add an expense')

        logger.info(f"User {owner_id} added expense {expense.id}")
        return expense

    @staticmethod
    def list_expenses(owner_id, filters=None):
        """
        List the owner's expenses, most recent first.

        Args:
            owner_id (int): The owner's user ID
            filters (ExpenseFilters, optional): Category and/or calendar day

        Returns:
            list[Expense]: Matching expenses ordered by date desc, then id desc
        """
        query = Expense.query.filter(Expense.owner_id == owner_id)

        if filters is not None:
            if filters.category:
                query = query.filter(Expense.category == filters.category)
            if filters.date:
                day_start = datetime.combine(filters.date, datetime.min.time())
                query = query.filter(
                    Expense.date >= day_start,
                    Expense.date < day_start + timedelta(days=1)
                )

        try:
            return query.order_by(Expense.date.desc(), Expense.id.desc()).all()
        except SQLAlchemyError:
            logger.exception(f"Failed to fetch expenses for user {owner_id}")
            raise StorageError()

    @staticmethod
    def get_expense(owner_id, expense_id):
        """
        Fetch a single expense belonging to the owner.

        Raises:
            ValidationError: If the ID is malformed
            NotFoundError: If no such expense exists
            AuthorizationError: If the expense belongs to someone else
        """
        expense_id = ExpenseService.parse_expense_id(expense_id)
        expense = db.session.get(Expense, expense_id)

        if expense is None:
            raise NotFoundError('Expense not found')

        if expense.owner_id != owner_id:
            logger.warning(f"User {owner_id} attempted to access expense {expense_id} owned by another user")
            raise AuthorizationError()

        return expense

    @staticmethod
    def delete_expense(owner_id, expense_id):
        """
        Delete an expense owned by the caller.

        Args:
            owner_id (int): The owner's user ID
            expense_id (int or str): The expense ID

        Raises:
            ValidationError: If the ID is malformed
            NotFoundError: If no such expense exists (including a concurrent delete)
            AuthorizationError: If the expense belongs to someone else
        """
        expense_id = ExpenseService.get_expense(owner_id, expense_id).id

        # Conditional delete: zero rows means another request got there first
        try:
            deleted = Expense.query.filter_by(id=expense_id, owner_id=owner_id).delete()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to delete expense {expense_id}")
            raise StorageError()

        if not deleted:
            db.session.rollback()
            raise NotFoundError('Expense not found')

        ExpenseService._commit('delete an expense')

        logger.info(f"User {owner_id} deleted expense {expense_id}")
