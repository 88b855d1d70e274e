"""Spending statistics for the calendar and summary views."""

from decimal import Decimal, ROUND_HALF_UP

from services.expense_service import ExpenseService

CENTS = Decimal('0.01')

# The monthly average spreads the total over a fixed year rather than over
# the months actually present. The daily average uses distinct days instead.
MONTHS_PER_YEAR = 12


def _money(value):
    return float(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def _top_category(scores):
    """Category with the highest score; ties go to the alphabetically first."""
    if not scores:
        return None
    return min(scores, key=lambda category: (-scores[category], category))


def summarize(expenses):
    """
    Summarize a set of expenses.

    Args:
        expenses: Iterable of Expense (or any object with category, amount, date)

    Returns:
        dict with:
        {
            'series': [['YYYY-MM-DD', total], ...],  # ascending by day
            'dailyAvg': float,      # total / distinct days with spending
            'monthlyAvg': float,    # total / 12
            'topCategoryBySpend': str or None,
            'topCategoryByCount': str or None,
            'categoryTotals': {category: total},
            'total': float,
            'count': int,
        }
    """
    day_totals = {}
    category_totals = {}
    category_counts = {}
    total = Decimal('0')
    count = 0

    for expense in expenses:
        amount = Decimal(str(expense.amount))
        day = expense.date.strftime('%Y-%m-%d')

        day_totals[day] = day_totals.get(day, Decimal('0')) + amount
        category_totals[expense.category] = category_totals.get(expense.category, Decimal('0')) + amount
        category_counts[expense.category] = category_counts.get(expense.category, 0) + 1
        total += amount
        count += 1

    if count:
        daily_avg = total / len(day_totals)
        monthly_avg = total / MONTHS_PER_YEAR
    else:
        daily_avg = monthly_avg = Decimal('0')

    return {
        'series': [[day, _money(day_totals[day])] for day in sorted(day_totals)],
        'dailyAvg': _money(daily_avg),
        'monthlyAvg': _money(monthly_avg),
        'topCategoryBySpend': _top_category(category_totals),
        'topCategoryByCount': _top_category(category_counts),
        'categoryTotals': {
            category: _money(category_totals[category])
            for category in sorted(category_totals)
        },
        'total': _money(total),
        'count': count,
    }


class AggregationService:
    """Service for per-user spending reports."""

    @staticmethod
    def summarize_for_owner(owner_id):
        """Summarize every expense owned by ``owner_id``. Read-only."""
        return summarize(ExpenseService.list_expenses(owner_id))
