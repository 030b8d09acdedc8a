"""
Summary service for spending overviews by category and day.
"""
from datetime import date as dt_date
from decimal import Decimal
import logging

from tripledger.core.utils import quantize_money, sum_money
from tripledger.schemas.balance import LedgerSnapshot
from tripledger.schemas.summary import CategoryExpenseItem, DateExpenseItem, ExpenseSummaryResponse
from tripledger.services.validation_service import resolve_currency, validate_expenses

logger = logging.getLogger(__name__)


def summarize_expenses(snapshot: LedgerSnapshot) -> ExpenseSummaryResponse:
    """
    Get expense summary by category and by day for a trip.
    Only valid expenses are counted; categories are sorted by amount, largest first.
    """
    currency = resolve_currency(snapshot)
    expenses, errors = validate_expenses(snapshot.expenses, currency)
    if errors:
        logger.info(f"Left {len(errors)} invalid expenses out of the summary")

    total_expenses = sum_money(exp.amount for exp in expenses)

    # Group expenses by category
    category_totals = {}
    category_counts = {}
    uncategorized_total = Decimal(0)
    uncategorized_count = 0

    for expense in expenses:
        category = expense.category.strip().lower() if expense.category else ""

        if not category:
            uncategorized_total += expense.amount
            uncategorized_count += 1
        else:
            if category not in category_totals:
                category_totals[category] = Decimal(0)
                category_counts[category] = 0
            category_totals[category] += expense.amount
            category_counts[category] += 1

    # Build category items with percentage
    category_items = []
    for category, total_amount in category_totals.items():
        percentage = float((total_amount / total_expenses * 100) if total_expenses > 0 else 0)
        category_items.append(CategoryExpenseItem(
            category=category,
            total_amount=quantize_money(total_amount),
            expense_count=category_counts[category],
            percentage=round(percentage, 2)
        ))

    # Sort by total amount (descending), then name for ties
    category_items.sort(key=lambda x: (-x.total_amount, x.category))

    # Group expenses by date
    date_totals = {}
    date_counts = {}
    for expense in expenses:
        if expense.date not in date_totals:
            date_totals[expense.date] = Decimal(0)
            date_counts[expense.date] = 0
        date_totals[expense.date] += expense.amount
        date_counts[expense.date] += 1

    date_items = [
        DateExpenseItem(
            date=day,
            total_amount=quantize_money(total_amount),
            expense_count=date_counts[day]
        )
        for day, total_amount in date_totals.items()
    ]
    date_items.sort(key=lambda x: (x.date is None, x.date or dt_date.min))

    return ExpenseSummaryResponse(
        currency=currency,
        total_expenses=quantize_money(total_expenses),
        expense_count=len(expenses),
        categories=category_items,
        uncategorized_amount=quantize_money(uncategorized_total),
        uncategorized_count=uncategorized_count,
        date_breakdown=date_items
    )
