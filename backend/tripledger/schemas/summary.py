"""
Pydantic schemas for expense summaries.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date as dt_date
from decimal import Decimal


class CategoryExpenseItem(BaseModel):
    """Schema for category expense item in summary."""
    category: str
    total_amount: Decimal  # Total amount spent in this category
    expense_count: int  # Number of expenses in this category
    percentage: float  # Percentage of total expenses (0-100)


class DateExpenseItem(BaseModel):
    """Schema for per-day spending in summary."""
    date: Optional[dt_date] = None  # None groups expenses without a date
    total_amount: Decimal
    expense_count: int


class ExpenseSummaryResponse(BaseModel):
    """Schema for expense summary response."""
    currency: Optional[str] = None
    total_expenses: Decimal
    expense_count: int
    categories: List[CategoryExpenseItem]  # Category-wise breakdown
    uncategorized_amount: Decimal  # Total amount for expenses without category
    uncategorized_count: int  # Number of expenses without category
    date_breakdown: List[DateExpenseItem] = []  # Oldest day first, undated last
