"""
Pydantic schemas for Repayment entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import date as dt_date
from decimal import Decimal


class Repayment(BaseModel):
    """Money paid back by one participant to another."""
    id: int
    expense_id: Optional[int] = None  # Audit link only, not used for matching
    paid_by: int
    paid_to: int
    amount: Decimal
    currency: Optional[str] = None
    date: Optional[dt_date] = None
    notes: Optional[str] = None
    
    model_config = {"frozen": True}
