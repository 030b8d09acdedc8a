"""
Pydantic schemas for Expense and ExpenseSplit entities.
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date as dt_date
from decimal import Decimal
import enum


class SplitStatus(str, enum.Enum):
    """Bookkeeping status of a split line. Not used by balance math."""
    PENDING = "pending"
    PAID = "paid"


class SplitMode(str, enum.Enum):
    """How an expense amount is divided between participants."""
    EQUAL = "equal"
    CUSTOM = "custom"


class ExpenseSplit(BaseModel):
    """One participant's share of an expense."""
    expense_id: Optional[int] = None
    participant_id: int
    share_amount: Decimal
    status: SplitStatus = SplitStatus.PENDING
    
    model_config = {"frozen": True}


class Expense(BaseModel):
    """A shared expense paid by one participant."""
    id: int
    payer_id: int
    amount: Decimal
    currency: str = "USD"
    title: Optional[str] = None
    category: Optional[str] = None
    date: Optional[dt_date] = None
    splits: Optional[List[ExpenseSplit]] = None  # None = split by the default scope
    
    model_config = {"frozen": True}


class SplitLine(BaseModel):
    """Computed share for one participant."""
    participant_id: int
    share_amount: Decimal


class SplitRequest(BaseModel):
    """Schema for previewing how an amount would be split."""
    amount: Decimal
    participant_ids: List[int]
    mode: SplitMode = SplitMode.EQUAL
    custom_shares: Optional[Dict[int, Decimal]] = None  # participant_id -> share, custom mode only


class SplitPreviewResponse(BaseModel):
    """Schema for split preview response."""
    amount: Decimal
    mode: SplitMode
    splits: List[SplitLine]
