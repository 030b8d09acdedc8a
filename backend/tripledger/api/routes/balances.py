"""
Balance computation routes.
"""
from fastapi import APIRouter, HTTPException, Query, status
from typing import Optional
from tripledger.core.config import SplitScope
from tripledger.core.errors import LedgerError
from tripledger.core.utils import format_error
from tripledger.schemas.balance import BalanceReport, LedgerSnapshot
from tripledger.schemas.expense import SplitPreviewResponse, SplitRequest
from tripledger.schemas.summary import ExpenseSummaryResponse
from tripledger.services.balance_service import compute_balances
from tripledger.services.split_service import compute_splits
from tripledger.services.summary_service import summarize_expenses

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("/compute", response_model=BalanceReport)
async def compute_trip_balances(
    snapshot: LedgerSnapshot,
    split_scope: Optional[SplitScope] = Query(None, description="Who shares expenses without explicit splits")
):
    """
    Compute participant balances for a trip snapshot.
    Invalid records are reported in the response, never as an error status.
    """
    return compute_balances(snapshot, split_scope)


@router.post("/summary", response_model=ExpenseSummaryResponse)
async def get_expense_summary(snapshot: LedgerSnapshot):
    """Get expense totals by category for a trip snapshot."""
    return summarize_expenses(snapshot)


@router.post("/splits", response_model=SplitPreviewResponse)
async def preview_splits(split_request: SplitRequest):
    """Preview how an expense amount would be split between participants."""
    try:
        splits = compute_splits(
            split_request.amount,
            split_request.participant_ids,
            split_request.mode,
            split_request.custom_shares
        )
    except LedgerError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=format_error(e.message, details={"code": e.code.value, "participant_id": e.participant_id})
        )
    
    return SplitPreviewResponse(
        amount=split_request.amount,
        mode=split_request.mode,
        splits=splits
    )
