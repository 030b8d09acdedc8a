"""
Validation of expenses and repayments before they reach the ledger.

Every record is checked on its own; a bad record is dropped and reported,
the rest go through.
"""
from typing import Iterable, List, Optional, Set, Tuple
import logging

from tripledger.core.errors import (
    CurrencyMismatch,
    DanglingReference,
    InvalidAmount,
    LedgerError,
)
from tripledger.schemas.balance import Diagnostic, DiagnosticCode, LedgerSnapshot, RecordType
from tripledger.schemas.expense import Expense
from tripledger.schemas.repayment import Repayment
from tripledger.services.split_service import check_split_total

logger = logging.getLogger(__name__)


def resolve_currency(snapshot: LedgerSnapshot) -> Optional[str]:
    """
    Get the reporting currency for a snapshot.
    Uses the snapshot's currency if set, otherwise the currency of the first
    expense that passes the amount and split checks.
    """
    if snapshot.currency:
        return snapshot.currency.upper()
    for expense in snapshot.expenses:
        if not expense.currency:
            continue
        try:
            validate_expense(expense)
        except LedgerError:
            continue
        return expense.currency.upper()
    return None


def validate_expense(expense: Expense, currency: Optional[str] = None):
    """Raise a LedgerError if the expense can't be used in a computation."""
    if expense.amount <= 0:
        raise InvalidAmount(
            f"Expense amount must be positive, got {expense.amount}",
            record_id=expense.id
        )

    if currency and expense.currency and expense.currency.upper() != currency:
        raise CurrencyMismatch(
            f"Expense is in {expense.currency.upper()} but balances are computed in {currency}",
            record_id=expense.id
        )

    if expense.splits is None:
        return

    for split in expense.splits:
        if split.share_amount < 0:
            raise InvalidAmount(
                f"Share for participant {split.participant_id} must not be negative, got {split.share_amount}",
                record_type=RecordType.SPLIT,
                record_id=expense.id,
                participant_id=split.participant_id
            )
    check_split_total(expense.amount, (split.share_amount for split in expense.splits), expense.id)


def validate_expenses(
    expenses: Iterable[Expense],
    currency: Optional[str] = None
) -> Tuple[List[Expense], List[Diagnostic]]:
    """
    Split expenses into usable ones and per-expense errors.

    Returns:
        (valid expenses in input order, error diagnostics)
    """
    valid = []
    errors = []
    for expense in expenses:
        try:
            validate_expense(expense, currency)
        except LedgerError as e:
            logger.warning(f"Rejected expense {expense.id}: {e.message}")
            errors.append(e.to_diagnostic())
            continue
        valid.append(expense)
    return valid, errors


def validate_repayments(
    repayments: Iterable[Repayment],
    participant_ids: Set[int],
    currency: Optional[str] = None
) -> Tuple[List[Repayment], List[Diagnostic], List[Diagnostic]]:
    """
    Split repayments into usable ones, errors and warnings.

    Non-positive amounts and foreign currencies are errors. Repayments to
    oneself or involving unknown participants are skipped with a warning.

    Returns:
        (valid repayments in input order, error diagnostics, warning diagnostics)
    """
    valid = []
    errors = []
    warnings = []
    for repayment in repayments:
        try:
            if repayment.amount <= 0:
                raise InvalidAmount(
                    f"Repayment amount must be positive, got {repayment.amount}",
                    record_type=RecordType.REPAYMENT,
                    record_id=repayment.id
                )
            if currency and repayment.currency and repayment.currency.upper() != currency:
                raise CurrencyMismatch(
                    f"Repayment is in {repayment.currency.upper()} but balances are computed in {currency}",
                    record_type=RecordType.REPAYMENT,
                    record_id=repayment.id
                )
        except LedgerError as e:
            logger.warning(f"Rejected repayment {repayment.id}: {e.message}")
            errors.append(e.to_diagnostic())
            continue

        if repayment.paid_by == repayment.paid_to:
            logger.warning(f"Ignoring repayment {repayment.id}: participant {repayment.paid_by} repaid themselves")
            warnings.append(Diagnostic(
                code=DiagnosticCode.SELF_REPAYMENT,
                record_type=RecordType.REPAYMENT,
                record_id=repayment.id,
                message="Cannot make a repayment to yourself",
                participant_id=repayment.paid_by
            ))
            continue

        unknown = [pid for pid in (repayment.paid_by, repayment.paid_to) if pid not in participant_ids]
        if unknown:
            logger.warning(f"Ignoring repayment {repayment.id}: unknown participant {unknown[0]}")
            warnings.append(DanglingReference(
                f"Repayment refers to participant {unknown[0]} who is not part of this trip",
                record_type=RecordType.REPAYMENT,
                record_id=repayment.id,
                participant_id=unknown[0]
            ).to_diagnostic())
            continue

        valid.append(repayment)
    return valid, errors, warnings
