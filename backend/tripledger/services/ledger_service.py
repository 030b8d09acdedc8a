"""
Ledger service for folding expenses into paid/owed totals and pairwise debts.
"""
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from tripledger.core.config import SplitScope, settings
from tripledger.core.errors import DanglingReference
from tripledger.schemas.balance import Diagnostic, RecordType
from tripledger.schemas.expense import Expense, SplitLine
from tripledger.schemas.participant import Participant
from tripledger.services.split_service import absorb_residual, compute_splits

logger = logging.getLogger(__name__)

# debtor_id -> creditor_id -> amount
PairwiseDebt = Dict[int, Dict[int, Decimal]]


class LedgerTotals:
    """Per-participant totals and pairwise debts built from a set of expenses."""
    def __init__(self, participant_ids: List[int]):
        self.paid_totals: Dict[int, Decimal] = {pid: Decimal(0) for pid in participant_ids}
        self.owed_totals: Dict[int, Decimal] = {pid: Decimal(0) for pid in participant_ids}
        self.pairwise_debt: PairwiseDebt = {}
        self.warnings: List[Diagnostic] = []

    def add_debt(self, debtor_id: int, creditor_id: int, amount: Decimal):
        """Record that debtor owes creditor an extra amount."""
        creditors = self.pairwise_debt.setdefault(debtor_id, {})
        creditors[creditor_id] = creditors.get(creditor_id, Decimal(0)) + amount


def default_splits(
    expense: Expense,
    participant_ids: List[int],
    split_scope: SplitScope = SplitScope.ALL_PARTICIPANTS
) -> List[SplitLine]:
    """
    Equal splits for an expense that has none.

    ALL_PARTICIPANTS shares the expense between everyone, payer included.
    EXCLUDE_PAYER shares it between everyone else; if nobody else is on the
    trip the payer owes the whole amount.
    """
    sharers = participant_ids
    if split_scope == SplitScope.EXCLUDE_PAYER:
        sharers = [pid for pid in participant_ids if pid != expense.payer_id] or [expense.payer_id]
    return compute_splits(expense.amount, sharers, expense_id=expense.id)


def aggregate(
    expenses: List[Expense],
    participants: List[Participant],
    split_scope: Optional[SplitScope] = None
) -> LedgerTotals:
    """
    Fold expenses into paid totals, owed totals and pairwise debts.

    Expenses are expected to be validated already. Records pointing at
    participants outside the set are skipped with a DanglingReference
    warning: an unknown payer drops the whole expense, an unknown split
    participant drops just that line.
    """
    if split_scope is None:
        split_scope = settings.DEFAULT_SPLIT_SCOPE

    participant_ids = list(dict.fromkeys(participant.id for participant in participants))
    known = set(participant_ids)
    totals = LedgerTotals(participant_ids)

    for expense in expenses:
        payer_id = expense.payer_id
        if payer_id not in known:
            logger.warning(f"Skipping expense {expense.id}: payer {payer_id} is not a participant")
            totals.warnings.append(DanglingReference(
                f"Expense was paid by participant {payer_id} who is not part of this trip",
                record_id=expense.id,
                participant_id=payer_id
            ).to_diagnostic())
            continue

        if expense.splits is None:
            splits = default_splits(expense, participant_ids, split_scope)
        else:
            splits = absorb_residual(expense.amount, expense.splits)

        totals.paid_totals[payer_id] += expense.amount

        for split in splits:
            participant_id = split.participant_id
            if participant_id not in known:
                logger.warning(f"Skipping split of expense {expense.id}: participant {participant_id} is not a participant")
                totals.warnings.append(DanglingReference(
                    f"Split refers to participant {participant_id} who is not part of this trip",
                    record_type=RecordType.SPLIT,
                    record_id=expense.id,
                    participant_id=participant_id
                ).to_diagnostic())
                continue

            totals.owed_totals[participant_id] += split.share_amount
            if participant_id != payer_id:
                # Participant owes payer
                totals.add_debt(participant_id, payer_id, split.share_amount)

    logger.debug(f"Aggregated {len(expenses)} expenses for {len(participant_ids)} participants")
    return totals
