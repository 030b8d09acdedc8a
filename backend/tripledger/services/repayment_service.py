"""
Repayment service for applying repayments to pairwise debts.
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple
import logging

from tripledger.schemas.balance import Diagnostic, DiagnosticCode, RecordType
from tripledger.schemas.repayment import Repayment
from tripledger.services.ledger_service import PairwiseDebt

logger = logging.getLogger(__name__)


def _repaid_by_pair(repayments: Iterable[Repayment]) -> Dict[Tuple[int, int], Decimal]:
    """Total repaid per (paid_by, paid_to) pair."""
    repaid = {}
    for repayment in repayments:
        key = (repayment.paid_by, repayment.paid_to)
        repaid[key] = repaid.get(key, Decimal(0)) + repayment.amount
    return repaid


def reconcile(pairwise_debt: PairwiseDebt, repayments: Iterable[Repayment]) -> PairwiseDebt:
    """
    Reduce pairwise debts by the repayments made between each pair.

    Each debt is floored at zero. Repaying more than is owed does not turn
    into a debt in the other direction; the excess is dropped. Since every
    repayment only subtracts from its own pair against the same floor, the
    result doesn't depend on repayment order.

    The input is left untouched; a new mapping is returned.
    """
    reconciled = {debtor: dict(creditors) for debtor, creditors in pairwise_debt.items()}

    for (debtor_id, creditor_id), amount in _repaid_by_pair(repayments).items():
        current = reconciled.get(debtor_id, {}).get(creditor_id, Decimal(0))
        remaining = max(Decimal(0), current - amount)
        if debtor_id in reconciled and creditor_id in reconciled[debtor_id]:
            reconciled[debtor_id][creditor_id] = remaining
        logger.debug(f"Participant {debtor_id} repaid {amount} to {creditor_id}: {current} -> {remaining}")

    return reconciled


def find_overpayments(pairwise_debt: PairwiseDebt, repayments: List[Repayment]) -> List[Diagnostic]:
    """
    Warnings for pairs whose repayments exceed what was owed.

    The warning is attached to the last repayment (by id) between the pair,
    since that's the one that pushed the total past the debt.
    """
    last_repayment = {}
    for repayment in repayments:
        key = (repayment.paid_by, repayment.paid_to)
        if key not in last_repayment or repayment.id > last_repayment[key].id:
            last_repayment[key] = repayment

    warnings = []
    for (debtor_id, creditor_id), amount in _repaid_by_pair(repayments).items():
        owed = pairwise_debt.get(debtor_id, {}).get(creditor_id, Decimal(0))
        if amount <= owed:
            continue
        excess = amount - owed
        logger.warning(f"Participant {debtor_id} overpaid {creditor_id} by {excess}; excess is not carried forward")
        warnings.append(Diagnostic(
            code=DiagnosticCode.OVERPAYMENT,
            record_type=RecordType.REPAYMENT,
            record_id=last_repayment[(debtor_id, creditor_id)].id,
            message=f"Repayments exceed the amount owed by {excess}; the excess is not credited back",
            participant_id=debtor_id
        ))
    return warnings
