"""
Balance service for building per-participant balance reports.
"""
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from tripledger.core.config import SplitScope
from tripledger.core.utils import quantize_money, sum_money
from tripledger.schemas.balance import BalanceReport, LedgerSnapshot, ParticipantBalance
from tripledger.schemas.participant import Participant
from tripledger.services.ledger_service import PairwiseDebt, aggregate
from tripledger.services.repayment_service import find_overpayments, reconcile
from tripledger.services.validation_service import (
    resolve_currency,
    validate_expenses,
    validate_repayments,
)

logger = logging.getLogger(__name__)


def report(
    participants: List[Participant],
    paid_totals: Dict[int, Decimal],
    owed_totals: Dict[int, Decimal],
    pairwise_debt: PairwiseDebt
) -> List[ParticipantBalance]:
    """
    Build one balance per participant, in participant order.
    Participants with no activity get all-zero balances; a repeated
    participant id only gets the row of its first entry.
    """
    unique = {}
    for participant in participants:
        unique.setdefault(participant.id, participant)
    participants = list(unique.values())

    balances = []
    for participant in participants:
        pid = participant.id
        total_paid = quantize_money(paid_totals.get(pid, Decimal(0)))
        total_owed = quantize_money(owed_totals.get(pid, Decimal(0)))
        net_balance = total_paid - total_owed

        owes_to_others = {}
        owed_by_others = {}
        for other in participants:
            if other.id == pid:
                continue
            owes = quantize_money(pairwise_debt.get(pid, {}).get(other.id, Decimal(0)))
            if owes > 0:
                owes_to_others[other.id] = owes
            owed = quantize_money(pairwise_debt.get(other.id, {}).get(pid, Decimal(0)))
            if owed > 0:
                owed_by_others[other.id] = owed

        balances.append(ParticipantBalance(
            participant_id=pid,
            participant_name=participant.name,
            total_paid=total_paid,
            total_owed=total_owed,
            net_balance=net_balance,
            is_settled=net_balance == 0,
            owes_to_others=owes_to_others,
            owed_by_others=owed_by_others
        ))
    return balances


def compute_balances(
    snapshot: LedgerSnapshot,
    split_scope: Optional[SplitScope] = None
) -> BalanceReport:
    """
    Compute balances for a trip from scratch.

    Runs validation, aggregation, repayment reconciliation and reporting in
    that order. Bad records never abort the computation: they are left out
    of the totals and listed in the report's errors or warnings.

    Args:
        snapshot: Participants, expenses and repayments of one trip
        split_scope: Who shares expenses without explicit splits
            (defaults to settings.DEFAULT_SPLIT_SCOPE)

    Returns:
        BalanceReport with one balance per participant
    """
    currency = resolve_currency(snapshot)
    participant_ids = {participant.id for participant in snapshot.participants}

    expenses, expense_errors = validate_expenses(snapshot.expenses, currency)
    repayments, repayment_errors, repayment_warnings = validate_repayments(
        snapshot.repayments, participant_ids, currency
    )

    totals = aggregate(expenses, snapshot.participants, split_scope)
    pairwise_debt = reconcile(totals.pairwise_debt, repayments)
    overpayments = find_overpayments(totals.pairwise_debt, repayments)

    balances = report(snapshot.participants, totals.paid_totals, totals.owed_totals, pairwise_debt)

    errors = expense_errors + repayment_errors
    warnings = totals.warnings + repayment_warnings + overpayments
    logger.info(
        f"Computed balances for {len(balances)} participants from {len(expenses)} expenses "
        f"and {len(repayments)} repayments ({len(errors)} errors, {len(warnings)} warnings)"
    )

    return BalanceReport(
        currency=currency,
        total_expenses=quantize_money(sum_money(totals.paid_totals.values())),
        balances=balances,
        warnings=warnings,
        errors=errors
    )
