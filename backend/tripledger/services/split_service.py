"""
Split service for dividing an expense amount between participants.
"""
from decimal import Decimal, ROUND_DOWN
from typing import Dict, Iterable, List, Optional
import logging

from tripledger.core.config import settings
from tripledger.core.errors import InvalidAmount, SplitMismatch
from tripledger.core.utils import sum_money
from tripledger.schemas.expense import SplitLine, SplitMode

logger = logging.getLogger(__name__)


def compute_splits(
    amount: Decimal,
    participant_ids: List[int],
    mode: SplitMode = SplitMode.EQUAL,
    custom_shares: Optional[Dict[int, Decimal]] = None,
    expense_id: Optional[int] = None
) -> List[SplitLine]:
    """
    Divide an amount between participants.

    Equal mode rounds every share down to the money quantum and gives the
    leftover to the first participant, so shares always sum to the amount.
    Custom mode checks the caller's shares add up within SPLIT_TOLERANCE
    and moves any leftover cent onto the first line that can take it.

    Args:
        amount: Expense amount, must be positive
        participant_ids: Who shares the expense, in display order
        mode: SplitMode.EQUAL or SplitMode.CUSTOM
        custom_shares: participant_id -> share, required for custom mode
        expense_id: Optional expense id, attached to raised errors

    Returns:
        One SplitLine per participant, in input order

    Raises:
        InvalidAmount: amount is not positive or a custom share is negative
        SplitMismatch: no participants, or custom shares don't add up
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise InvalidAmount(f"Amount must be positive, got {amount}", record_id=expense_id)

    # Keep first occurrence order
    participant_ids = list(dict.fromkeys(participant_ids))
    if not participant_ids:
        raise SplitMismatch("At least one participant is required to split an expense", record_id=expense_id)

    if mode == SplitMode.CUSTOM:
        return _custom_splits(amount, participant_ids, custom_shares or {}, expense_id)
    return _equal_splits(amount, participant_ids)


def _equal_splits(amount: Decimal, participant_ids: List[int]) -> List[SplitLine]:
    count = len(participant_ids)
    share = (amount / count).quantize(settings.MONEY_QUANTUM, rounding=ROUND_DOWN)
    first_share = amount - share * (count - 1)

    splits = [SplitLine(participant_id=participant_ids[0], share_amount=first_share)]
    for participant_id in participant_ids[1:]:
        splits.append(SplitLine(participant_id=participant_id, share_amount=share))

    logger.debug(f"Split {amount} equally between {count} participants ({first_share} for the first, {share} each)")
    return splits


def _custom_splits(
    amount: Decimal,
    participant_ids: List[int],
    custom_shares: Dict[int, Decimal],
    expense_id: Optional[int]
) -> List[SplitLine]:
    unknown = [pid for pid in custom_shares if pid not in participant_ids]
    if unknown:
        raise SplitMismatch(
            f"Shares given for participants not in the split: {unknown}",
            record_id=expense_id,
            participant_id=unknown[0]
        )

    splits = []
    for participant_id in participant_ids:
        share = Decimal(custom_shares.get(participant_id, 0))
        if share < 0:
            raise InvalidAmount(
                f"Share for participant {participant_id} must not be negative, got {share}",
                record_id=expense_id,
                participant_id=participant_id
            )
        splits.append(SplitLine(participant_id=participant_id, share_amount=share))

    check_split_total(amount, (split.share_amount for split in splits), expense_id)
    return absorb_residual(amount, splits)


def absorb_residual(amount: Decimal, splits: List[SplitLine]) -> List[SplitLine]:
    """
    Shift the gap between the shares and the amount onto one split line.

    Shares accepted within SPLIT_TOLERANCE can still be a cent off. The gap
    goes to the first line that stays non-negative after taking it, so the
    shares always add up to the amount exactly.
    """
    residual = amount - sum_money(split.share_amount for split in splits)
    if residual == 0 or not splits:
        return list(splits)

    target = 0
    for index, split in enumerate(splits):
        if split.share_amount + residual >= 0:
            target = index
            break

    adjusted = []
    for index, split in enumerate(splits):
        share = split.share_amount + residual if index == target else split.share_amount
        adjusted.append(SplitLine(participant_id=split.participant_id, share_amount=share))
    logger.debug(f"Moved split residual {residual} onto participant {adjusted[target].participant_id}")
    return adjusted


def check_split_total(
    amount: Decimal,
    shares: Iterable[Decimal],
    expense_id: Optional[int] = None
) -> Decimal:
    """
    Check that shares add up to the amount within SPLIT_TOLERANCE.
    Returns the share total; raises SplitMismatch when it is off.
    """
    total = sum_money(shares)
    if abs(total - amount) > settings.SPLIT_TOLERANCE:
        raise SplitMismatch(
            f"Split shares add up to {total} but the expense amount is {amount}",
            record_id=expense_id
        )
    return total
