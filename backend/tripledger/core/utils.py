"""
Utility functions for the application.
"""
from typing import Any, Dict, Iterable
from decimal import Decimal, ROUND_HALF_UP
from tripledger.core.config import settings


def quantize_money(amount: Decimal, quantum: Decimal = None) -> Decimal:
    """Round an amount to the configured currency unit."""
    if quantum is None:
        quantum = settings.MONEY_QUANTUM
    return Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts starting from Decimal zero."""
    total = Decimal(0)
    for amount in amounts:
        total += amount
    return total


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
