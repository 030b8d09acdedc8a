"""
Shared fixtures for ledger tests.
"""
import pytest
from decimal import Decimal
from tripledger.schemas import Expense, LedgerSnapshot, Participant


@pytest.fixture
def two_participants():
    """Alice and Bob."""
    return [
        Participant(id=1, name="Alice"),
        Participant(id=2, name="Bob"),
    ]


@pytest.fixture
def three_participants():
    """Alice, Bob and Carol."""
    return [
        Participant(id=1, name="Alice"),
        Participant(id=2, name="Bob"),
        Participant(id=3, name="Carol"),
    ]


@pytest.fixture
def dinner_expense():
    """Dinner for 100.00 paid by Alice, no explicit splits."""
    return Expense(id=10, payer_id=1, amount=Decimal("100.00"), currency="USD", title="Dinner", category="food")


@pytest.fixture
def make_snapshot():
    """Build a snapshot from participants, expenses and repayments."""
    def _make(participants, expenses=(), repayments=(), currency=None):
        return LedgerSnapshot(
            participants=list(participants),
            expenses=list(expenses),
            repayments=list(repayments),
            currency=currency
        )
    return _make


