"""Schemas package - Re-export the ledger data model."""
from tripledger.schemas.participant import Participant
from tripledger.schemas.expense import Expense, ExpenseSplit, SplitMode, SplitStatus
from tripledger.schemas.repayment import Repayment
from tripledger.schemas.balance import (
    BalanceReport,
    Diagnostic,
    DiagnosticCode,
    LedgerSnapshot,
    ParticipantBalance,
    RecordType,
)

__all__ = [
    "Participant",
    "Expense",
    "ExpenseSplit",
    "SplitMode",
    "SplitStatus",
    "Repayment",
    "BalanceReport",
    "Diagnostic",
    "DiagnosticCode",
    "LedgerSnapshot",
    "ParticipantBalance",
    "RecordType",
]
