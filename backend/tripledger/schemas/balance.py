"""
Pydantic schemas for ledger input snapshots and balance reports.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from decimal import Decimal
import enum

from tripledger.schemas.participant import Participant
from tripledger.schemas.expense import Expense
from tripledger.schemas.repayment import Repayment


class DiagnosticCode(str, enum.Enum):
    """Problems found with individual input records."""
    INVALID_AMOUNT = "invalid_amount"
    SPLIT_MISMATCH = "split_mismatch"
    CURRENCY_MISMATCH = "currency_mismatch"
    DANGLING_REFERENCE = "dangling_reference"
    SELF_REPAYMENT = "self_repayment"
    OVERPAYMENT = "overpayment"


class RecordType(str, enum.Enum):
    """Kind of input record a diagnostic refers to."""
    EXPENSE = "expense"
    SPLIT = "split"
    REPAYMENT = "repayment"


class Diagnostic(BaseModel):
    """A problem with one input record."""
    code: DiagnosticCode
    record_type: RecordType
    record_id: Optional[int] = None
    message: str
    participant_id: Optional[int] = None


class LedgerSnapshot(BaseModel):
    """Everything needed to compute balances for one trip."""
    participants: List[Participant]
    expenses: List[Expense] = []
    repayments: List[Repayment] = []
    currency: Optional[str] = None  # Reporting currency, defaults to the first valid expense's
    
    model_config = {"frozen": True}
    
    @field_validator("participants")
    @classmethod
    def drop_duplicate_participants(cls, v):
        """Keep the first entry for each participant id."""
        seen = set()
        unique = []
        for participant in v:
            if participant.id in seen:
                continue
            seen.add(participant.id)
            unique.append(participant)
        return unique


class ParticipantBalance(BaseModel):
    """Final money position of one participant."""
    participant_id: int
    participant_name: str
    total_paid: Decimal
    total_owed: Decimal
    net_balance: Decimal  # positive = others owe them, negative = they owe others
    is_settled: bool
    owes_to_others: Dict[int, Decimal] = Field(default_factory=dict)  # creditor_id -> amount
    owed_by_others: Dict[int, Decimal] = Field(default_factory=dict)  # debtor_id -> amount


class BalanceReport(BaseModel):
    """Result of one balance computation."""
    currency: Optional[str] = None
    total_expenses: Decimal
    balances: List[ParticipantBalance]
    warnings: List[Diagnostic] = []
    errors: List[Diagnostic] = []
    
    @property
    def is_trusted(self) -> bool:
        """True when no record was rejected, so totals cover every input."""
        return not self.errors
