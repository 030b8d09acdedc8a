"""
Typed errors for problems with individual ledger records.

Each error names the record it came from so it can be reported back to the
caller as a Diagnostic instead of aborting a whole computation.
"""
from typing import Optional

from tripledger.schemas.balance import Diagnostic, DiagnosticCode, RecordType


class LedgerError(ValueError):
    """Base class for per-record ledger errors."""
    code: Optional[DiagnosticCode] = None

    def __init__(
        self,
        message: str,
        record_type: RecordType = RecordType.EXPENSE,
        record_id: Optional[int] = None,
        participant_id: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.record_type = record_type
        self.record_id = record_id
        self.participant_id = participant_id

    def to_diagnostic(self) -> Diagnostic:
        """Convert the error into a diagnostic record."""
        return Diagnostic(
            code=self.code,
            record_type=self.record_type,
            record_id=self.record_id,
            message=self.message,
            participant_id=self.participant_id
        )


class InvalidAmount(LedgerError):
    """Expense or repayment amount is not positive, or a share is negative."""
    code = DiagnosticCode.INVALID_AMOUNT


class SplitMismatch(LedgerError):
    """Split shares don't add up to the expense amount."""
    code = DiagnosticCode.SPLIT_MISMATCH


class CurrencyMismatch(LedgerError):
    """Expense is not in the reporting currency of the computation."""
    code = DiagnosticCode.CURRENCY_MISMATCH


class DanglingReference(LedgerError):
    """Record refers to a participant outside the current participant set."""
    code = DiagnosticCode.DANGLING_REFERENCE
