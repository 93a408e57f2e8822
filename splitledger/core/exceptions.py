"""
Exception classes for SplitLedger.
"""

from typing import Any, Dict, List, Optional


class SplitLedgerError(Exception):
    """Base exception class for all SplitLedger errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


class LedgerValidationError(SplitLedgerError):
    """Raised when a ledger write is rejected before reaching the store."""
    pass


class TransactionNotFoundError(SplitLedgerError):
    """Raised when a transaction id is unknown to the store."""
    pass


class PartialSettlementError(SplitLedgerError):
    """
    Raised when a bulk settlement run fails after some settlements were
    already written to the ledger.

    ``applied`` holds the settlements that are committed, ``pending`` the
    ones that were not applied (the failing one first).
    """

    def __init__(self, message: str, applied: List[Any], pending: List[Any]):
        super().__init__(
            message,
            error_code="PARTIAL_SETTLEMENT",
            details={"applied": len(applied), "pending": len(pending)}
        )
        self.applied = applied
        self.pending = pending


class AmountExpressionError(SplitLedgerError, ValueError):
    """Raised when a typed amount expression cannot be evaluated."""

    def __init__(self, message: str, expression: str):
        super().__init__(
            message,
            error_code="INVALID_AMOUNT_EXPRESSION",
            details={"expression": expression}
        )
