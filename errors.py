from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class ErrorKind(str, Enum):
    INVALID_ACCOUNT_IDS = "invalid_account_ids"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_FUNDS_TO_WITHDRAW = "insufficient_funds_to_withdraw"
    PAY_IN_LIMIT_EXCEEDED = "pay_in_limit_exceeded"
    NEGATIVE_INITIAL_BALANCE = "negative_initial_balance"
    INVALID_AMOUNT = "invalid_amount"


# Read-only after import
ERROR_MESSAGES: Mapping[ErrorKind, str] = MappingProxyType({
    ErrorKind.INVALID_ACCOUNT_IDS: "Invalid account IDs.",
    ErrorKind.INSUFFICIENT_FUNDS: "Insufficient funds to make transfer.",
    ErrorKind.INSUFFICIENT_FUNDS_TO_WITHDRAW: "Insufficient funds to make withdrawal",
    ErrorKind.PAY_IN_LIMIT_EXCEEDED: "Account pay in limit reached.",
    ErrorKind.NEGATIVE_INITIAL_BALANCE: "Initial balance cannot be negative.",
    ErrorKind.INVALID_AMOUNT: "Amount must be a positive number.",
})


class LedgerError(Exception):
    """Base class for every business rule violation raised by the ledger."""

    kind: ErrorKind

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or ERROR_MESSAGES[self.kind])

    @property
    def error_code(self) -> str:
        """Machine-readable error code."""
        return self.kind.value.upper()


class InvalidArgumentError(LedgerError, ValueError):
    """A caller supplied an argument the ledger cannot act on."""


class InvalidOperationError(LedgerError):
    """The requested operation would break an account invariant."""


class InvalidAccountIds(InvalidArgumentError):
    kind = ErrorKind.INVALID_ACCOUNT_IDS


class NegativeInitialBalance(InvalidArgumentError):
    kind = ErrorKind.NEGATIVE_INITIAL_BALANCE


class InvalidAmount(InvalidArgumentError):
    """Raised when an amount is not a finite number, or an operation amount is not positive."""

    kind = ErrorKind.INVALID_AMOUNT


class InsufficientFunds(InvalidOperationError):
    """Raised when a transfer debit would drive the balance negative."""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class InsufficientFundsToWithdraw(InvalidOperationError):
    """Raised when a withdrawal would drive the balance negative."""

    kind = ErrorKind.INSUFFICIENT_FUNDS_TO_WITHDRAW


class PayInLimitExceeded(InvalidOperationError):
    """Raised when a pay-in would push the cumulative paid-in amount over the limit."""

    kind = ErrorKind.PAY_IN_LIMIT_EXCEEDED
