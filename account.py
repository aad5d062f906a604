"""
Account entity.

Every mutating operation is split in two steps: a pure ``plan_*`` method
computes the resulting state and decides whether it is allowed, then the
public operation raises the planned error or dispatches the planned
notification and commits. State is only assigned from a plan that passed
validation, so a failed call never leaves a partial mutation behind.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final, Optional, Type, Union
from uuid import UUID

from errors import (
    InsufficientFunds,
    InsufficientFundsToWithdraw,
    InvalidAmount,
    LedgerError,
    NegativeInitialBalance,
    PayInLimitExceeded,
)
from models import AccountSnapshot, NotificationKind, User
from notifications import NotificationService

PAY_IN_LIMIT: Final[Decimal] = Decimal("4000")
LOW_FUNDS_MARK: Final[Decimal] = Decimal("500")
PAY_IN_HEADROOM_MARK: Final[Decimal] = Decimal("500")

Amount = Union[Decimal, int, str, float]


def to_decimal(value: Amount) -> Decimal:
    """Normalise a value to a finite Decimal, raising InvalidAmount otherwise."""
    try:
        amt = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidAmount()
    if not amt.is_finite():
        raise InvalidAmount()
    return amt


@dataclass(frozen=True)
class OperationPlan:
    """Outcome of validating one account operation before it is applied."""

    balance: Decimal
    paid_in: Decimal
    withdrawn: Decimal
    error: Optional[Type[LedgerError]] = None
    notification: Optional[NotificationKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Account:
    def __init__(
        self,
        account_id: UUID,
        owner: User,
        initial_balance: Amount,
        notification_service: NotificationService,
        pay_in_limit: Amount = PAY_IN_LIMIT,
        low_funds_mark: Amount = LOW_FUNDS_MARK,
        pay_in_headroom_mark: Amount = PAY_IN_HEADROOM_MARK,
    ):
        balance = to_decimal(initial_balance)
        if balance < 0:
            raise NegativeInitialBalance()

        self._id = account_id
        self._owner = owner
        self._notification_service = notification_service
        self._balance = balance
        self._paid_in = Decimal("0")
        self._withdrawn = Decimal("0")
        self._pay_in_limit = to_decimal(pay_in_limit)
        self._low_funds_mark = to_decimal(low_funds_mark)
        self._pay_in_headroom_mark = to_decimal(pay_in_headroom_mark)

    def __repr__(self) -> str:
        return (
            f"Account({self._id}, balance={self._balance}, "
            f"paid_in={self._paid_in}, withdrawn={self._withdrawn})"
        )

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def paid_in(self) -> Decimal:
        return self._paid_in

    @property
    def withdrawn(self) -> Decimal:
        return self._withdrawn

    @property
    def pay_in_limit(self) -> Decimal:
        return self._pay_in_limit

    @property
    def low_funds_mark(self) -> Decimal:
        return self._low_funds_mark

    @property
    def pay_in_headroom_mark(self) -> Decimal:
        return self._pay_in_headroom_mark

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            account_id=self._id,
            balance=self._balance,
            paid_in=self._paid_in,
            withdrawn=self._withdrawn
        )

    def plan_pay_in(self, amount: Amount) -> OperationPlan:
        amt = to_decimal(amount)
        if amt <= 0:
            return self._rejected(InvalidAmount)

        paid_in = self._paid_in + amt
        if paid_in > self._pay_in_limit:
            return self._rejected(PayInLimitExceeded)

        notification = None
        if self._pay_in_limit - paid_in < self._pay_in_headroom_mark:
            notification = NotificationKind.approaching_pay_in_limit

        return OperationPlan(
            balance=self._balance + amt,
            paid_in=paid_in,
            withdrawn=self._withdrawn,
            notification=notification
        )

    def plan_withdraw(self, amount: Amount) -> OperationPlan:
        amt = to_decimal(amount)
        if amt <= 0:
            return self._rejected(InvalidAmount)

        balance = self._balance - amt
        if balance < 0:
            return self._rejected(InsufficientFundsToWithdraw)

        return OperationPlan(
            balance=balance,
            paid_in=self._paid_in,
            withdrawn=self._withdrawn + amt,
            notification=self._low_funds_notification(balance)
        )

    def plan_pay_out(self, amount: Amount) -> OperationPlan:
        amt = to_decimal(amount)
        if amt <= 0:
            return self._rejected(InvalidAmount)

        balance = self._balance - amt
        if balance < 0:
            return self._rejected(InsufficientFunds)

        # A transfer out counts as a negative withdrawal.
        return OperationPlan(
            balance=balance,
            paid_in=self._paid_in,
            withdrawn=self._withdrawn - amt,
            notification=self._low_funds_notification(balance)
        )

    def pay_in(self, amount: Amount) -> None:
        self._apply(self.plan_pay_in(amount))

    def withdraw(self, amount: Amount) -> None:
        self._apply(self.plan_withdraw(amount))

    def pay_out(self, amount: Amount) -> None:
        self._apply(self.plan_pay_out(amount))

    def _rejected(self, error: Type[LedgerError]) -> OperationPlan:
        return OperationPlan(
            balance=self._balance,
            paid_in=self._paid_in,
            withdrawn=self._withdrawn,
            error=error
        )

    def _low_funds_notification(self, balance: Decimal) -> Optional[NotificationKind]:
        if balance < self._low_funds_mark:
            return NotificationKind.funds_low
        return None

    def _apply(self, plan: OperationPlan) -> None:
        if plan.error is not None:
            raise plan.error()

        if plan.notification == NotificationKind.approaching_pay_in_limit:
            self._notification_service.notify_approaching_pay_in_limit(self._owner.email)
        elif plan.notification == NotificationKind.funds_low:
            self._notification_service.notify_funds_low(self._owner.email)

        self._balance = plan.balance
        self._paid_in = plan.paid_in
        self._withdrawn = plan.withdrawn
