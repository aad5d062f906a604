import logging
import sys
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4
import structlog

from account import Account, Amount
from config import Settings, get_settings
from models import User
from notifications import LoggingNotificationService, NotificationService
from repositories import InMemoryAccountRepository
from services import get_transfer_money, get_withdraw_money
from transaction import Transaction


def configure_logging(settings: Settings) -> None:
    """Configure structured logging over the stdlib logging module."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if not settings.enable_detailed_logging:
        level = max(level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()


class Ledger:
    """Wires the repository, notification service and use cases together."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        account_repo: Optional[InMemoryAccountRepository] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        self.settings = settings or get_settings()
        self.account_repo = account_repo or InMemoryAccountRepository()
        self.notification_service = notification_service or LoggingNotificationService()
        self.transaction_scope = Transaction(self.account_repo)
        self.transfer_money = get_transfer_money(self.account_repo, self.transaction_scope)
        self.withdraw_money = get_withdraw_money(self.account_repo, self.transaction_scope)

    def open_account(self, owner: User, initial_balance: Amount = Decimal("0"), account_id: Optional[UUID] = None) -> Account:
        account = Account(
            account_id or uuid4(),
            owner,
            initial_balance,
            self.notification_service,
            pay_in_limit=self.settings.pay_in_limit,
            low_funds_mark=self.settings.low_funds_mark,
            pay_in_headroom_mark=self.settings.pay_in_headroom_mark,
        )
        self.account_repo.add(account)

        logger.info(
            "Account opened",
            account_id=str(account.id),
            initial_balance=str(account.balance)
        )
        return account

    def transfer(self, sender_id: UUID, receiver_id: UUID, amount: Amount) -> None:
        self.transfer_money.execute(sender_id, receiver_id, amount)

    def withdraw(self, account_id: UUID, amount: Amount) -> None:
        self.withdraw_money.execute(account_id, amount)


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting ledger demo", app=settings.app_name, version=settings.app_version)

    ledger = Ledger(settings)
    sender = ledger.open_account(User(id=uuid4(), name="John Doe", email="john.doe@example.com"), Decimal("2000"))
    receiver = ledger.open_account(User(id=uuid4(), name="Jane Doe", email="jane.doe@example.com"))

    ledger.transfer(sender.id, receiver.id, Decimal("500"))
    ledger.withdraw(receiver.id, Decimal("100"))

    logger.info("Ledger demo finished", accounts=[repr(sender), repr(receiver)])
