import pytest
from decimal import Decimal
from uuid import uuid4

import structlog
from structlog.testing import capture_logs
from pydantic import ValidationError

from account import Account
import config
from errors import ERROR_MESSAGES, ErrorKind, InvalidAccountIds, InvalidAmount, PayInLimitExceeded
from main import Ledger, configure_logging
from models import NotificationKind, User
from notifications import LoggingNotificationService, RecordingNotificationService
from repositories import InMemoryAccountRepository
from services import TransferMoney, WithdrawMoney


def make_user(name="John Doe", email="john.doe@example.com"):
    return User(id=uuid4(), name=name, email=email)


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest.fixture
def ledger(notifications):
    return Ledger(config.TestingSettings(), notification_service=notifications)


class TestErrorMessages:
    """Test the error message table."""

    def test_every_kind_has_a_message(self):
        assert set(ERROR_MESSAGES) == set(ErrorKind)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ERROR_MESSAGES[ErrorKind.INVALID_ACCOUNT_IDS] = "changed"

    def test_custom_message(self):
        error = InvalidAccountIds("Sender is unknown")

        assert str(error) == "Sender is unknown"
        assert error.error_code == "INVALID_ACCOUNT_IDS"


class TestModels:
    """Test input validation."""

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            User(id=uuid4(), name="John Doe", email="not an email")

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            User(id=uuid4(), name="", email="john.doe@example.com")

    def test_user_is_immutable(self):
        user = make_user()

        with pytest.raises(ValidationError):
            user.email = "other@example.com"


class TestSettings:
    """Test configuration."""

    def test_defaults(self):
        settings = config.Settings()

        assert settings.pay_in_limit == Decimal("4000")
        assert settings.low_funds_mark == Decimal("500")
        assert settings.log_format == "json"

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("LEDGER_PAY_IN_LIMIT", "1000")
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "DEBUG")

        settings = config.Settings()

        assert settings.pay_in_limit == Decimal("1000")
        assert settings.log_level == "DEBUG"

    def test_settings_for_environment(self):
        assert isinstance(config.get_settings_for_environment("development"), config.DevelopmentSettings)
        assert isinstance(config.get_settings_for_environment("PRODUCTION"), config.ProductionSettings)
        assert isinstance(config.get_settings_for_environment("testing"), config.TestingSettings)
        assert type(config.get_settings_for_environment("unknown")) is config.Settings

    def test_get_settings_follows_ledger_env(self, monkeypatch):
        monkeypatch.setenv("LEDGER_ENV", "production")
        config.get_settings.cache_clear()
        try:
            settings = config.get_settings()

            assert isinstance(settings, config.ProductionSettings)
            assert settings is config.get_settings()
        finally:
            config.get_settings.cache_clear()

    def test_get_settings_defaults_to_development(self, monkeypatch):
        monkeypatch.delenv("LEDGER_ENV", raising=False)
        config.get_settings.cache_clear()
        try:
            assert isinstance(config.get_settings(), config.DevelopmentSettings)
        finally:
            config.get_settings.cache_clear()

    def test_headroom_mark_is_separate_from_low_funds_mark(self, monkeypatch):
        monkeypatch.setenv("LEDGER_LOW_FUNDS_MARK", "50")

        settings = config.Settings()

        assert settings.low_funds_mark == Decimal("50")
        assert settings.pay_in_headroom_mark == Decimal("500")


class TestRepository:
    """Test the in-memory repository."""

    def test_get_and_update(self, notifications):
        repo = InMemoryAccountRepository()
        account = Account(uuid4(), make_user(), Decimal("100"), notifications)
        repo.add(account)

        assert repo.get_account_by_id(account.id) is account
        assert repo.get_account_by_id(uuid4()) is None

        account.withdraw(Decimal("40"))
        repo.update(account)

        assert [w.balance for w in repo.writes_for(account.id)] == [Decimal("60")]

    def test_update_unknown_account(self, notifications):
        repo = InMemoryAccountRepository()
        account = Account(uuid4(), make_user(), Decimal("100"), notifications)

        with pytest.raises(ValueError):
            repo.update(account)


class TestNotificationServices:
    """Test notification adapters."""

    def test_recording_service(self, notifications):
        notifications.notify_funds_low("a@example.com")
        notifications.notify_approaching_pay_in_limit("b@example.com")
        notifications.notify_funds_low("c@example.com")

        assert notifications.count() == 3
        assert notifications.count(NotificationKind.funds_low) == 2
        assert [n.address for n in notifications.sent] == ["a@example.com", "b@example.com", "c@example.com"]

        notifications.clear()
        assert notifications.count() == 0

    def test_logging_service(self):
        service = LoggingNotificationService()

        with capture_logs() as logs:
            service.notify_funds_low("john.doe@example.com")
            service.notify_approaching_pay_in_limit("john.doe@example.com")

        assert [log["kind"] for log in logs] == ["funds_low", "approaching_pay_in_limit"]
        assert all(log["address"] == "john.doe@example.com" for log in logs)


class TestLedger:
    """Test the wired-up ledger end to end."""

    def test_scenario_transfer_then_withdraw(self, ledger, notifications):
        sender = ledger.open_account(make_user(), Decimal("2000"))
        receiver = ledger.open_account(make_user("Jane Doe", "jane.doe@example.com"))

        ledger.transfer(sender.id, receiver.id, Decimal("500"))
        ledger.withdraw(receiver.id, Decimal("100"))

        assert sender.balance == Decimal("1500")
        assert receiver.balance == Decimal("400")
        assert receiver.withdrawn == Decimal("100")
        assert [n.address for n in notifications.sent] == ["jane.doe@example.com"]
        assert len(ledger.account_repo.writes) == 3

    def test_configured_limits_are_applied(self, notifications):
        settings = config.TestingSettings(pay_in_limit=Decimal("100"), low_funds_mark=Decimal("10"))
        ledger = Ledger(settings, notification_service=notifications)
        account = ledger.open_account(make_user())

        with pytest.raises(PayInLimitExceeded):
            account.pay_in(Decimal("101"))

        account.pay_in(Decimal("95"))
        assert notifications.count(NotificationKind.approaching_pay_in_limit) == 1

    def test_headroom_mark_applied_independently(self, notifications):
        settings = config.TestingSettings(low_funds_mark=Decimal("10"), pay_in_headroom_mark=Decimal("1000"))
        ledger = Ledger(settings, notification_service=notifications)
        account = ledger.open_account(make_user(), Decimal("100"))

        account.pay_in(Decimal("3100"))
        account.withdraw(Decimal("3000"))

        assert account.pay_in_headroom_mark == Decimal("1000")
        assert notifications.count(NotificationKind.approaching_pay_in_limit) == 1
        assert notifications.count(NotificationKind.funds_low) == 0

    def test_use_cases_share_one_transaction_scope(self, ledger):
        assert isinstance(ledger.transfer_money, TransferMoney)
        assert isinstance(ledger.withdraw_money, WithdrawMoney)
        assert ledger.transfer_money.transaction_scope is ledger.transaction_scope
        assert ledger.withdraw_money.transaction_scope is ledger.transaction_scope

    def test_negative_transfer_rejected(self, ledger):
        sender = ledger.open_account(make_user())
        receiver = ledger.open_account(make_user())

        with pytest.raises(InvalidAmount):
            ledger.transfer(sender.id, receiver.id, Decimal("-500"))

        assert sender.balance == Decimal("0")
        assert receiver.balance == Decimal("0")
        assert ledger.account_repo.writes == []

    def test_unknown_account(self, ledger):
        with pytest.raises(InvalidAccountIds):
            ledger.withdraw(uuid4(), Decimal("1"))

    def test_transfer_logs(self, ledger):
        sender = ledger.open_account(make_user(), Decimal("2000"))
        receiver = ledger.open_account(make_user())

        with capture_logs() as logs:
            ledger.transfer(sender.id, receiver.id, Decimal("500"))

        events = [log["event"] for log in logs]
        assert events[0] == "Processing transfer"
        assert events[-1] == "Transfer processed successfully"

    def test_configure_logging(self):
        configure_logging(config.TestingSettings())
        structlog.get_logger().warning("Logging configured", check=True)
        structlog.reset_defaults()
