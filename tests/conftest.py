import pytest
from decimal import Decimal
from unittest.mock import Mock
from uuid import uuid4

from account import Account
from models import User
from notifications import NotificationService
from repositories import AccountRepository


@pytest.fixture
def notification_service():
    return Mock(spec=NotificationService)


@pytest.fixture
def account_repo():
    return Mock(spec=AccountRepository)


@pytest.fixture
def make_account(notification_service):
    """Build an account owned by a fresh user, wired to the mocked notification service."""

    def _make(balance="0", name="John Doe", email="john.doe@example.com"):
        owner = User(id=uuid4(), name=name, email=email)
        return Account(uuid4(), owner, Decimal(balance), notification_service)

    return _make


@pytest.fixture
def serve_accounts(account_repo):
    """Make the mocked repository return the given accounts by id (None for anything else)."""

    def _serve(*accounts):
        account_repo.get_account_by_id.side_effect = {a.id: a for a in accounts}.get

    return _serve
