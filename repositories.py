from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from account import Account
from models import AccountSnapshot


class AccountRepository(ABC):
    @abstractmethod
    def get_account_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by id. Returns None if account doesn't exist."""
        pass

    @abstractmethod
    def update(self, account: Account) -> None:
        """Persist the full current state of the account, overwriting what was stored."""
        pass


class InMemoryAccountRepository(AccountRepository):
    """
    Dictionary-backed repository.

    Each ``update`` also records a snapshot in ``writes`` so callers can see
    exactly what was persisted and when. No per-account locking is done here;
    concurrent callers must serialize access to an account themselves.
    """

    def __init__(self):
        self.accounts: Dict[UUID, Account] = {}
        self.writes: List[AccountSnapshot] = []

    def add(self, account: Account) -> None:
        self.accounts[account.id] = account

    def get_account_by_id(self, account_id: UUID) -> Optional[Account]:
        return self.accounts.get(account_id)

    def update(self, account: Account) -> None:
        if account.id not in self.accounts:
            raise ValueError(f"Account {account.id} does not exist")
        self.accounts[account.id] = account
        self.writes.append(account.snapshot())

    def writes_for(self, account_id: UUID) -> List[AccountSnapshot]:
        return [w for w in self.writes if w.account_id == account_id]
