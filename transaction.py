from abc import ABC, abstractmethod
import structlog

from account import Account, Amount
from errors import LedgerError
from repositories import AccountRepository

logger = structlog.get_logger()


class TransactionScope(ABC):
    @abstractmethod
    def update_accounts(self, amount: Amount, sender: Account, receiver: Account) -> None:
        """Debit the sender, credit the receiver and persist both."""
        pass

    @abstractmethod
    def update_account(self, amount: Amount, account: Account) -> None:
        """Withdraw from a single account and persist it."""
        pass


class Transaction(TransactionScope):
    """
    Applies account mutations and persists each account right after it changes.

    A transfer is not atomic across both accounts: if the credit fails after
    the debit was persisted, the debit stays in place and the error is
    re-raised to the caller. No compensating credit is issued.
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    def update_accounts(self, amount: Amount, sender: Account, receiver: Account) -> None:
        self._update_sender(amount, sender)
        try:
            self._update_receiver(amount, receiver)
        except LedgerError as e:
            logger.warning(
                "Transfer credit failed after debit was persisted",
                sender_id=str(sender.id),
                receiver_id=str(receiver.id),
                amount=str(amount),
                error_code=e.error_code
            )
            raise

    def update_account(self, amount: Amount, account: Account) -> None:
        account.withdraw(amount)
        self.account_repo.update(account)

        logger.debug(
            "Withdrawal persisted",
            account_id=str(account.id),
            amount=str(amount),
            new_balance=str(account.balance)
        )

    def _update_sender(self, amount: Amount, sender: Account) -> None:
        sender.pay_out(amount)
        self.account_repo.update(sender)

        logger.debug(
            "Debit persisted",
            account_id=str(sender.id),
            amount=str(amount),
            new_balance=str(sender.balance)
        )

    def _update_receiver(self, amount: Amount, receiver: Account) -> None:
        receiver.pay_in(amount)
        self.account_repo.update(receiver)

        logger.debug(
            "Credit persisted",
            account_id=str(receiver.id),
            amount=str(amount),
            new_balance=str(receiver.balance)
        )
