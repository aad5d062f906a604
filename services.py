from typing import Optional
from uuid import UUID
import structlog

from account import Amount
from errors import InvalidAccountIds, LedgerError
from repositories import AccountRepository
from transaction import Transaction, TransactionScope

logger = structlog.get_logger()


class TransferMoney:
    def __init__(self, account_repo: AccountRepository, transaction_scope: Optional[TransactionScope] = None):
        self.account_repo = account_repo
        self.transaction_scope = transaction_scope or Transaction(account_repo)

    def execute(self, sender_id: UUID, receiver_id: UUID, amount: Amount) -> None:
        """Move money from one account to another."""

        logger.info(
            "Processing transfer",
            sender_id=str(sender_id),
            receiver_id=str(receiver_id),
            amount=str(amount)
        )

        sender = self.account_repo.get_account_by_id(sender_id)
        receiver = self.account_repo.get_account_by_id(receiver_id)

        if sender is None or receiver is None:
            logger.warning(
                "Account not found",
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                sender_found=sender is not None,
                receiver_found=receiver is not None
            )
            raise InvalidAccountIds()

        try:
            self.transaction_scope.update_accounts(amount, sender, receiver)
        except LedgerError as e:
            logger.warning(
                "Transfer rejected",
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                amount=str(amount),
                error_code=e.error_code
            )
            raise

        logger.info(
            "Transfer processed successfully",
            sender_id=str(sender_id),
            receiver_id=str(receiver_id),
            sender_balance=str(sender.balance),
            receiver_balance=str(receiver.balance)
        )


class WithdrawMoney:
    def __init__(self, account_repo: AccountRepository, transaction_scope: Optional[TransactionScope] = None):
        self.account_repo = account_repo
        self.transaction_scope = transaction_scope or Transaction(account_repo)

    def execute(self, account_id: UUID, amount: Amount) -> None:
        """Withdraw money from a single account."""

        logger.info(
            "Processing withdrawal",
            account_id=str(account_id),
            amount=str(amount)
        )

        account = self.account_repo.get_account_by_id(account_id)

        if account is None:
            logger.warning("Account not found", account_id=str(account_id))
            raise InvalidAccountIds()

        try:
            self.transaction_scope.update_account(amount, account)
        except LedgerError as e:
            logger.warning(
                "Withdrawal rejected",
                account_id=str(account_id),
                amount=str(amount),
                error_code=e.error_code
            )
            raise

        logger.info(
            "Withdrawal processed successfully",
            account_id=str(account_id),
            new_balance=str(account.balance)
        )


# Factory functions for dependency injection
def get_transfer_money(
    account_repo: AccountRepository,
    transaction_scope: Optional[TransactionScope] = None
) -> TransferMoney:
    return TransferMoney(account_repo, transaction_scope)


def get_withdraw_money(
    account_repo: AccountRepository,
    transaction_scope: Optional[TransactionScope] = None
) -> WithdrawMoney:
    return WithdrawMoney(account_repo, transaction_scope)
