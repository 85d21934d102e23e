"""Banking service: ledger operations followed by a snapshot save."""

from decimal import Decimal
from typing import Dict, List, Tuple

from errors import InvalidPin, PersistenceError
from logger import get_logger
from models.account import Account
from models.credentials import is_valid_pin
from models.transaction import TransactionEntry
from services.ledger import Ledger
from tools.statement import activity_summary, mini_statement

logger = get_logger()


class BankingService:
    """Service used by the interaction layer for every account operation.

    Each mutating call saves a snapshot while still holding the ledger lock.
    A failed save is logged as a warning; the in-memory ledger stays
    authoritative and the call still succeeds.

    Args:
        ledger: The ledger to operate on.
        store: Snapshot store used to persist the ledger.
    """

    def __init__(self, ledger: Ledger, store):
        self.ledger = ledger
        self.store = store

    def save(self) -> bool:
        """Save a snapshot of the ledger.

        Returns:
            True if the snapshot was written, False if the save failed.
        """
        with self.ledger.lock:
            try:
                self.store.save(self.ledger)
                return True
            except PersistenceError as e:
                logger.warning(f"Failed to save bank data: {e}")
                return False

    def open_account(self, name: str, pin: str) -> Account:
        """Open an account and save.

        Raises:
            InvalidPin: If the PIN is not exactly four digits.
        """
        _check_pin_format(pin)
        with self.ledger.lock:
            account = self.ledger.create_account(name, pin)
            logger.debug(f"Opened account {account.account_number}")
            self.save()
            return account

    def login(self, account_number: int, pin: str) -> Account:
        """Authenticate against an account.

        Raises:
            AccountNotFound: If the account doesn't exist.
            AuthenticationFailed: If the PIN is wrong.
        """
        return self.ledger.login(account_number, pin)

    def balance(self, account_number: int) -> Decimal:
        return self.ledger.lookup(account_number).balance

    def deposit(self, account_number: int, amount) -> Account:
        with self.ledger.lock:
            account = self.ledger.deposit(account_number, amount)
            self.save()
            return account

    def withdraw(self, account_number: int, amount) -> Account:
        with self.ledger.lock:
            account = self.ledger.withdraw(account_number, amount)
            self.save()
            return account

    def transfer(self, from_account: int, to_account: int, amount) -> Account:
        """Transfer money and save.

        Returns:
            The source account after the transfer.
        """
        with self.ledger.lock:
            self.ledger.transfer(from_account, to_account, amount)
            logger.debug(f"Transferred {amount} from {from_account} to {to_account}")
            self.save()
            return self.ledger.lookup(from_account)

    def change_pin(self, account_number: int, new_pin: str) -> Account:
        _check_pin_format(new_pin)
        with self.ledger.lock:
            account = self.ledger.change_pin(account_number, new_pin)
            self.save()
            return account

    def list_accounts(self) -> List[Account]:
        return self.ledger.list_all()

    def get_transactions(self, account_number: int) -> Tuple[TransactionEntry, ...]:
        """Get an account's transaction log, most recent last."""
        return tuple(self.ledger.lookup(account_number).transactions)

    def mini_statement(self, account_number: int, limit: int) -> List[TransactionEntry]:
        return mini_statement(self.ledger.lookup(account_number), limit)

    def activity_summary(self, account_number: int) -> Dict[str, Decimal]:
        return activity_summary(self.ledger.lookup(account_number))


def _check_pin_format(pin) -> None:
    if not is_valid_pin(pin):
        raise InvalidPin("PIN must be exactly 4 digits.")
