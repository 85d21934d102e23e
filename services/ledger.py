"""Ledger: the collection of accounts and the account-number allocator."""

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from errors import AccountNotFound, AuthenticationFailed, InvalidTransfer
from models.account import Account

FIRST_ACCOUNT_NUMBER = 1001001001


@dataclass
class Ledger:
    """All accounts plus the counter used to number new ones.

    Every mutating operation holds ``lock`` for its whole validate, mutate and
    log sequence. The lock is re-entrant so an owner can hold it across a
    mutation and the snapshot save that follows.

    Args:
        accounts: Mapping of account number to Account.
        next_account_number: Number the next created account will receive.
    """

    accounts: Dict[int, Account] = field(default_factory=dict)
    next_account_number: int = FIRST_ACCOUNT_NUMBER
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def create_account(self, name: str, pin: str) -> Account:
        """Create and register a new account.

        Args:
            name: Account holder's display name.
            pin: 4-digit PIN, already validated by the caller.

        Returns:
            The new Account.
        """
        with self.lock:
            account_number = self.next_account_number
            self.next_account_number += 1
            account = Account.create(account_number, name, pin)
            self.accounts[account_number] = account
            return account

    def get(self, account_number: int) -> Optional[Account]:
        """Get an account by number, or None if it doesn't exist."""
        return self.accounts.get(account_number)

    def lookup(self, account_number: int) -> Account:
        """Get an account by number.

        Raises:
            AccountNotFound: If no account has this number.
        """
        account = self.accounts.get(account_number)
        if account is None:
            raise AccountNotFound(account_number)
        return account

    def exists(self, account_number: int) -> bool:
        return account_number in self.accounts

    def list_all(self) -> List[Account]:
        """Get all accounts, ordered by account number."""
        return [self.accounts[number] for number in sorted(self.accounts)]

    def total_balance(self) -> Decimal:
        return sum((a.balance for a in self.accounts.values()), Decimal("0"))

    def login(self, account_number: int, pin: str) -> Account:
        """Resolve an account and check its PIN.

        Raises:
            AccountNotFound: If no account has this number.
            AuthenticationFailed: If the PIN is wrong.
        """
        account = self.lookup(account_number)
        if not account.check_pin(pin):
            raise AuthenticationFailed("Incorrect PIN.")
        return account

    def deposit(self, account_number: int, amount) -> Account:
        with self.lock:
            account = self.lookup(account_number)
            account.deposit(amount)
            return account

    def withdraw(self, account_number: int, amount) -> Account:
        with self.lock:
            account = self.lookup(account_number)
            account.withdraw(amount)
            return account

    def change_pin(self, account_number: int, new_pin: str) -> Account:
        with self.lock:
            account = self.lookup(account_number)
            account.change_pin(new_pin)
            return account

    def transfer(self, from_account: int, to_account: int, amount) -> None:
        """Move money between two accounts.

        Both accounts are resolved and both sides are validated before either
        balance changes, so a failed transfer leaves both accounts untouched
        and a successful one preserves their combined balance.

        Args:
            from_account: Account number to debit.
            to_account: Account number to credit.
            amount: Positive amount to move.

        Raises:
            AccountNotFound: If either account doesn't exist.
            InvalidTransfer: If both numbers name the same account.
            InvalidAmount: If the amount is not positive or the destination
                balance can't hold it exactly.
            InsufficientFunds: If the source balance is too low.
        """
        with self.lock:
            source = self.lookup(from_account)
            destination = self.lookup(to_account)
            if source is destination:
                raise InvalidTransfer("Cannot transfer to the same account.")

            amount = source.can_debit(amount)
            destination.can_credit(amount)
            source.transfer_out(amount, destination.account_number)
            destination.transfer_in(amount, source.account_number)
