"""Domain exceptions for Strongbox.

Validation errors are raised before any state changes, so callers can report
them and let the user retry.
"""


class BankError(Exception):
    """Base class for all ledger errors."""


class InvalidAmount(BankError):
    """Raised when a monetary amount is zero, negative, or not a number."""


class InsufficientFunds(BankError):
    """Raised when a withdrawal or transfer exceeds the account balance."""


class AccountNotFound(BankError):
    """Raised when an account number is not present in the ledger."""

    def __init__(self, account_number: int):
        super().__init__(f"Account {account_number} not found")
        self.account_number = account_number


class AuthenticationFailed(BankError):
    """Raised when a PIN does not match the account's credential."""


class InvalidTransfer(BankError):
    """Raised when a transfer names the same account on both sides."""


class InvalidPin(BankError):
    """Raised when a new PIN is not exactly four digits."""


class PersistenceError(BankError):
    """Raised when a snapshot cannot be written or read."""


class CorruptSnapshotError(PersistenceError):
    """Raised when a snapshot file exists but is not a valid ledger snapshot."""


class UnsupportedSnapshotVersionError(PersistenceError):
    """Raised when a snapshot was written with a schema version we can't read.

    Attributes:
        version: The version number found in the file.
    """

    def __init__(self, version, supported: int):
        super().__init__(
            f"Snapshot schema version {version} is not supported "
            f"(expected {supported})"
        )
        self.version = version
        self.supported = supported
