"""Versioned record schema for ledger snapshots.

A snapshot is one JSON document. The ``format`` marker and ``version`` are
checked before the rest of the document is validated, so an unknown version is
reported separately from a damaged file.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from models.account import Account
from models.credentials import PlainTextPin
from models.transaction import ENTRY_KINDS, TransactionEntry
from services.ledger import Ledger

SNAPSHOT_FORMAT = "strongbox-ledger"
SNAPSHOT_VERSION = 1


class TransactionRecord(BaseModel):
    """One transaction log entry."""

    timestamp: datetime
    kind: str
    description: str
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)

    @model_validator(mode="after")
    def check_kind(self):
        if self.kind not in ENTRY_KINDS:
            raise ValueError(f"unknown transaction kind '{self.kind}'")
        return self


class CredentialRecord(BaseModel):
    scheme: Literal["plain"]
    pin: str = Field(pattern=r"^[0-9]{4}$")


class AccountRecord(BaseModel):
    """One account with its full transaction log."""

    account_number: int = Field(gt=0)
    name: str
    credential: CredentialRecord
    balance: Decimal = Field(ge=0, decimal_places=2)
    transactions: List[TransactionRecord]


class SnapshotRecord(BaseModel):
    """The whole ledger.

    Attributes:
        format: Constant marker identifying a Strongbox snapshot.
        version: Schema version the document was written with.
        saved_at: When the snapshot was written.
        next_account_number: Ledger counter; above every issued number.
        accounts: All accounts, ordered by account number.
    """

    format: Literal["strongbox-ledger"]
    version: int
    saved_at: datetime
    next_account_number: int = Field(gt=0)
    accounts: List[AccountRecord]

    @model_validator(mode="after")
    def check_account_numbers(self):
        numbers = [a.account_number for a in self.accounts]
        if len(numbers) != len(set(numbers)):
            raise ValueError("duplicate account numbers")
        if numbers and max(numbers) >= self.next_account_number:
            raise ValueError(
                "next_account_number must be greater than every account number"
            )
        return self

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> "SnapshotRecord":
        """Build a snapshot record from a live ledger."""
        return cls(
            format=SNAPSHOT_FORMAT,
            version=SNAPSHOT_VERSION,
            saved_at=datetime.now().replace(microsecond=0),
            next_account_number=ledger.next_account_number,
            accounts=[
                AccountRecord(
                    account_number=account.account_number,
                    name=account.name,
                    credential=CredentialRecord(
                        scheme=account.credential.scheme,
                        pin=account.credential.pin,
                    ),
                    balance=account.balance,
                    transactions=[
                        TransactionRecord(**entry.to_dict())
                        for entry in account.transactions
                    ],
                )
                for account in ledger.list_all()
            ],
        )

    def to_ledger(self) -> Ledger:
        """Rebuild a live ledger from this record."""
        accounts = {}
        for record in self.accounts:
            accounts[record.account_number] = Account(
                account_number=record.account_number,
                name=record.name,
                credential=PlainTextPin(record.credential.pin),
                balance=record.balance,
                transactions=[
                    TransactionEntry(
                        timestamp=t.timestamp,
                        kind=t.kind,
                        description=t.description,
                        amount=t.amount,
                    )
                    for t in record.transactions
                ],
            )
        return Ledger(accounts=accounts, next_account_number=self.next_account_number)
