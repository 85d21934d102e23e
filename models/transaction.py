from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Entry kinds
CREATED = "created"
DEPOSIT = "deposit"
WITHDRAWAL = "withdrawal"
TRANSFER_OUT = "transfer_out"
TRANSFER_IN = "transfer_in"
PIN_CHANGE = "pin_change"

ENTRY_KINDS = (CREATED, DEPOSIT, WITHDRAWAL, TRANSFER_OUT, TRANSFER_IN, PIN_CHANGE)


@dataclass(frozen=True)
class TransactionEntry:
    timestamp: datetime  # second precision, local time
    kind: str  # one of ENTRY_KINDS
    description: str  # human readable, e.g., "Deposited: 500.00 | Balance: 500.00"
    amount: Optional[Decimal] = None  # None for entries that don't move money

    @classmethod
    def now(
        cls, kind: str, description: str, amount: Optional[Decimal] = None
    ) -> "TransactionEntry":
        """Create an entry stamped with the current time."""
        return cls(
            timestamp=datetime.now().replace(microsecond=0),
            kind=kind,
            description=description,
            amount=amount,
        )

    def __str__(self) -> str:
        return f"{self.timestamp.strftime(TIMESTAMP_FORMAT)} - {self.description}"

    def to_dict(self) -> dict:
        """Convert entry to dictionary for snapshot storage."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind,
            "description": self.description,
            "amount": str(self.amount) if self.amount is not None else None,
        }
