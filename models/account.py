"""Account model: balance, credential, and append-only transaction log."""

from dataclasses import dataclass, field
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from typing import List

from errors import InsufficientFunds, InvalidAmount
from models import transaction as kinds
from models.credentials import Credential, PlainTextPin
from models.transaction import TransactionEntry

CENT = Decimal("0.01")

# Balance arithmetic raises instead of rounding when a result needs more
# digits than the context holds.
MONEY_CONTEXT = Context(prec=28, traps=[InvalidOperation, Inexact, Overflow])


def to_amount(value) -> Decimal:
    """Convert user or caller input into a Decimal amount.

    Args:
        value: An int, str, float, or Decimal.

    Returns:
        The value as a Decimal.

    Raises:
        InvalidAmount: If the value cannot be read as a finite number, has
            more than two decimal places, or is too large to hold in cents.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    try:
        cents = amount.quantize(CENT, context=MONEY_CONTEXT)
    except Inexact:
        raise InvalidAmount(f"Amount has more than two decimal places: {value!r}")
    except InvalidOperation:
        raise InvalidAmount(f"Amount is too large: {value!r}")
    # Zeros past the cent are dropped: "5.000" becomes "5.00".
    return amount if amount.as_tuple().exponent >= -2 else cents


def _positive(value, action: str) -> Decimal:
    amount = to_amount(value)
    if amount <= 0:
        raise InvalidAmount(f"{action} amount must be positive.")
    return amount


def _credited(balance: Decimal, amount: Decimal) -> Decimal:
    try:
        return MONEY_CONTEXT.add(balance, amount)
    except (Inexact, Overflow):
        raise InvalidAmount(
            f"Crediting {amount:.2f} would exceed the largest balance an account can hold."
        )


def _debited(balance: Decimal, amount: Decimal) -> Decimal:
    try:
        return MONEY_CONTEXT.subtract(balance, amount)
    except (Inexact, Overflow):
        raise InvalidAmount(f"Cannot debit {amount:.2f} exactly from this balance.")


@dataclass
class Account:
    account_number: int
    name: str
    credential: Credential
    balance: Decimal = Decimal("0")
    transactions: List[TransactionEntry] = field(default_factory=list)

    @classmethod
    def create(cls, account_number: int, name: str, pin: str) -> "Account":
        """Open a new account with a zero balance and a "created" entry."""
        account = cls(
            account_number=account_number,
            name=name.strip(),
            credential=PlainTextPin(str(pin)),
        )
        account._record(kinds.CREATED, "Account created.")
        return account

    def check_pin(self, candidate) -> bool:
        return self.credential.verify(str(candidate))

    def change_pin(self, new_pin) -> None:
        """Replace the PIN. The 4-digit format is checked by the caller."""
        self.credential = PlainTextPin(str(new_pin))
        self._record(kinds.PIN_CHANGE, "PIN changed.")

    def deposit(self, amount) -> None:
        amount = _positive(amount, "Deposit")
        self.balance = _credited(self.balance, amount)
        self._record(
            kinds.DEPOSIT,
            f"Deposited: {amount:.2f} | Balance: {self.balance:.2f}",
            amount,
        )

    def withdraw(self, amount) -> None:
        amount = self._debitable(amount, "Withdrawal")
        self.balance = _debited(self.balance, amount)
        self._record(
            kinds.WITHDRAWAL,
            f"Withdrawn: {amount:.2f} | Balance: {self.balance:.2f}",
            amount,
        )

    def transfer_out(self, amount, to_account: int) -> None:
        amount = self._debitable(amount, "Transfer")
        self.balance = _debited(self.balance, amount)
        self._record(
            kinds.TRANSFER_OUT,
            f"Transferred {amount:.2f} to A/C {to_account} | Balance: {self.balance:.2f}",
            amount,
        )

    def transfer_in(self, amount, from_account: int) -> None:
        # No funds check: money arriving can't be insufficient.
        amount = self.can_credit(amount)
        self.balance = _credited(self.balance, amount)
        self._record(
            kinds.TRANSFER_IN,
            f"Received {amount:.2f} from A/C {from_account} | Balance: {self.balance:.2f}",
            amount,
        )

    def can_debit(self, amount) -> Decimal:
        """Validate a debit without applying it.

        Returns:
            The amount as a Decimal.

        Raises:
            InvalidAmount: If the amount is not positive.
            InsufficientFunds: If the amount exceeds the balance.
        """
        return self._debitable(amount, "Transfer")

    def can_credit(self, amount) -> Decimal:
        """Validate an incoming transfer without applying it.

        Raises:
            InvalidAmount: If the amount is not positive or the new balance
                can't be held exactly.
        """
        amount = _positive(amount, "Transfer")
        _credited(self.balance, amount)
        return amount

    def _debitable(self, amount, action: str) -> Decimal:
        amount = _positive(amount, action)
        if amount > self.balance:
            raise InsufficientFunds(
                f"Insufficient balance: {self.balance:.2f} available, "
                f"{amount:.2f} requested."
            )
        _debited(self.balance, amount)
        return amount

    def _record(self, kind: str, description: str, amount: Decimal = None) -> None:
        self.transactions.append(TransactionEntry.now(kind, description, amount))

    def __str__(self) -> str:
        return f"A/C {self.account_number} | {self.name} | Balance: {self.balance:.2f}"
