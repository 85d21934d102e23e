"""Input helpers for the interactive session.

Each reader keeps prompting until it gets a well-formed value.
"""

from decimal import Decimal

from errors import InvalidAmount
from models.account import to_amount
from models.credentials import is_valid_pin


def read_line(prompt: str) -> str:
    return input(prompt).strip()


def read_int(prompt: str) -> int:
    while True:
        value = read_line(prompt)
        try:
            return int(value)
        except ValueError:
            print("Please enter a valid number.")


def read_amount(prompt: str) -> Decimal:
    """Read a monetary amount such as 2500.50.

    Positivity isn't checked here; the account rejects non-positive amounts.
    """
    while True:
        value = read_line(prompt).replace(",", "")
        try:
            return to_amount(value)
        except InvalidAmount:
            print("Please enter a valid amount (e.g., 2500.50).")


def read_pin(prompt: str) -> str:
    while True:
        pin = read_line(prompt)
        if is_valid_pin(pin):
            return pin
        print("PIN must be 4 digits.")


def read_name(prompt: str) -> str:
    while True:
        name = read_line(prompt)
        if name:
            return name
        print("Name cannot be empty.")


def format_money(amount: Decimal, symbol: str = "") -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{symbol}{amount:,.2f}"
