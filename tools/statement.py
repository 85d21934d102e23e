"""Account statement tools."""

from decimal import Decimal
from typing import Dict, List

from models import transaction as kinds
from models.account import Account
from models.transaction import TransactionEntry


def mini_statement(account: Account, limit: int = 10) -> List[TransactionEntry]:
    """Get the most recent entries of an account's transaction log.

    Args:
        account: Account to read.
        limit: Maximum number of entries to return.

    Returns:
        Up to ``limit`` entries in chronological order, most recent last.
    """
    if limit <= 0:
        return []
    return list(account.transactions[-limit:])


def activity_summary(account: Account) -> Dict[str, Decimal]:
    """Total the money moved through an account, by direction.

    Args:
        account: Account to summarize.

    Returns:
        Dictionary with:
        - "deposits": Total deposited (Decimal)
        - "withdrawals": Total withdrawn (Decimal)
        - "transfers_in": Total received from other accounts (Decimal)
        - "transfers_out": Total sent to other accounts (Decimal)
        - "net": Credits minus debits, equal to the balance (Decimal)

    Example:
        {
            "deposits": Decimal("500.00"),
            "withdrawals": Decimal("0"),
            "transfers_in": Decimal("0"),
            "transfers_out": Decimal("200.00"),
            "net": Decimal("300.00"),
        }
    """
    totals = {
        kinds.DEPOSIT: Decimal("0"),
        kinds.WITHDRAWAL: Decimal("0"),
        kinds.TRANSFER_IN: Decimal("0"),
        kinds.TRANSFER_OUT: Decimal("0"),
    }

    for entry in account.transactions:
        if entry.kind in totals and entry.amount is not None:
            totals[entry.kind] += entry.amount

    credits = totals[kinds.DEPOSIT] + totals[kinds.TRANSFER_IN]
    debits = totals[kinds.WITHDRAWAL] + totals[kinds.TRANSFER_OUT]

    return {
        "deposits": totals[kinds.DEPOSIT],
        "withdrawals": totals[kinds.WITHDRAWAL],
        "transfers_in": totals[kinds.TRANSFER_IN],
        "transfers_out": totals[kinds.TRANSFER_OUT],
        "net": credits - debits,
    }
