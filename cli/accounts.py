#!/usr/bin/env python3

from cli.prompts import format_money, read_name, read_pin
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all accounts in the ledger."""
    accounts = services.banking.list_accounts()
    symbol = services.config.currency_symbol

    if not accounts:
        logger.info("No accounts created yet.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for account in accounts:
        logger.info(
            f"A/C {account.account_number} | {account.name} | "
            f"Balance: {format_money(account.balance, symbol)}"
        )

    logger.info("-" * 80)
    logger.info(f"Total accounts: {len(accounts)}")


def create_account(services):
    """Interactively create a new account.

    Returns:
        The created Account.
    """
    print("\nCreate New Account")
    print("=" * 80)

    name = read_name("Full name: ")
    pin = read_pin("Choose a 4-digit PIN: ")

    account = services.banking.open_account(name, pin)

    logger.info("\n✓ Account created successfully!")
    logger.info(f"  Your account number: {account.account_number}")
    logger.info(f"  Name: {account.name}")
    return account


def cmd_create(args, services):
    """Interactively create a new account."""
    create_account(services)


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="Manage accounts",
        description="Create and list bank accounts",
    )

    # Add subcommands for accounts
    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    # accounts list
    list_parser = accounts_subparsers.add_parser("list", help="List all accounts")
    list_parser.set_defaults(func=cmd_list)

    # accounts create
    create_parser = accounts_subparsers.add_parser(
        "create", help="Create a new account interactively"
    )
    create_parser.set_defaults(func=cmd_create)
