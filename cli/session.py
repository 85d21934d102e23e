#!/usr/bin/env python3
"""Interactive ATM session.

The main menu creates accounts, logs in, and lists accounts. After a
successful login the account menu offers balance, deposit, withdraw,
transfer, mini statement, and PIN change until the user logs out.
"""

from cli.accounts import cmd_list, create_account
from cli.prompts import format_money, read_amount, read_int, read_pin
from errors import AccountNotFound, AuthenticationFailed, BankError
from logger import get_logger

logger = get_logger()

MAIN_MENU = """
==== Welcome to Strongbox ====
1) Create new account
2) Login to account
3) List accounts (brief)
0) Exit"""

ACCOUNT_MENU = """
--- Account Menu for A/C {account_number} ---
1) Check balance
2) Deposit
3) Withdraw
4) Transfer
5) Mini-statement
6) Change PIN
0) Logout"""


def login(services):
    """Ask for an account number and PIN, allowing a limited number of tries.

    Returns:
        The authenticated Account, or None if login failed.
    """
    print("\n--- Login ---")
    account_number = read_int("Account number: ")
    if not services.ledger.exists(account_number):
        logger.info("Account not found.")
        return None

    max_attempts = services.config.max_pin_attempts
    for attempt in range(1, max_attempts + 1):
        pin = read_pin("Enter PIN: ")
        try:
            account = services.banking.login(account_number, pin)
        except AuthenticationFailed:
            logger.info(f"Incorrect PIN. Attempts left: {max_attempts - attempt}")
            continue
        except AccountNotFound:
            logger.info("Account not found.")
            return None

        logger.info(f"Login successful. Welcome, {account.name}!")
        return account

    logger.warning(
        f"Too many incorrect PIN attempts for A/C {account_number}. "
        "Returning to main menu."
    )
    return None


def show_mini_statement(services, account_number: int) -> None:
    print("\n--- Mini Statement ---")
    entries = services.banking.mini_statement(
        account_number, services.config.statement_length
    )
    if not entries:
        logger.info("No transactions.")
        return
    for entry in entries:
        logger.info(str(entry))

    summary = services.banking.activity_summary(account_number)
    symbol = services.config.currency_symbol
    logger.info("-" * 80)
    logger.info(
        f"In: {format_money(summary['deposits'] + summary['transfers_in'], symbol)} | "
        f"Out: {format_money(summary['withdrawals'] + summary['transfers_out'], symbol)}"
    )


def handle_account_choice(services, account, choice: int) -> bool:
    """Run one account menu action.

    Returns:
        False when the user logs out, True otherwise.

    Raises:
        BankError: If the requested operation is rejected.
    """
    banking = services.banking
    number = account.account_number
    symbol = services.config.currency_symbol

    if choice == 1:
        balance = banking.balance(number)
        logger.info(f"Current balance: {format_money(balance, symbol)}")
    elif choice == 2:
        amount = read_amount(f"Amount to deposit: {symbol}")
        banking.deposit(number, amount)
        logger.info(
            f"Deposited {format_money(amount, symbol)}. "
            f"New balance: {format_money(banking.balance(number), symbol)}"
        )
    elif choice == 3:
        amount = read_amount(f"Amount to withdraw: {symbol}")
        banking.withdraw(number, amount)
        logger.info(
            f"Withdrawn {format_money(amount, symbol)}. "
            f"New balance: {format_money(banking.balance(number), symbol)}"
        )
    elif choice == 4:
        to_account = read_int("Transfer to account number: ")
        if not services.ledger.exists(to_account):
            logger.info("Destination account not found.")
            return True
        amount = read_amount(f"Amount to transfer: {symbol}")
        banking.transfer(number, to_account, amount)
        logger.info(
            f"Transferred {format_money(amount, symbol)} to {to_account}. "
            f"Your balance: {format_money(banking.balance(number), symbol)}"
        )
    elif choice == 5:
        show_mini_statement(services, number)
    elif choice == 6:
        new_pin = read_pin("Enter new 4-digit PIN: ")
        banking.change_pin(number, new_pin)
        logger.info("PIN changed successfully.")
    elif choice == 0:
        logger.info("Logged out.")
        return False
    else:
        logger.info("Invalid choice.")
    return True


def account_menu(services, account) -> None:
    """Loop over the account menu until the user logs out."""
    while True:
        print(ACCOUNT_MENU.format(account_number=account.account_number))
        choice = read_int("Choice: ")
        try:
            if not handle_account_choice(services, account, choice):
                return
        except BankError as e:
            logger.error(f"Operation failed: {e}")


def run(services) -> None:
    """Run the main menu loop, saving the ledger on exit."""
    while True:
        print(MAIN_MENU)
        choice = read_int("Choice: ")
        if choice == 1:
            create_account(services)
        elif choice == 2:
            account = login(services)
            if account is not None:
                account_menu(services, account)
        elif choice == 3:
            cmd_list(None, services)
        elif choice == 0:
            break
        else:
            logger.info("Invalid option. Try again.")

    if services.banking.save():
        logger.info(f"Bank data saved to {services.store.path}")
    logger.info("Goodbye!")


def cmd_session(args, services):
    """Start the interactive ATM session."""
    run(services)


def setup_parser(subparsers):
    """Setup session subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "session",
        help="Start an interactive ATM session",
        description="Log in to an account and deposit, withdraw, or transfer money",
    )
    parser.set_defaults(func=cmd_session)
