#!/usr/bin/env python3

import sys

from cli.prompts import format_money
from db.schema import SNAPSHOT_VERSION
from errors import PersistenceError
from logger import get_logger

logger = get_logger()


def cmd_status(args, config, store):
    """Show snapshot location, version, and ledger totals."""
    if not store.exists():
        logger.info(
            f"No snapshot at {store.path}. One is written after the first change."
        )
        return

    try:
        header = store.read_header()
    except PersistenceError as e:
        logger.error(f"Snapshot is unreadable: {e}")
        sys.exit(1)

    version = header["version"]
    status_text = "CURRENT" if version == SNAPSHOT_VERSION else "UNSUPPORTED"

    logger.info("Snapshot Status:")
    logger.info("================")
    logger.info(f"Path: {store.path}")
    logger.info(f"Version: {version} ({status_text})")
    logger.info(f"Saved at: {header['saved_at']}")

    if version != SNAPSHOT_VERSION:
        return

    try:
        ledger = store.load()
    except PersistenceError as e:
        logger.error(f"Snapshot is unreadable: {e}")
        sys.exit(1)

    logger.info(f"\nAccounts: {len(ledger.accounts)}")
    logger.info(f"Next account number: {ledger.next_account_number}")
    logger.info(
        "Total holdings: "
        f"{format_money(ledger.total_balance(), config.currency_symbol)}"
    )


def cmd_reset(args, config, store):
    """Delete the snapshot and start over with an empty ledger."""
    if not config.enable_reset:
        logger.error("Reset is disabled in configuration (enable_reset=false).")
        logger.info("To enable reset, set enable_reset=true in ~/.config/strongbox.toml")
        sys.exit(1)

    logger.info(f"Snapshot: {store.path}")
    response = input("\nThis will delete ALL accounts. Continue? (yes/no): ")
    if response.lower() != "yes":
        logger.info("Reset cancelled.")
        return

    if store.delete():
        logger.info("✓ Snapshot deleted")
    else:
        logger.info("✓ No snapshot to delete")


def setup_parser(subparsers):
    """Setup snapshot subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "snapshot",
        help="Inspect or reset the saved ledger",
        description="Manage the ledger snapshot file",
    )

    snapshot_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available snapshot commands",
        dest="subcommand",
        required=True,
    )

    # snapshot status
    status_parser = snapshot_subparsers.add_parser(
        "status", help="Show snapshot status"
    )
    status_parser.set_defaults(func=cmd_status)

    # snapshot reset
    reset_parser = snapshot_subparsers.add_parser(
        "reset", help="Delete the snapshot (requires enable_reset)"
    )
    reset_parser.set_defaults(func=cmd_reset)
