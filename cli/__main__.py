#!/usr/bin/env python3
"""
Strongbox CLI - Interactive banking ledger with a persistent snapshot.

Usage:
    python -m cli [--data-file PATH] <command> [subcommand]

Commands:
    session      Start an interactive ATM session
    accounts     Manage accounts
    snapshot     Inspect or reset the saved ledger

Examples:
    python -m cli session
    python -m cli accounts list
    python -m cli accounts create
    python -m cli --data-file ./bank.json snapshot status
"""

import sys
import argparse
from cli import accounts, session, snapshot
from config import load_config
from db.snapshot import SnapshotStore
from services.base import Services
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="strongbox",
        description="Strongbox - Interactive banking ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--data-file",
        metavar="PATH",
        help="Snapshot file to use instead of the configured one",
    )

    # Create subparsers for each command
    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    session.setup_parser(subparsers)
    accounts.setup_parser(subparsers)
    snapshot.setup_parser(subparsers)

    # Parse arguments and execute
    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            if args.data_file:
                config = config.with_snapshot_path(args.data_file)

            setup_logging(config)

            # Snapshot commands inspect the file directly; loading it through
            # Services would apply the corrupt-snapshot policy first.
            if args.command == "snapshot":
                args.func(args, config, SnapshotStore(config.snapshot_path))
            else:
                args.func(args, Services(config))
        except KeyboardInterrupt:
            print("\nInterrupted.")
            sys.exit(130)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
