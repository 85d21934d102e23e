"""Shared pytest fixtures for all tests."""

import pytest

from config import Config
from db.snapshot import SnapshotStore
from services.base import Services
from services.ledger import Ledger


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary snapshot.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "strongbox",
        data_dir=tmp_path / "strongbox" / "data",
        snapshot_filename="test-ledger.json",
        on_corrupt_snapshot="fresh",
        log_level="DEBUG",
        log_dir=tmp_path / "strongbox" / "logs",
        max_pin_attempts=3,
        statement_length=10,
        currency_symbol="₹",
        enable_reset=False,
    )


@pytest.fixture
def store(test_config):
    """Create a SnapshotStore writing to the test snapshot path."""
    return SnapshotStore(test_config.snapshot_path)


@pytest.fixture
def ledger():
    """Create an empty in-memory Ledger."""
    return Ledger()


@pytest.fixture
def services(test_config, store):
    """Create a Services container backed by a temporary snapshot.

    Args:
        test_config: Test configuration fixture.
        store: Snapshot store fixture.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, store=store)
