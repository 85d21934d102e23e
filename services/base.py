"""Base services container for dependency injection."""

from config import Config
from db.snapshot import SnapshotStore, open_ledger


class Services:
    """Container for all application services.

    This class owns the single Ledger for the process and makes it easy to
    inject a different snapshot store or ledger for testing.

    Args:
        config: Application configuration object.
        store: Optional snapshot store for testing. If None, one is created
            for config.snapshot_path.
        ledger: Optional pre-built ledger. If None, it is loaded from the
            store using config.on_corrupt_snapshot.
    """

    def __init__(self, config: Config, store=None, ledger=None):
        self.config = config
        self.store = store or SnapshotStore(config.snapshot_path)
        if ledger is None:
            ledger = open_ledger(self.store, config.on_corrupt_snapshot)
        self.ledger = ledger

        # Lazy import to avoid circular dependencies
        from services.banking import BankingService

        self.banking = BankingService(self.ledger, self.store)
