"""Snapshot store: saves and loads the whole ledger as one JSON file."""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from db.schema import SNAPSHOT_FORMAT, SNAPSHOT_VERSION, SnapshotRecord
from errors import (
    CorruptSnapshotError,
    PersistenceError,
    UnsupportedSnapshotVersionError,
)
from logger import get_logger
from services.ledger import Ledger

logger = get_logger()


class SnapshotStore:
    """Reads and writes ledger snapshots at a fixed path.

    Args:
        path: Location of the snapshot file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, ledger: Ledger) -> None:
        """Write the ledger, replacing any previous snapshot.

        The document is written to a temporary file in the same directory and
        then moved over the target, so a reader never sees a partial file.

        Args:
            ledger: Ledger to persist.

        Raises:
            PersistenceError: If the ledger doesn't fit the snapshot schema or
                the file can't be written.
        """
        with ledger.lock:
            try:
                record = SnapshotRecord.from_ledger(ledger)
            except ValidationError as e:
                raise PersistenceError(
                    f"Ledger can't be written as a snapshot: {e.error_count()} invalid field(s)"
                ) from e
            payload = record.model_dump_json(indent=2)

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(f"Could not save snapshot to {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(
            f"Saved snapshot with {len(ledger.accounts)} account(s) to {self.path}"
        )

    def load(self) -> Ledger:
        """Read the ledger from disk.

        Returns:
            The stored Ledger, or a fresh empty Ledger if no snapshot exists.

        Raises:
            CorruptSnapshotError: If the file isn't a readable snapshot.
            UnsupportedSnapshotVersionError: If the schema version is unknown.
            PersistenceError: If the file exists but can't be opened.
        """
        if not self.path.exists():
            logger.debug(f"No snapshot at {self.path}, starting with an empty ledger")
            return Ledger()

        record = self._parse(self._read())
        ledger = record.to_ledger()
        logger.debug(
            f"Loaded snapshot with {len(ledger.accounts)} account(s) from {self.path}"
        )
        return ledger

    def read_header(self) -> Optional[dict]:
        """Get the format, version and save time of the stored snapshot.

        Returns:
            Dictionary with "format", "version" and "saved_at", or None if no
            snapshot exists.

        Raises:
            CorruptSnapshotError: If the file isn't a readable snapshot.
        """
        if not self.path.exists():
            return None
        data = self._decode(self._read())
        return {
            "format": data.get("format"),
            "version": data.get("version"),
            "saved_at": data.get("saved_at"),
        }

    def quarantine(self) -> Optional[Path]:
        """Move an unreadable snapshot aside so it won't be overwritten.

        Returns:
            The new path of the moved file, or None if there was nothing to move.
        """
        if not self.path.exists():
            return None
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        target = self.path.with_name(f"{self.path.name}.corrupt-{timestamp}")
        try:
            os.replace(self.path, target)
        except OSError as e:
            raise PersistenceError(f"Could not move {self.path} aside: {e}") from e
        logger.warning(f"Moved unreadable snapshot to {target}")
        return target

    def delete(self) -> bool:
        """Delete the snapshot file.

        Returns:
            True if a file was deleted, False if none existed.
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        return True

    def _read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Could not read snapshot {self.path}: {e}") from e

    def _decode(self, raw: bytes) -> dict:
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptSnapshotError(f"{self.path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or data.get("format") != SNAPSHOT_FORMAT:
            raise CorruptSnapshotError(f"{self.path} is not a Strongbox snapshot")
        return data

    def _parse(self, raw: bytes) -> SnapshotRecord:
        data = self._decode(raw)

        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise UnsupportedSnapshotVersionError(version, SNAPSHOT_VERSION)

        try:
            return SnapshotRecord.model_validate(data)
        except ValidationError as e:
            raise CorruptSnapshotError(
                f"{self.path} failed validation: {e.error_count()} error(s)\n{e}"
            ) from e


def open_ledger(store: SnapshotStore, on_corrupt_snapshot: str = "fresh") -> Ledger:
    """Load the ledger at startup, applying the unreadable-snapshot policy.

    Args:
        store: Snapshot store to read from.
        on_corrupt_snapshot: "fresh" moves an unreadable snapshot aside and
            starts with an empty ledger; "abort" re-raises the error.

    Returns:
        The loaded or fresh Ledger.

    Raises:
        PersistenceError: If the snapshot is unreadable and the policy is "abort".
    """
    try:
        return store.load()
    except PersistenceError as e:
        if on_corrupt_snapshot == "abort":
            raise
        logger.warning(f"Could not load snapshot ({e}); starting a new ledger")
        try:
            store.quarantine()
        except PersistenceError as move_error:
            logger.error(f"{move_error}; the next save will overwrite it")
        return Ledger()
