import json
from decimal import Decimal

import pytest

from db.schema import SNAPSHOT_FORMAT, SNAPSHOT_VERSION, SnapshotRecord
from db.snapshot import SnapshotStore, open_ledger
from errors import (
    CorruptSnapshotError,
    PersistenceError,
    UnsupportedSnapshotVersionError,
)
from services.ledger import FIRST_ACCOUNT_NUMBER, Ledger


def build_ledger() -> Ledger:
    """Create a ledger with a mix of operations applied."""
    ledger = Ledger()
    asha = ledger.create_account("Asha", "4321")
    vikram = ledger.create_account("Vikram", "1234")
    ledger.create_account("Meera", "0007")
    ledger.deposit(asha.account_number, "500.00")
    ledger.withdraw(asha.account_number, "12.34")
    ledger.transfer(asha.account_number, vikram.account_number, "200.00")
    ledger.change_pin(vikram.account_number, "5555")
    return ledger


def write_snapshot(store: SnapshotStore, data) -> None:
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(json.dumps(data), encoding="utf-8")


class TestSnapshotRoundTrip:
    """Tests for save followed by load."""

    def test_missing_file_loads_empty_ledger(self, store):
        """Test loading without a snapshot gives a fresh ledger."""
        ledger = store.load()

        assert ledger == Ledger()
        assert ledger.next_account_number == FIRST_ACCOUNT_NUMBER
        assert not store.exists()

    def test_round_trip_empty_ledger(self, store):
        """Test an empty ledger survives save and load."""
        store.save(Ledger())

        assert store.load() == Ledger()

    def test_round_trip_preserves_everything(self, store):
        """Test accounts, balances, logs, PINs and the counter survive."""
        original = build_ledger()

        store.save(original)
        loaded = store.load()

        assert loaded == original
        asha = loaded.lookup(FIRST_ACCOUNT_NUMBER)
        assert asha.balance == Decimal("287.66")
        assert [str(e) for e in asha.transactions] == [
            str(e) for e in original.lookup(FIRST_ACCOUNT_NUMBER).transactions
        ]
        assert loaded.login(FIRST_ACCOUNT_NUMBER + 1, "5555").name == "Vikram"
        assert loaded.lookup(FIRST_ACCOUNT_NUMBER + 2).check_pin("0007")

    def test_counter_persists_across_reload(self, store):
        """Test numbers keep increasing after a save/load cycle."""
        original = build_ledger()
        store.save(original)

        loaded = store.load()
        account = loaded.create_account("Newcomer", "9999")

        assert account.account_number == FIRST_ACCOUNT_NUMBER + 3
        assert account.account_number not in original.accounts

    def test_save_overwrites_previous_snapshot(self, store):
        """Test the last successful save wins."""
        ledger = build_ledger()
        store.save(ledger)

        ledger.deposit(FIRST_ACCOUNT_NUMBER, "1")
        store.save(ledger)

        assert store.load().lookup(FIRST_ACCOUNT_NUMBER).balance == Decimal("288.66")

    def test_save_leaves_no_temp_files(self, store):
        """Test only the snapshot itself remains after a save."""
        store.save(build_ledger())

        assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]

    def test_snapshot_is_self_describing(self, store):
        """Test the file carries its format marker and version."""
        store.save(build_ledger())

        data = json.loads(store.path.read_text(encoding="utf-8"))

        assert data["format"] == SNAPSHOT_FORMAT
        assert data["version"] == SNAPSHOT_VERSION
        assert data["next_account_number"] == FIRST_ACCOUNT_NUMBER + 3
        assert len(data["accounts"]) == 3
        assert data["accounts"][0]["credential"] == {"scheme": "plain", "pin": "4321"}

    def test_read_header(self, store):
        """Test read_header reports format and version."""
        assert store.read_header() is None

        store.save(Ledger())
        header = store.read_header()

        assert header["format"] == SNAPSHOT_FORMAT
        assert header["version"] == SNAPSHOT_VERSION
        assert header["saved_at"]


class TestSnapshotErrors:
    """Tests for unreadable snapshots."""

    def test_invalid_json(self, store):
        """Test garbage bytes raise CorruptSnapshotError."""
        store.path.parent.mkdir(parents=True, exist_ok=True)
        store.path.write_bytes(b"\xac\xed\x00\x05sr\x00\x04Bank")

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_truncated_json(self, store):
        """Test a truncated document raises CorruptSnapshotError."""
        store.save(build_ledger())
        text = store.path.read_text(encoding="utf-8")
        store.path.write_text(text[: len(text) // 2], encoding="utf-8")

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_wrong_format_marker(self, store):
        """Test JSON that isn't a snapshot raises CorruptSnapshotError."""
        write_snapshot(store, {"accounts": [], "version": 1})

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_not_an_object(self, store):
        """Test a JSON list raises CorruptSnapshotError."""
        write_snapshot(store, [1, 2, 3])

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_future_version(self, store):
        """Test an unknown version is reported distinctly from corruption."""
        write_snapshot(store, {"format": SNAPSHOT_FORMAT, "version": 99})

        with pytest.raises(UnsupportedSnapshotVersionError) as exc_info:
            store.load()

        assert exc_info.value.version == 99
        assert not isinstance(exc_info.value, CorruptSnapshotError)

    def test_negative_balance_rejected(self, store):
        """Test a snapshot violating balance >= 0 is corrupt."""
        data = json.loads(SnapshotRecord.from_ledger(build_ledger()).model_dump_json())
        data["accounts"][0]["balance"] = "-1.00"
        write_snapshot(store, data)

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_counter_behind_accounts_rejected(self, store):
        """Test a counter that would reissue a number is corrupt."""
        data = json.loads(SnapshotRecord.from_ledger(build_ledger()).model_dump_json())
        data["next_account_number"] = FIRST_ACCOUNT_NUMBER + 1
        write_snapshot(store, data)

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_duplicate_account_numbers_rejected(self, store):
        """Test duplicate account numbers are corrupt."""
        data = json.loads(SnapshotRecord.from_ledger(build_ledger()).model_dump_json())
        data["accounts"][1]["account_number"] = data["accounts"][0]["account_number"]
        write_snapshot(store, data)

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_unknown_transaction_kind_rejected(self, store):
        """Test an unknown log entry kind is corrupt."""
        data = json.loads(SnapshotRecord.from_ledger(build_ledger()).model_dump_json())
        data["accounts"][0]["transactions"][0]["kind"] = "interest"
        write_snapshot(store, data)

        with pytest.raises(CorruptSnapshotError):
            store.load()

    def test_save_failure_raises_persistence_error(self, tmp_path):
        """Test an unwritable location raises PersistenceError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = SnapshotStore(blocker / "ledger.json")

        with pytest.raises(PersistenceError):
            store.save(build_ledger())

    def test_save_invalid_ledger_raises_persistence_error(self, store):
        """Test a ledger the schema rejects raises PersistenceError and writes nothing."""
        ledger = build_ledger()
        ledger.list_all()[0].change_pin("1234\n")

        with pytest.raises(PersistenceError, match="can't be written"):
            store.save(ledger)

        assert not store.exists()

    def test_sub_cent_balance_rejected(self, store):
        """Test a balance finer than a cent is corrupt."""
        data = json.loads(SnapshotRecord.from_ledger(build_ledger()).model_dump_json())
        data["accounts"][0]["balance"] = "10.005"
        write_snapshot(store, data)

        with pytest.raises(CorruptSnapshotError):
            store.load()


class TestOpenLedger:
    """Tests for open_ledger and its corrupt-snapshot policy."""

    def test_loads_valid_snapshot(self, store):
        """Test a valid snapshot is loaded as-is."""
        original = build_ledger()
        store.save(original)

        assert open_ledger(store, "fresh") == original

    def test_fresh_policy_quarantines_and_starts_empty(self, store):
        """Test "fresh" moves the bad file aside and returns an empty ledger."""
        write_snapshot(store, {"nope": True})

        ledger = open_ledger(store, "fresh")

        assert ledger == Ledger()
        assert not store.exists()
        moved = list(store.path.parent.glob(f"{store.path.name}.corrupt-*"))
        assert len(moved) == 1
        assert json.loads(moved[0].read_text(encoding="utf-8")) == {"nope": True}

    def test_fresh_policy_on_future_version(self, store):
        """Test "fresh" also applies to unsupported versions."""
        write_snapshot(store, {"format": SNAPSHOT_FORMAT, "version": 2})

        assert open_ledger(store, "fresh") == Ledger()

    def test_abort_policy_raises(self, store):
        """Test "abort" re-raises and leaves the file in place."""
        write_snapshot(store, {"nope": True})

        with pytest.raises(CorruptSnapshotError):
            open_ledger(store, "abort")

        assert store.exists()

    def test_quarantine_without_file(self, store):
        """Test quarantine is a no-op when there is no snapshot."""
        assert store.quarantine() is None

    def test_delete(self, store):
        """Test delete removes the snapshot once."""
        store.save(Ledger())

        assert store.delete() is True
        assert store.delete() is False
