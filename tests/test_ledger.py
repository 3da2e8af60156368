"""Scan ledger cap, ordering, counters and persistence."""
import json
import threading

import pytest

from gate.ledger import ScanLedger
from gate.storage import JsonFileStore, MemoryStore
from passes.errors import ErrorKind, LedgerPersistenceError
from passes.model import ScanOutcome, ScanRecord


def _scan(i, valid=True, decoded=None):
    if valid:
        return ScanRecord(id=f"scan_{i}", timestamp=1000 + i, outcome=ScanOutcome.VALID,
                          decoded_pass=decoded, message="Pass verified")
    return ScanRecord(id=f"scan_{i}", timestamp=1000 + i, outcome=ScanOutcome.INVALID,
                      error_kind=ErrorKind.DECODE, message="Invalid QR code format")


class FailingStore(MemoryStore):

    def save_all(self, entries):
        raise LedgerPersistenceError("disk full")


class TestScanRecord:

    def test_invalid_needs_error_kind(self):
        with pytest.raises(ValueError):
            ScanRecord(id="s", timestamp=1, outcome=ScanOutcome.INVALID)

    def test_valid_cannot_have_error_kind(self, ram_pass):
        with pytest.raises(ValueError):
            ScanRecord(id="s", timestamp=1, outcome=ScanOutcome.VALID,
                       error_kind=ErrorKind.EXPIRED, decoded_pass=ram_pass)

    def test_decode_error_has_no_pass(self, ram_pass):
        with pytest.raises(ValueError):
            ScanRecord(id="s", timestamp=1, outcome=ScanOutcome.INVALID,
                       error_kind=ErrorKind.DECODE, decoded_pass=ram_pass)


class TestLedgerInMemory:

    def setup_method(self):
        self.store = MemoryStore()
        self.ledger = ScanLedger(self.store)

    def test_starts_empty(self):
        assert self.ledger.history() == ()
        assert self.ledger.counts().total == 0

    def test_newest_first(self, ram_pass):
        self.ledger.record(_scan(1, decoded=ram_pass))
        self.ledger.record(_scan(2, valid=False))
        assert [r.id for r in self.ledger.history()] == ["scan_2", "scan_1"]

    def test_cap_after_25(self):
        for i in range(25):
            self.ledger.record(_scan(i, valid=False))
        history = self.ledger.history()
        assert len(history) == 20
        assert [r.id for r in history] == [f"scan_{i}" for i in range(24, 4, -1)]
        assert not {f"scan_{i}" for i in range(5)} & {r.id for r in history}

    def test_persisted_on_every_append(self):
        for i in range(3):
            self.ledger.record(_scan(i, valid=False))
        assert self.store.writes == 3
        assert len(self.store.load_all()) == 3

    def test_counts(self, ram_pass):
        for i in range(3):
            self.ledger.record(_scan(i, decoded=ram_pass))
        for i in range(3, 5):
            self.ledger.record(_scan(i, valid=False))
        counts = self.ledger.counts()
        assert (counts.valid_count, counts.invalid_count, counts.total) == (3, 2, 5)
        assert counts.as_dict() == {"validCount": 3, "invalidCount": 2, "total": 5}

    def test_custom_capacity(self):
        ledger = ScanLedger(MemoryStore(), capacity=3)
        for i in range(5):
            ledger.record(_scan(i, valid=False))
        assert len(ledger) == 3

    def test_zero_capacity_rejected(self):
        with pytest.raises(ValueError):
            ScanLedger(MemoryStore(), capacity=0)

    def test_capacity_above_twenty_rejected(self):
        with pytest.raises(ValueError):
            ScanLedger(MemoryStore(), capacity=21)

    def test_instances_independent(self):
        other = ScanLedger(MemoryStore())
        self.ledger.record(_scan(1, valid=False))
        assert len(other) == 0

    def test_concurrent_appends_keep_cap(self):
        def worker(base):
            for i in range(10):
                self.ledger.record(_scan(base + i, valid=False))

        threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(self.ledger) == 20
        assert len(self.store.load_all()) == 20
        assert self.store.writes == 80

    def test_write_failure_keeps_record_in_memory(self):
        ledger = ScanLedger(FailingStore())
        with pytest.raises(LedgerPersistenceError):
            ledger.record(_scan(1, valid=False))
        assert [r.id for r in ledger.history()] == ["scan_1"]


class TestLedgerOnDisk:

    def test_missing_file_is_empty(self, tmp_path):
        ledger = ScanLedger(JsonFileStore(tmp_path / "nope" / "ledger.json"))
        assert ledger.history() == ()

    def test_survives_reopen(self, tmp_path, ram_pass):
        path = tmp_path / "ledger.json"
        ledger = ScanLedger(JsonFileStore(path))
        ledger.record(_scan(1, decoded=ram_pass))
        ledger.record(_scan(2, valid=False))

        reopened = ScanLedger(JsonFileStore(path))
        assert reopened.history() == ledger.history()
        assert reopened.history()[1].decoded_pass == ram_pass

    def test_file_uses_wire_names(self, tmp_path, ram_pass):
        path = tmp_path / "ledger.json"
        ScanLedger(JsonFileStore(path)).record(_scan(1, decoded=ram_pass))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["decodedPass"]["userId"] == "user123"
        assert data[0]["outcome"] == "valid"

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "ledger.json"
        ledger = ScanLedger(JsonFileStore(path))
        for i in range(3):
            ledger.record(_scan(i, valid=False))
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_oversized_file_trimmed_on_load(self, tmp_path):
        path = tmp_path / "ledger.json"
        entries = [_scan(i, valid=False).model_dump(mode="json", by_alias=True)
                   for i in reversed(range(30))]
        path.write_text(json.dumps(entries), encoding="utf-8")
        ledger = ScanLedger(JsonFileStore(path))
        assert len(ledger) == 20
        assert ledger.history()[0].id == "scan_29"

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(LedgerPersistenceError):
            ScanLedger(JsonFileStore(path))

    def test_wrong_shape_raises(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps([{"id": "scan_1"}]), encoding="utf-8")
        with pytest.raises(LedgerPersistenceError):
            ScanLedger(JsonFileStore(path))

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        ledger = ScanLedger(JsonFileStore(blocker / "ledger.json"))
        with pytest.raises(LedgerPersistenceError):
            ledger.record(_scan(1, valid=False))
        assert len(ledger) == 1
