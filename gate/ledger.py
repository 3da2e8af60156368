"""
Scan ledger: the newest-first history of verification attempts at a gate.

The ledger holds at most 20 entries (a smaller cap may be configured) and
is written through to its store on every append. Construct one per gate;
nothing here is global.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List, Tuple

from pydantic import ValidationError

from passes.errors import LedgerPersistenceError
from passes.model import ScanRecord

logger = logging.getLogger(__name__)

MAX_CAPACITY = 20
DEFAULT_CAPACITY = MAX_CAPACITY


@dataclass(frozen=True)
class ScanCounts:
    valid_count: int
    invalid_count: int
    total: int

    def as_dict(self) -> dict:
        return {"validCount": self.valid_count, "invalidCount": self.invalid_count, "total": self.total}


class ScanLedger:
    def __init__(self, store, capacity: int = DEFAULT_CAPACITY):
        if not 1 <= capacity <= MAX_CAPACITY:
            raise ValueError(f"ledger capacity must be between 1 and {MAX_CAPACITY}, got {capacity}")
        self._store = store
        self.capacity = capacity
        self._lock = threading.Lock()
        self._records: List[ScanRecord] = self._load()

    @classmethod
    def from_config(cls, cfg) -> "ScanLedger":
        from gate.storage import JsonFileStore
        return cls(JsonFileStore(cfg.LEDGER_PATH), capacity=cfg.LEDGER_CAPACITY)

    def _load(self) -> List[ScanRecord]:
        raw = self._store.load_all()
        try:
            records = [ScanRecord.model_validate(entry) for entry in raw]
        except ValidationError as e:
            raise LedgerPersistenceError(f"ledger contains an unreadable scan record: {e}") from e
        if len(records) > self.capacity:
            logger.info("Trimming loaded ledger from %d to %d entries", len(records), self.capacity)
        return records[: self.capacity]

    def record(self, scan: ScanRecord) -> None:
        """
        Prepend `scan`, drop anything past capacity, persist the result.

        The in-memory ledger is updated even when the write fails; the
        failure is raised as LedgerPersistenceError afterwards.
        """
        with self._lock:
            self._records = [scan] + self._records[: self.capacity - 1]
            snapshot = [r.model_dump(mode="json", by_alias=True) for r in self._records]
            try:
                self._store.save_all(snapshot)
            except LedgerPersistenceError:
                logger.warning("Scan %s kept in memory only; ledger write failed", scan.id)
                raise
            except OSError as e:
                logger.warning("Scan %s kept in memory only; ledger write failed", scan.id)
                raise LedgerPersistenceError(str(e)) from e

    def history(self) -> Tuple[ScanRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def counts(self) -> ScanCounts:
        records = self.history()
        valid = sum(1 for r in records if r.valid)
        return ScanCounts(valid_count=valid, invalid_count=len(records) - valid, total=len(records))

    def __len__(self) -> int:
        return len(self.history())
