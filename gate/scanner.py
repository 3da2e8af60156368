from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from crypto.hashing import sha256
from gate.ledger import ScanLedger
from gate.verify import CredentialVerifier, VerifyResult
from passes.errors import LedgerPersistenceError, ScannerStateError
from passes.model import ScanOutcome, ScanRecord, now_ms

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"


@dataclass(frozen=True)
class ScanReport:
    result: VerifyResult
    record: ScanRecord
    persisted: bool = True
    warning: Optional[str] = None


def token_fingerprint(token: str) -> str:
    """Short digest for logs; tokens themselves are never logged."""
    return sha256(token.encode("utf-8", errors="replace")).hex()[:12]


class GateScanner:
    """
    Operator workflow at one gate: idle -> capturing -> idle.

    Camera capture lives outside; only the captured text is submitted here.
    Every scan, captured or typed, goes through the same decode, verify and
    record steps under one lock.
    """

    def __init__(self, verifier: CredentialVerifier, ledger: ScanLedger,
                 clock: Callable[[], int] = now_ms):
        self.verifier = verifier
        self.ledger = ledger
        self.clock = clock
        self._state = ScanState.IDLE
        self._state_lock = threading.Lock()
        self._scan_lock = threading.Lock()
        self.last_report: Optional[ScanReport] = None

    @property
    def state(self) -> ScanState:
        return self._state

    def start_capture(self) -> None:
        with self._state_lock:
            if self._state is not ScanState.IDLE:
                raise ScannerStateError(f"cannot start capture while {self._state.value}")
            self._state = ScanState.CAPTURING

    def cancel(self) -> None:
        with self._state_lock:
            if self._state is not ScanState.CAPTURING:
                raise ScannerStateError(f"nothing to cancel while {self._state.value}")
            self._state = ScanState.IDLE

    def submit(self, captured_text: str) -> ScanReport:
        """Finish a capture with the text read from the code."""
        with self._state_lock:
            if self._state is not ScanState.CAPTURING:
                raise ScannerStateError(f"no capture in progress ({self._state.value})")
            try:
                return self.scan(captured_text)
            finally:
                self._state = ScanState.IDLE

    def manual_entry(self, typed_text: str) -> ScanReport:
        with self._state_lock:
            if self._state is not ScanState.IDLE:
                raise ScannerStateError(f"manual entry not allowed while {self._state.value}")
            return self.scan(typed_text)

    def scan(self, token: str) -> ScanReport:
        with self._scan_lock:
            result = self.verifier.verify(token)
            record = ScanRecord(
                id=f"scan_{uuid.uuid4().hex}",
                timestamp=self.clock(),
                outcome=ScanOutcome.VALID if result.valid else ScanOutcome.INVALID,
                error_kind=result.error_kind,
                decoded_pass=result.pass_record,
                message=result.message,
            )
            fingerprint = token_fingerprint(token) if isinstance(token, str) else "-"
            if result.valid:
                logger.info("Scan %s valid: pass %s (%s)", record.id,
                            result.pass_record.id, fingerprint)
            else:
                logger.warning("Scan %s rejected: %s (%s)", record.id,
                               result.error_kind.value, fingerprint)

            try:
                self.ledger.record(record)
            except LedgerPersistenceError as e:
                report = ScanReport(
                    result=result, record=record, persisted=False,
                    warning=f"Scan history may not be saved: {e}",
                )
            else:
                report = ScanReport(result=result, record=record)
            self.last_report = report
            return report
