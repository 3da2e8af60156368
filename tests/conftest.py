"""
Shared fixtures. Every test builds its own scheme, clock and ledger; nothing
reads the process-wide config.
"""
import pytest

from crypto.signing import HmacTagScheme
from gate.ledger import ScanLedger
from gate.scanner import GateScanner
from gate.storage import MemoryStore
from gate.verify import CredentialVerifier
from issuer.issue import HOUR_MS, CredentialIssuer

NOW = 1_767_225_600_000  # 2026-01-01T00:00:00Z


class FixedClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FixedClock()

@pytest.fixture
def scheme():
    return HmacTagScheme(b"gate-test-secret")

@pytest.fixture
def issuer(scheme, clock):
    return CredentialIssuer(scheme, clock=clock)

@pytest.fixture
def verifier(scheme, clock):
    return CredentialVerifier(scheme, clock=clock)

@pytest.fixture
def ram_pass(issuer, clock):
    return issuer.issue(
        subject_id="user123",
        subject_name="Ram Sharma",
        role="pilgrim",
        timeslot="14:00-16:00",
        gate="main",
        purpose="darshan",
        valid_until=clock() + 2 * HOUR_MS,
    )

@pytest.fixture
def scanner(verifier, clock):
    return GateScanner(verifier, ScanLedger(MemoryStore()), clock=clock)
