from enum import Enum


class ErrorKind(str, Enum):
    """Why a scanned token was rejected."""
    DECODE = "DecodeError"
    SIGNATURE = "SignatureError"
    EXPIRED = "ExpiredError"


class PassError(Exception):
    """Base exception for the entry-pass system."""
    pass


class PassVerificationError(PassError):
    """A token failed verification. `kind` says which check rejected it."""
    kind: ErrorKind

class DecodeError(PassVerificationError):
    """Token text is not well-formed or misses a required field."""
    kind = ErrorKind.DECODE

class SignatureError(PassVerificationError):
    """Integrity tag does not match the pass fields."""
    kind = ErrorKind.SIGNATURE

class ExpiredError(PassVerificationError):
    """Pass validity window has elapsed."""
    kind = ErrorKind.EXPIRED


class IssuanceError(PassError):
    """Raised when a pass cannot be issued with the given fields."""
    pass

class LedgerPersistenceError(PassError):
    """Raised when the scan ledger cannot be read from or written to its store."""
    pass

class ScannerStateError(PassError):
    """Raised on an invalid scanner state transition."""
    pass

class ConfigurationError(PassError):
    """Raised when secrets or keys are missing or misconfigured."""
    pass


def first_problem(err, fallback: str = "malformed input") -> str:
    """'field: message' for the first problem in a pydantic ValidationError."""
    problems = err.errors()
    if not problems:
        return fallback
    first = problems[0]
    where = ".".join(str(p) for p in first.get("loc", ()))
    return f"{where}: {first['msg']}" if where else first["msg"]
