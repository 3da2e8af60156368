from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from crypto.canonical import canonicalize
from passes import codec
from passes.errors import ErrorKind, ExpiredError, PassVerificationError, SignatureError
from passes.model import PassRecord, now_ms


@dataclass(frozen=True)
class ValidResult:
    pass_record: PassRecord
    valid: bool = True
    error_kind: None = None
    message: str = "Pass verified"


@dataclass(frozen=True)
class InvalidResult:
    error_kind: ErrorKind
    message: str
    # set when the token decoded but failed the signature or expiry check
    pass_record: Optional[PassRecord] = None
    valid: bool = False


VerifyResult = Union[ValidResult, InvalidResult]

_MESSAGES = {
    ErrorKind.DECODE: "Invalid QR code format",
    ErrorKind.SIGNATURE: "Invalid signature",
    ErrorKind.EXPIRED: "Pass has expired",
}


class CredentialVerifier:
    """
    Judges a token: decode, then signature, then expiry. The first failing
    check decides the result, so a tampered pass that is also expired reports
    SignatureError. Holds no mutable state.
    """

    def __init__(self, scheme, clock: Callable[[], int] = now_ms):
        self.scheme = scheme
        self.clock = clock

    def verify(self, token: str) -> VerifyResult:
        record: Optional[PassRecord] = None
        try:
            record = codec.decode(token)
            self._check_tag(record)
            self._check_window(record)
        except PassVerificationError as e:
            return InvalidResult(error_kind=e.kind, message=_MESSAGES[e.kind], pass_record=record)
        return ValidResult(pass_record=record)

    def _check_tag(self, record: PassRecord) -> None:
        if not self.scheme.check(canonicalize(record.signing_fields()), record.integrity_tag):
            raise SignatureError(record.id)

    def _check_window(self, record: PassRecord) -> None:
        if record.is_expired(self.clock()):
            raise ExpiredError(record.id)
