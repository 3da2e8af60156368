"""
Pass and scan records.

A PassRecord serializes under its wire names (userId, name, validUntil,
signature) and validates strictly: strings must be strings and validUntil an
integer count of epoch milliseconds. Both models are frozen.
"""
from __future__ import annotations

import time
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from passes.errors import ErrorKind


class Role(str, Enum):
    PILGRIM = "pilgrim"
    VOLUNTEER = "volunteer"
    VIP = "vip"
    ADMIN = "admin"


class ScanOutcome(str, Enum):
    VALID = "valid"
    INVALID = "invalid"


def now_ms() -> int:
    return int(time.time() * 1000)

def to_epoch_ms(value: Union[int, datetime]) -> int:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("naive datetime; pass an aware datetime or epoch milliseconds")
        return int(value.timestamp() * 1000)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected epoch milliseconds, got {type(value).__name__}")
    return value


_TEXT = dict(strict=True, min_length=1)


class PassRecord(BaseModel):
    model_config = ConfigDict(frozen=True, validate_by_name=True, validate_by_alias=True)

    id: str = Field(..., **_TEXT)
    subject_id: str = Field(..., alias="userId", **_TEXT)
    subject_name: str = Field(..., alias="name", **_TEXT)
    role: Role
    timeslot: str = Field(..., **_TEXT)
    gate: str = Field(..., **_TEXT)
    purpose: str = Field(..., **_TEXT)
    valid_until: int = Field(..., alias="validUntil", strict=True, ge=0)
    integrity_tag: str = Field(..., alias="signature", strict=True)

    def signing_fields(self) -> Dict[str, Any]:
        """Wire-named fields covered by the integrity tag (everything but the tag)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"integrity_tag"})

    def is_expired(self, at_ms: int) -> bool:
        return at_ms > self.valid_until


class ScanRecord(BaseModel):
    """One verification attempt as kept in the scan ledger."""

    model_config = ConfigDict(frozen=True, validate_by_name=True, validate_by_alias=True)

    id: str = Field(..., min_length=1)
    timestamp: int
    outcome: ScanOutcome
    error_kind: Optional[ErrorKind] = Field(None, alias="errorKind")
    decoded_pass: Optional[PassRecord] = Field(None, alias="decodedPass")
    message: str = ""

    @model_validator(mode="after")
    def _error_kind_iff_invalid(self) -> "ScanRecord":
        if self.outcome is ScanOutcome.INVALID and self.error_kind is None:
            raise ValueError("invalid scan needs an errorKind")
        if self.outcome is ScanOutcome.VALID and self.error_kind is not None:
            raise ValueError("valid scan cannot carry an errorKind")
        if self.outcome is ScanOutcome.VALID and self.decoded_pass is None:
            raise ValueError("valid scan needs its decoded pass")
        if self.error_kind is ErrorKind.DECODE and self.decoded_pass is not None:
            raise ValueError("undecodable scan cannot carry a decoded pass")
        return self

    @property
    def valid(self) -> bool:
        return self.outcome is ScanOutcome.VALID
