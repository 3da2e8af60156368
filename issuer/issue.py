from __future__ import annotations

import logging
import math
import os
from datetime import datetime
from typing import Callable, Optional, Union

from pydantic import ValidationError

from crypto.canonical import canonicalize
from crypto.encoding import b64url_encode
from passes.errors import IssuanceError, first_problem
from passes.model import PassRecord, Role, now_ms, to_epoch_ms

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000

def new_pass_id(n_bytes: int = 16) -> str:
    """
    128 random bits by default. For n issued passes the chance of any
    collision stays below n**2 / 2**129.
    """
    return "pass_" + b64url_encode(os.urandom(n_bytes))

def compute_tag(record: PassRecord, scheme) -> str:
    return scheme.tag(canonicalize(record.signing_fields()))


class CredentialIssuer:
    """
    Builds signed pass records.

    `scheme` is a tag scheme from crypto.signing. `clock` returns epoch ms and
    is only read to enforce the validity window:
    now < valid_until <= now + max_validity_hours.
    """

    def __init__(
        self,
        scheme,
        clock: Callable[[], int] = now_ms,
        max_validity_hours: int = 7 * 24,
        default_validity_hours: int = 24,
    ):
        if not scheme.can_issue:
            raise IssuanceError(f"{scheme.name} scheme cannot issue passes (no signing key)")
        self.scheme = scheme
        self.clock = clock
        self.max_validity_ms = max_validity_hours * HOUR_MS
        self.default_validity_hours = default_validity_hours

    @classmethod
    def from_config(cls, cfg) -> "CredentialIssuer":
        from crypto.keys import load_tag_scheme
        return cls(
            load_tag_scheme(cfg, for_issuing=True),
            max_validity_hours=cfg.PASS_MAX_VALIDITY_HOURS,
            default_validity_hours=cfg.PASS_DEFAULT_VALIDITY_HOURS,
        )

    def issue(
        self,
        subject_id: str,
        subject_name: str,
        role: Union[Role, str],
        timeslot: str,
        gate: str,
        purpose: str,
        valid_until: Union[int, datetime],
    ) -> PassRecord:
        try:
            until_ms = to_epoch_ms(valid_until)
        except (TypeError, ValueError) as e:
            raise IssuanceError(f"validUntil: {e}") from e
        self._check_window(until_ms)

        try:
            draft = PassRecord(
                id=new_pass_id(),
                subject_id=subject_id,
                subject_name=subject_name,
                role=role,
                timeslot=timeslot,
                gate=gate,
                purpose=purpose,
                valid_until=until_ms,
                integrity_tag="",
            )
        except ValidationError as e:
            raise IssuanceError(first_problem(e)) from e

        record = draft.model_copy(update={"integrity_tag": compute_tag(draft, self.scheme)})
        logger.info(
            "Issued pass %s for %s (%s) gate=%s slot=%s",
            record.id, record.subject_id, record.role.value, record.gate, record.timeslot,
        )
        return record

    def issue_for_hours(
        self,
        subject_id: str,
        subject_name: str,
        role: Union[Role, str],
        timeslot: str,
        gate: str,
        purpose: str,
        hours: Optional[float] = None,
    ) -> PassRecord:
        if hours is None:
            hours = self.default_validity_hours
        span_ms = hours * HOUR_MS
        if not math.isfinite(span_ms):
            raise IssuanceError(f"validity hours must be finite and in range, got {hours!r}")
        valid_until = self.clock() + int(span_ms)
        return self.issue(subject_id, subject_name, role, timeslot, gate, purpose, valid_until)

    def _check_window(self, until_ms: int) -> None:
        now = self.clock()
        if until_ms <= now:
            raise IssuanceError("validUntil must be in the future")
        if until_ms - now > self.max_validity_ms:
            raise IssuanceError(
                f"validUntil is more than {self.max_validity_ms // HOUR_MS}h ahead"
            )
