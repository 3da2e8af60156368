import logging
from typing import Any

from pydantic import ValidationError

from passes.errors import DecodeError, first_problem
from passes.model import PassRecord

logger = logging.getLogger(__name__)

def encode(record: PassRecord) -> str:
    """
    Token text for a pass: one JSON object in wire field order
    {id, userId, name, role, timeslot, gate, purpose, validUntil, signature}.
    """
    return record.model_dump_json(by_alias=True)

def decode(token: Any) -> PassRecord:
    """
    Parse token text back into a PassRecord.

    Only wire names are accepted, every field is required and type-checked,
    unknown fields are ignored. Any failure is a DecodeError.
    """
    if not isinstance(token, str):
        raise DecodeError(f"token must be text, got {type(token).__name__}")
    try:
        return PassRecord.model_validate_json(token, by_alias=True, by_name=False)
    except ValidationError as e:
        reason = first_problem(e, "malformed token")
        logger.debug("Rejected token: %s", reason)
        raise DecodeError(reason) from e
