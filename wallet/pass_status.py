from typing import Any, Dict, List, Optional

from passes import codec
from passes.model import PassRecord, now_ms
from wallet.storage import load_passes

ACTIVE = "active"
EXPIRED = "expired"

def saved_record(bundle: Dict[str, Any]) -> PassRecord:
    return codec.decode(bundle["token"])

def pass_status(bundle: Dict[str, Any], at_ms: Optional[int] = None) -> str:
    record = saved_record(bundle)
    return EXPIRED if record.is_expired(now_ms() if at_ms is None else at_ms) else ACTIVE

def active_passes(wallet_dir=None, at_ms: Optional[int] = None) -> List[Dict[str, Any]]:
    return [p for p in load_passes(wallet_dir) if pass_status(p, at_ms) == ACTIVE]

def expired_passes(wallet_dir=None, at_ms: Optional[int] = None) -> List[Dict[str, Any]]:
    return [p for p in load_passes(wallet_dir) if pass_status(p, at_ms) == EXPIRED]

def format_timeslot(timeslot: str) -> str:
    """'14:00-16:00' -> '14:00 - 16:00'. Anything without a dash is returned as-is."""
    start, sep, end = timeslot.partition("-")
    if not sep:
        return timeslot
    return f"{start.strip()} - {end.strip()}"
