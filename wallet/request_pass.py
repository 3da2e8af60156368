import argparse
import logging
from typing import Any, Dict, Optional

import requests

from passes.config import config
from wallet.storage import save_pass

logger = logging.getLogger(__name__)

def request_pass(
    user_id: str,
    name: str,
    role: str,
    timeslot: str,
    gate: str,
    purpose: str,
    valid_hours: Optional[float] = None,
    issuer_url: Optional[str] = None,
    wallet_dir=None,
) -> Dict[str, Any]:
    payload = {
        "userId": user_id,
        "name": name,
        "role": role,
        "timeslot": timeslot,
        "gate": gate,
        "purpose": purpose,
    }
    if valid_hours is not None:
        payload["validHours"] = valid_hours

    r = requests.post(f"{issuer_url or config.ISSUER_URL}/issue", json=payload, timeout=5)
    r.raise_for_status()
    bundle = r.json()
    save_pass(bundle, wallet_dir)
    logger.info("Saved pass %s to wallet", bundle["pass"]["id"])
    return bundle

if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    p = argparse.ArgumentParser()
    p.add_argument("--user_id", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--role", default="pilgrim")
    p.add_argument("--timeslot", required=True)
    p.add_argument("--gate", required=True)
    p.add_argument("--purpose", default="darshan")
    p.add_argument("--valid_hours", type=float, default=None)
    args = p.parse_args()
    bundle = request_pass(
        user_id=args.user_id,
        name=args.name,
        role=args.role,
        timeslot=args.timeslot,
        gate=args.gate,
        purpose=args.purpose,
        valid_hours=args.valid_hours,
    )
    print("Pass saved:", bundle["pass"]["id"])
    print(bundle["token"])
