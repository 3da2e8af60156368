# =======================================================================================
# passes/config.py - Configuration Management
# =======================================================================================
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

def _env_int(name: str, default: int) -> int:
    """Helper to parse integer environment variables."""
    v = os.getenv(name)
    return int(v) if v and v.isdigit() else default

class Config:
    # Integrity tags
    PASS_SECRET: Optional[str] = os.getenv("PASS_SECRET")
    PASS_SECRET_FILE: Optional[str] = os.getenv("PASS_SECRET_FILE")
    PASS_TAG_SCHEME: str = os.getenv("PASS_TAG_SCHEME", "hmac")
    ISSUER_KEY_DIR: str = os.getenv("ISSUER_KEY_DIR", "issuer_data")

    # Issuance policy
    PASS_DEFAULT_VALIDITY_HOURS: int = _env_int("PASS_DEFAULT_VALIDITY_HOURS", 24)
    PASS_MAX_VALIDITY_HOURS: int = _env_int("PASS_MAX_VALIDITY_HOURS", 7 * 24)

    # Scan ledger
    LEDGER_PATH: str = os.getenv("LEDGER_PATH", "gate_data/scan_ledger.json")
    LEDGER_CAPACITY: int = _env_int("LEDGER_CAPACITY", 20)

    # Wallet
    WALLET_DIR: str = os.getenv("WALLET_DIR", "wallet_data")
    ISSUER_URL: str = os.getenv("ISSUER_URL", "http://127.0.0.1:5001")

    # Services
    ISSUER_HOST: str = os.getenv("ISSUER_HOST", "127.0.0.1")
    ISSUER_PORT: int = _env_int("ISSUER_PORT", 5001)
    GATE_HOST: str = os.getenv("GATE_HOST", "127.0.0.1")
    GATE_PORT: int = _env_int("GATE_PORT", 5002)
    API_DEBUG: bool = os.getenv("API_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

config = Config()
