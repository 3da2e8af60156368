from pathlib import Path
import json
from typing import Any, Dict, List, Optional

from passes.config import config

PASSES_FILE = "saved_passes.json"  # [{"pass": {...wire fields}, "token": "..."}]

def _passes_path(wallet_dir: Optional[Path]) -> Path:
    return Path(wallet_dir or config.WALLET_DIR) / PASSES_FILE

def load_passes(wallet_dir: Optional[Path] = None) -> List[Dict[str, Any]]:
    path = _passes_path(wallet_dir)
    if not path.exists():
        return []
    return json.loads(path.read_text(encoding="utf-8"))

def _write(passes: List[Dict[str, Any]], wallet_dir: Optional[Path]) -> None:
    path = _passes_path(wallet_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(passes, indent=2, ensure_ascii=False), encoding="utf-8")

def save_pass(bundle: Dict[str, Any], wallet_dir: Optional[Path] = None) -> None:
    """Append a {"pass", "token"} bundle, replacing any saved pass with the same id."""
    pass_id = bundle["pass"]["id"]
    passes = [p for p in load_passes(wallet_dir) if p["pass"]["id"] != pass_id]
    passes.append(bundle)
    _write(passes, wallet_dir)

def delete_pass(pass_id: str, wallet_dir: Optional[Path] = None) -> bool:
    passes = load_passes(wallet_dir)
    kept = [p for p in passes if p["pass"]["id"] != pass_id]
    if len(kept) == len(passes):
        return False
    _write(kept, wallet_dir)
    return True
