import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from passes.errors import LedgerPersistenceError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    Whole-ledger JSON file. save_all writes a temp file next to the target
    and moves it into place, so readers see the old or the new ledger only.
    """

    def __init__(self, path):
        self.path = Path(path)

    def load_all(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise LedgerPersistenceError(f"cannot read ledger {self.path}: {e}") from e
        if not isinstance(data, list):
            raise LedgerPersistenceError(f"ledger {self.path} is not a JSON list")
        return data

    def save_all(self, entries: List[Dict[str, Any]]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent,
                prefix=self.path.name + ".", suffix=".tmp", delete=False,
            ) as fh:
                tmp_name = fh.name
                json.dump(entries, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise LedgerPersistenceError(f"cannot write ledger {self.path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


class MemoryStore:
    """In-process store; nothing survives the process."""

    def __init__(self, entries=None) -> None:
        self._entries: List[Dict[str, Any]] = list(entries or [])
        self.writes = 0

    def load_all(self) -> List[Dict[str, Any]]:
        return [dict(e) for e in self._entries]

    def save_all(self, entries: List[Dict[str, Any]]) -> None:
        self._entries = [dict(e) for e in entries]
        self.writes += 1
