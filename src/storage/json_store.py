from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class JsonStore:
    """A JSON document mapping a key (usually a user id) to a record.

    Reads are forgiving: a missing, unreadable or corrupt file behaves like an
    empty store. Writes replace the whole document atomically.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def read_all(self) -> Dict[str, Any]:
        try:
            if not self.path.exists():
                return {}

            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                logger.warning(f"Ignoring {self.path}: expected a JSON object")
                return {}
            return data
        except Exception as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return {}

    def write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # the document holds every user's record, so never leave it half-written
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(data, ensure_ascii=False, indent=2))
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self.read_all().get(key, default)

    def put(self, key: str, value: Any) -> None:
        data = self.read_all()
        data[key] = value
        self.write_all(data)

    def delete(self, key: str) -> bool:
        data = self.read_all()
        if key not in data:
            return False
        del data[key]
        self.write_all(data)
        return True
