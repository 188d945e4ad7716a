from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """File-backed key/value documents; reads degrade to ``None`` and writes never raise."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, Any]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError:
            logger.warning("Unable to read %s", self._path, exc_info=True)
            return {}
        if not raw.strip():
            return {}
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Ignoring unreadable storage file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> bool:
        entries = self._read_all()
        entries[key] = value
        return self._write(entries)

    def remove(self, key: str) -> bool:
        entries = self._read_all()
        if key not in entries:
            return False
        entries.pop(key)
        return self._write(entries)

    def _write(self, entries: Dict[str, Any]) -> bool:
        try:
            payload = orjson.dumps(entries, option=orjson.OPT_INDENT_2)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(payload + b"\n")
        except (OSError, TypeError) as exc:
            logger.warning("Failed to persist %s: %s", self._path, exc)
            return False
        return True


__all__ = ["KeyValueStorage"]
