from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import orjson


@dataclass(frozen=True, slots=True)
class SharedSchedule:
    id: str
    payload: str
    created_at: str
    expires_at: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self.expires_at:
            return False
        try:
            expires = datetime.fromisoformat(self.expires_at)
        except ValueError:
            return False
        return (now or datetime.now(timezone.utc)) > expires

    def to_record(self) -> Dict[str, Any]:
        return {"payload": self.payload, "created_at": self.created_at, "expires_at": self.expires_at}


class SharedScheduleRepository:
    """Published snapshots keyed by share id, kept in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._rows: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_materialized(self) -> Dict[str, Dict[str, Any]]:
        if self._rows is None:
            if self._path.exists() and self._path.stat().st_size:
                data = orjson.loads(self._path.read_bytes())
                self._rows = data if isinstance(data, dict) else {}
            else:
                self._rows = {}
        return self._rows

    def _persist(self) -> None:
        if self._rows is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(orjson.dumps(self._rows, option=orjson.OPT_INDENT_2) + b"\n")

    def exists(self, schedule_id: str) -> bool:
        with self._lock:
            return schedule_id in self._ensure_materialized()

    def insert(self, record: SharedSchedule) -> None:
        with self._lock:
            rows = self._ensure_materialized()
            if record.id in rows:
                raise KeyError(f"Shared schedule {record.id} already exists.")
            rows[record.id] = record.to_record()
            self._persist()

    def fetch(self, schedule_id: str) -> Optional[SharedSchedule]:
        with self._lock:
            row = self._ensure_materialized().get(schedule_id)
        if not isinstance(row, dict):
            return None
        return SharedSchedule(
            id=schedule_id,
            payload=str(row.get("payload") or ""),
            created_at=str(row.get("created_at") or ""),
            expires_at=row.get("expires_at"),
        )
