from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from ..config import get_settings
from ..domain.models import Block, Schedule
from .config import DEFAULT_BLOCK_COLOR, DEFAULT_BLOCK_TEXT
from .days import resolve_visible_days
from .normalize import (
    fit_block_range,
    is_hex_color,
    is_schedule_shape,
    merge_meta,
    new_block_id,
    normalize_blocks,
    normalize_schedule,
    sanitize_block,
)
from .storage import KeyValueStorage
from .timegrid import as_finite_number, minutes_to_time_input

logger = logging.getLogger(__name__)

Listener = Callable[[Schedule], None]

_BLOCK_FIELDS = {"day_index": "dayIndex"}


def default_schedule() -> Schedule:
    return Schedule()


def _clamp_day(value: Any, fallback: int) -> int:
    """Nearest weekday for a numeric day; ``fallback`` when it is not a number."""

    number = as_finite_number(value)
    if number is None:
        return fallback
    return max(0, min(6, int(number)))


class ScheduleStore:
    """Sole owner of the schedule document.

    Every mutation restores the document invariants, persists the whole
    document, and only then notifies subscribers.
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, *, key: Optional[str] = None) -> None:
        settings = get_settings().storage
        self._storage = storage or KeyValueStorage(settings.state_file)
        self._key = key or settings.storage_key
        self._listeners: List[Listener] = []
        self._state: Schedule = self.load()

    @property
    def state(self) -> Schedule:
        return self._state

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def load(self) -> Schedule:
        raw = self._storage.get(self._key)
        if not is_schedule_shape(raw):
            if raw is not None:
                logger.warning("Stored schedule under %r is malformed; starting from defaults", self._key)
            self._state = default_schedule()
            return self._state
        self._state = normalize_schedule(raw)
        logger.debug("Loaded schedule with %d block(s)", len(self._state.items))
        return self._state

    def save(self) -> bool:
        return self._storage.set(self._key, self._state.to_record())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self) -> None:
        self.save()
        for listener in list(self._listeners):
            listener(self._state)

    def commit(self) -> None:
        """Persist and broadcast edits applied in place, e.g. by a finished gesture."""

        self._emit()

    def replace_all(self, document: Any) -> bool:
        if isinstance(document, Schedule):
            document = document.to_record()
        if not is_schedule_shape(document):
            logger.warning("Rejected schedule replacement without meta/items")
            return False
        self._state = normalize_schedule(document)
        logger.debug("Replaced schedule; %d block(s) kept", len(self._state.items))
        self._emit()
        return True

    def reset(self) -> None:
        self._state = default_schedule()
        logger.debug("Schedule reset to defaults")
        self._emit()

    def set_meta(self, changes: Optional[Mapping[str, Any]] = None, **fields: Any) -> None:
        merged_changes = dict(changes or {})
        merged_changes.update(fields)
        meta = merge_meta(self._state.meta, merged_changes)
        self._state.meta = meta
        self._state.items = normalize_blocks(meta, self._state.items)
        self._emit()

    def add_item(
        self,
        day_index: int,
        start: float,
        end: float,
        text: str = "",
        color: str = "",
        notes: str = "",
    ) -> Block:
        meta = self._state.meta
        snapped_start, snapped_end = fit_block_range(meta, start, end)
        block = Block(
            id=new_block_id(item.id for item in self._state.items),
            day_index=_clamp_day(day_index, 0),
            start=snapped_start,
            end=snapped_end,
            text=text or DEFAULT_BLOCK_TEXT,
            color=color if is_hex_color(color) else DEFAULT_BLOCK_COLOR,
            notes=notes or "",
        )
        self._state.items.append(block)
        logger.debug("Added block %s on day %d %d-%d", block.id, block.day_index, block.start, block.end)
        self._emit()
        return block

    def update_item(self, block_id: str, changes: Optional[Mapping[str, Any]] = None, **fields: Any) -> Optional[Block]:
        index = self._index_of(block_id)
        if index is None:
            return None

        current = self._state.items[index]
        merged = current.to_record()
        for key, value in {**(changes or {}), **fields}.items():
            merged[_BLOCK_FIELDS.get(key, key)] = value
        merged["id"] = current.id
        merged["dayIndex"] = _clamp_day(merged.get("dayIndex"), current.day_index)

        updated = sanitize_block(merged)
        if updated is None:
            logger.warning("Dropping block %s after an update left it without a valid range", block_id)
            del self._state.items[index]
        else:
            self._state.items[index] = updated
        self._state.items = normalize_blocks(self._state.meta, self._state.items)
        self._emit()
        return self._state.find(block_id)

    def delete_item(self, block_id: str) -> bool:
        index = self._index_of(block_id)
        if index is None:
            return False
        del self._state.items[index]
        logger.debug("Deleted block %s", block_id)
        self._emit()
        return True

    def apply_live(self, block_id: str, *, day_index: int, start: int, end: int) -> Optional[Block]:
        """Write a gesture frame straight into the block, without persisting or notifying."""

        block = self._state.find(block_id)
        if block is None:
            return None
        block.day_index = day_index
        block.start = start
        block.end = end
        return block

    def find_item(self, block_id: str) -> Optional[Block]:
        return self._state.find(block_id)

    def visible_day_indices(self) -> List[int]:
        meta = self._state.meta
        return resolve_visible_days(meta.visible_days, meta.show_weekend)

    def visible_day_labels(self) -> List[str]:
        labels = self._state.meta.days
        return [labels[day] if day < len(labels) else "" for day in self.visible_day_indices()]

    def meta_line(self) -> str:
        meta = self._state.meta
        return (
            f"{minutes_to_time_input(meta.start_minute)} – {minutes_to_time_input(meta.end_minute)}"
            f" • {meta.minute_step} min steps"
        )

    def _index_of(self, block_id: str) -> Optional[int]:
        for index, block in enumerate(self._state.items):
            if block.id == block_id:
                return index
        return None


__all__ = ["ScheduleStore", "default_schedule"]
