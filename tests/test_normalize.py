from __future__ import annotations

from schedule_builder.core.normalize import (
    fit_block_range,
    is_schedule_shape,
    merge_meta,
    normalize_blocks,
    normalize_schedule,
    sanitize_block,
    sanitize_meta,
)
from schedule_builder.domain.models import Block, ScheduleMeta


def _block(block_id: str, start, end, day: int = 0) -> Block:
    return Block(id=block_id, day_index=day, start=start, end=end)


def _assert_invariants(meta: ScheduleMeta, blocks) -> None:
    step = meta.minute_step
    for block in blocks:
        assert meta.start_minute <= block.start < block.end <= meta.end_minute
        assert (block.start - meta.start_minute) % step == 0
        assert (block.end - block.start) % step == 0
        assert block.end - block.start >= step
        assert 0 <= block.day_index <= 6


def test_sanitize_meta_defaults():
    meta = sanitize_meta({})
    assert meta.title == "My Schedule"
    assert meta.start_minute == 480
    assert meta.end_minute == 1200
    assert meta.minute_step == 15
    assert meta.show_weekend is True
    assert meta.visible_days == [0, 1, 2, 3, 4, 5, 6]
    assert meta.days == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def test_sanitize_meta_repairs_bad_values():
    meta = sanitize_meta({"minuteStep": 7, "startMinute": 2000, "endMinute": "late", "days": ["A"]})
    assert meta.minute_step == 15
    assert meta.start_minute == 1425
    assert meta.end_minute == 1440
    assert len(meta.days) == 7


def test_sanitize_meta_keeps_end_after_start():
    meta = sanitize_meta({"startMinute": 600, "endMinute": 540, "minuteStep": 30})
    assert meta.end_minute == 630


def test_sanitize_meta_preserves_unknown_keys():
    meta = sanitize_meta({"theme": "dark"})
    assert meta.to_record()["theme"] == "dark"


def test_merge_meta_accepts_attribute_or_wire_names():
    meta = sanitize_meta({})
    assert merge_meta(meta, {"end_minute": 1080}).end_minute == 1080
    assert merge_meta(meta, {"endMinute": 1020}).end_minute == 1020


def test_hiding_and_showing_the_weekend_restores_it():
    meta = sanitize_meta({})
    hidden = merge_meta(meta, {"showWeekend": False})
    assert hidden.visible_days == [0, 1, 2, 3, 4]

    shown = merge_meta(hidden, {"showWeekend": True})
    assert shown.visible_days == [0, 1, 2, 3, 4, 5, 6]


def test_showing_weekend_with_explicit_days_uses_them():
    hidden = sanitize_meta({"showWeekend": False})
    shown = merge_meta(hidden, {"show_weekend": True, "visible_days": [1, 6]})
    assert shown.visible_days == [1, 6]


def test_fit_block_range_snaps_inside_window():
    meta = sanitize_meta({})
    assert fit_block_range(meta, 487, 530) == (480, 525)
    assert fit_block_range(meta, 300, 400) == (480, 495)
    assert fit_block_range(meta, 1190, 1300) == (1185, 1200)
    assert fit_block_range(meta, 600, 600) == (600, 615)


def test_fit_block_range_with_window_not_multiple_of_step():
    meta = sanitize_meta({"startMinute": 480, "endMinute": 1000, "minuteStep": 15})
    start, end = fit_block_range(meta, 970, 1000)
    assert (start, end) == (975, 990)
    _assert_invariants(meta, [_block("a", start, end)])


def test_normalize_blocks_drops_out_of_window_and_clips_overlaps():
    meta = sanitize_meta({})
    blocks = [
        _block("inside", 540, 600),
        _block("after", 1200, 1260),
        _block("before", 300, 480),
        _block("straddle", 400, 500),
    ]
    kept = normalize_blocks(meta, blocks)
    assert [block.id for block in kept] == ["inside", "straddle"]
    assert (kept[1].start, kept[1].end) == (480, 495)
    _assert_invariants(meta, kept)


def test_normalize_blocks_does_not_mutate_input():
    meta = sanitize_meta({})
    original = _block("a", 487, 530)
    normalize_blocks(meta, [original])
    assert (original.start, original.end) == (487, 530)


def test_sanitize_block_rejects_unplaceable_records():
    assert sanitize_block({"id": "a", "dayIndex": 7, "start": 480, "end": 540}) is None
    assert sanitize_block({"id": "a", "dayIndex": 2.5, "start": 480, "end": 540}) is None
    assert sanitize_block({"id": "a", "dayIndex": 1, "start": "soon", "end": 540}) is None
    assert sanitize_block({"id": "a", "dayIndex": 1, "start": float("nan"), "end": 540}) is None
    assert sanitize_block("not a block") is None


def test_sanitize_block_fills_defaults():
    block = sanitize_block({"id": "a", "dayIndex": 1, "start": 480, "end": 540, "color": "red"})
    assert block is not None
    assert block.text == "Block"
    assert block.color == "#4f46e5"
    assert block.notes == ""


def test_normalize_schedule_assigns_missing_and_duplicate_ids():
    schedule = normalize_schedule(
        {
            "meta": {},
            "items": [
                {"id": "same", "dayIndex": 0, "start": 480, "end": 540},
                {"id": "same", "dayIndex": 1, "start": 480, "end": 540},
                {"dayIndex": 2, "start": 480, "end": 540},
            ],
        }
    )
    ids = [block.id for block in schedule.items]
    assert len(ids) == 3
    assert len(set(ids)) == 3
    assert ids[0] == "same"


def test_normalize_schedule_is_idempotent():
    raw = {
        "meta": {"startMinute": 485, "endMinute": 1001, "minuteStep": 30, "showWeekend": False, "visibleDays": [4, 0, 6]},
        "items": [
            {"id": "a", "dayIndex": 0, "start": 470, "end": 530, "text": "Gym"},
            {"id": "b", "dayIndex": 4, "start": 990, "end": 1100, "text": "Late"},
            {"id": "c", "dayIndex": 6, "start": 600, "end": 660},
        ],
    }
    once = normalize_schedule(raw)
    twice = normalize_schedule(once.to_record())
    assert once.to_record() == twice.to_record()
    assert once.meta.visible_days == [0, 4]
    _assert_invariants(once.meta, once.items)


def test_blocks_on_hidden_days_are_kept():
    schedule = normalize_schedule(
        {"meta": {"showWeekend": False}, "items": [{"id": "sun", "dayIndex": 6, "start": 600, "end": 660}]}
    )
    assert [block.id for block in schedule.items] == ["sun"]


def test_is_schedule_shape():
    assert is_schedule_shape({"meta": {}, "items": []})
    assert not is_schedule_shape({"meta": {}})
    assert not is_schedule_shape({"meta": [], "items": []})
    assert not is_schedule_shape(None)


def test_merge_meta_keeps_step_when_change_is_unsupported():
    meta = sanitize_meta({"minuteStep": 10})
    assert merge_meta(meta, {"minuteStep": 45}).minute_step == 10
    assert merge_meta(meta, {"minute_step": 60}).minute_step == 60
