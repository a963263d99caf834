from __future__ import annotations

import pytest

from app.engine import (
    InvalidWeekPositionError,
    TimelineError,
    WeekRemovalDeclinedError,
    WeekTimeline,
)


def test_timeline_weeks_are_dense_from_one() -> None:
    timeline = WeekTimeline(3)

    assert timeline.weeks == [1, 2, 3]
    assert len(timeline) == 3
    assert 3 in timeline
    assert 0 not in timeline
    assert 4 not in timeline


def test_timeline_requires_at_least_one_week() -> None:
    with pytest.raises(TimelineError):
        WeekTimeline(0)


def test_from_weeks_rejects_gaps() -> None:
    assert WeekTimeline.from_weeks([1, 2, 3]).week_count == 3

    with pytest.raises(TimelineError):
        WeekTimeline.from_weeks([1, 3])


def test_insert_shifts_later_weeks_for_every_plan() -> None:
    timeline = WeekTimeline(3)

    edit = timeline.insert_week_at(2, {"a": {1: 10, 2: 20, 3: 30}, "b": {3: 90}})

    assert edit.weeks == [1, 2, 3, 4]
    assert edit.allocations["a"] == {1: 10, 2: 20, 3: 0, 4: 30}
    assert edit.allocations["b"] == {1: 0, 2: 0, 3: 0, 4: 90}
    # the original timeline is left untouched
    assert timeline.weeks == [1, 2, 3]


def test_insert_at_start_and_end() -> None:
    timeline = WeekTimeline(2)

    first = timeline.insert_week_at(0, {"a": {1: 10, 2: 20}})
    assert first.allocations["a"] == {1: 0, 2: 10, 3: 20}

    last = timeline.append_week({"a": {1: 10, 2: 20}})
    assert last.allocations["a"] == {1: 10, 2: 20, 3: 0}


@pytest.mark.parametrize("position", [-1, 4])
def test_insert_outside_range_is_rejected(position: int) -> None:
    with pytest.raises(InvalidWeekPositionError):
        WeekTimeline(3).insert_week_at(position, {"a": {1: 10}})


def test_remove_relabels_following_weeks() -> None:
    edit = WeekTimeline(4).remove_week(2, {"a": {1: 10, 2: 20, 3: 30, 4: 40}})

    assert edit.weeks == [1, 2, 3]
    assert edit.allocations["a"] == {1: 10, 2: 30, 3: 40}


def test_remove_last_remaining_week_is_declined() -> None:
    with pytest.raises(WeekRemovalDeclinedError) as exc_info:
        WeekTimeline(1).remove_week(1, {"a": {1: 50}})

    assert exc_info.value.week_number == 1


def test_remove_unknown_week_is_declined() -> None:
    with pytest.raises(WeekRemovalDeclinedError):
        WeekTimeline(3).remove_week(7, {})


@pytest.mark.parametrize("position", [0, 1, 2, 3])
def test_insert_then_remove_restores_schedules(position: int) -> None:
    original = {"a": {1: 10, 2: 20, 3: 30}, "b": {1: 100, 2: 0, 3: 5}}
    timeline = WeekTimeline(3)

    inserted = timeline.insert_week_at(position, original)
    # the inserted week carries label position + 1 and starts empty
    assert all(schedule[position + 1] == 0 for schedule in inserted.allocations.values())
    restored = inserted.timeline.remove_week(position + 1, inserted.allocations)

    assert restored.timeline == timeline
    assert restored.allocations == original


def test_mixed_edits_keep_weeks_dense_and_plans_aligned() -> None:
    timeline = WeekTimeline(2)
    allocations: dict[str, dict[int, int]] = {"a": {1: 10, 2: 20}, "b": {2: 70}, "c": {}}
    edits = [
        ("insert", 0),
        ("append", None),
        ("remove", 2),
        ("insert", 3),
        ("remove", 1),
        ("remove", 3),
        ("insert", 1),
        ("append", None),
    ]

    for kind, argument in edits:
        if kind == "insert":
            edit = timeline.insert_week_at(argument, allocations)
        elif kind == "append":
            edit = timeline.append_week(allocations)
        else:
            edit = timeline.remove_week(argument, allocations)
        timeline, allocations = edit.timeline, edit.allocations

        assert timeline.weeks == list(range(1, len(timeline) + 1))
        for schedule in allocations.values():
            assert sorted(schedule) == timeline.weeks

    assert timeline.weeks == [1, 2, 3, 4]
    assert allocations["a"] == {1: 20, 2: 0, 3: 0, 4: 0}
    assert allocations["b"] == {1: 70, 2: 0, 3: 0, 4: 0}
    assert sum(allocations["c"].values()) == 0


def test_sparse_and_foreign_labels_are_normalized() -> None:
    edit = WeekTimeline(2).append_week({"a": {2: 40, 9: 70}})

    assert edit.allocations["a"] == {1: 0, 2: 40, 3: 0}
    assert WeekTimeline(3).align({2: 15, 8: 99}) == {1: 0, 2: 15, 3: 0}
