"""Shared week numbering of a project and allocation reindexing."""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from app.engine.errors import InvalidWeekPositionError, TimelineError, WeekRemovalDeclinedError

PlanKey = TypeVar("PlanKey", bound=Hashable)


@dataclass(frozen=True, slots=True)
class TimelineEdit(Generic[PlanKey]):
    """Result of a structural edit: the new timeline and one dense schedule per plan."""

    timeline: WeekTimeline
    allocations: dict[PlanKey, dict[int, int]]

    @property
    def weeks(self) -> list[int]:
        return self.timeline.weeks


@dataclass(frozen=True, slots=True)
class WeekTimeline:
    """Ordered week sequence, always ``[1, 2, ..., week_count]``.

    A week number is a position label, not a stable identity: inserting or
    removing a week relabels every later week for every plan at once.
    """

    week_count: int = 1

    def __post_init__(self) -> None:
        if self.week_count < 1:
            raise TimelineError("A timeline must contain at least one week.")

    @classmethod
    def from_weeks(cls, weeks: Sequence[int]) -> WeekTimeline:
        if list(weeks) != list(range(1, len(weeks) + 1)):
            raise TimelineError("Week numbers must be dense and start at 1.")
        return cls(week_count=len(weeks))

    @property
    def weeks(self) -> list[int]:
        return list(range(1, self.week_count + 1))

    def __len__(self) -> int:
        return self.week_count

    def __contains__(self, week_number: object) -> bool:
        return isinstance(week_number, int) and 1 <= week_number <= self.week_count

    def align(self, allocations: Mapping[int, int]) -> dict[int, int]:
        """Dense schedule over this timeline; missing weeks are 0, foreign labels dropped."""

        return {week: allocations.get(week, 0) for week in self.weeks}

    def insert_week_at(
        self,
        position: int,
        allocations_by_plan: Mapping[PlanKey, Mapping[int, int]],
    ) -> TimelineEdit[PlanKey]:
        """Insert a zero week before 0-based ``position`` (``week_count`` appends)."""

        if not 0 <= position <= self.week_count:
            raise InvalidWeekPositionError(position, self.week_count)

        # Weeks after the insertion point move up by one label.
        relabel = {week: week if week <= position else week + 1 for week in self.weeks}
        return self._reindex(WeekTimeline(self.week_count + 1), relabel, allocations_by_plan)

    def append_week(self, allocations_by_plan: Mapping[PlanKey, Mapping[int, int]]) -> TimelineEdit[PlanKey]:
        return self.insert_week_at(self.week_count, allocations_by_plan)

    def remove_week(
        self,
        week_number: int,
        allocations_by_plan: Mapping[PlanKey, Mapping[int, int]],
    ) -> TimelineEdit[PlanKey]:
        """Drop ``week_number`` and move every later week down by one label."""

        if self.week_count <= 1:
            raise WeekRemovalDeclinedError(week_number, "at least one week must remain")
        if week_number not in self:
            raise WeekRemovalDeclinedError(week_number, "unknown week number")

        relabel = {
            week: week if week < week_number else week - 1
            for week in self.weeks
            if week != week_number
        }
        return self._reindex(WeekTimeline(self.week_count - 1), relabel, allocations_by_plan)

    @staticmethod
    def _reindex(
        timeline: WeekTimeline,
        relabel: Mapping[int, int],
        allocations_by_plan: Mapping[PlanKey, Mapping[int, int]],
    ) -> TimelineEdit[PlanKey]:
        # One relabel map for every plan keeps all schedules on the same week domain.
        reindexed: dict[PlanKey, dict[int, int]] = {}
        for plan_key, allocations in allocations_by_plan.items():
            schedule = dict.fromkeys(timeline.weeks, 0)
            for old_week, new_week in relabel.items():
                schedule[new_week] = allocations.get(old_week, 0)
            reindexed[plan_key] = schedule
        return TimelineEdit(timeline=timeline, allocations=reindexed)
