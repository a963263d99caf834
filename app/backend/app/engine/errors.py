"""Recoverable error types raised by the planning engine."""


class PlanningEngineError(Exception):
    """Base class for all engine errors."""


class InvalidCalculationInputError(PlanningEngineError, ValueError):
    """Raised when a rate or exchange rate cannot produce a finite result."""


class MarginConfigurationError(PlanningEngineError, ValueError):
    """Raised when a default margin makes auto-pricing undefined."""


class TimelineError(PlanningEngineError):
    """Base class for week timeline contract violations."""


class InvalidWeekPositionError(TimelineError, ValueError):
    """Raised when an insert position lies outside ``[0, N]``."""

    def __init__(self, position: int, week_count: int) -> None:
        super().__init__(f"Week position {position} is outside the range 0..{week_count}.")
        self.position = position
        self.week_count = week_count


class WeekRemovalDeclinedError(TimelineError):
    """Raised when a week removal is declined and nothing changed."""

    def __init__(self, week_number: int, reason: str) -> None:
        super().__init__(f"Removal of week {week_number} declined: {reason}")
        self.week_number = week_number
        self.reason = reason
