"""Pure allocation, margin and week timeline engine."""

from app.engine.allocation_calculator import (
    HOURS_PER_DAY,
    HOURS_PER_WEEK,
    PlanInput,
    PlanMetrics,
    ProjectTotals,
    aggregate_margin,
    auto_price_from_margin,
    clamp_allocation,
    daily_rate,
    estimated_effort_hours,
    margin_percent,
    summarize_plan,
    summarize_project,
    total_client_price,
    total_internal_cost,
)
from app.engine.errors import (
    InvalidCalculationInputError,
    InvalidWeekPositionError,
    MarginConfigurationError,
    PlanningEngineError,
    TimelineError,
    WeekRemovalDeclinedError,
)
from app.engine.week_timeline import TimelineEdit, WeekTimeline

__all__ = [
    "HOURS_PER_DAY",
    "HOURS_PER_WEEK",
    "InvalidCalculationInputError",
    "InvalidWeekPositionError",
    "MarginConfigurationError",
    "PlanInput",
    "PlanMetrics",
    "PlanningEngineError",
    "ProjectTotals",
    "TimelineEdit",
    "TimelineError",
    "WeekRemovalDeclinedError",
    "WeekTimeline",
    "aggregate_margin",
    "auto_price_from_margin",
    "clamp_allocation",
    "daily_rate",
    "estimated_effort_hours",
    "margin_percent",
    "summarize_plan",
    "summarize_project",
    "total_client_price",
    "total_internal_cost",
]
