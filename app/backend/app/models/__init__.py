"""ORM model package."""

from app.models.entities import (
    ClientCurrency,
    Project,
    RateCard,
    RateCardRegion,
    ResourceList,
    ResourcePlan,
    WeeklyAllocation,
)

__all__ = [
    "ClientCurrency",
    "Project",
    "RateCard",
    "RateCardRegion",
    "ResourceList",
    "ResourcePlan",
    "WeeklyAllocation",
]
