"""Allocation, cost, price and margin formulas.

Rates are per hour. Internal rates are quoted in USD, client rates in the
project's client currency; ``exchange_rate`` is client currency units per 1 USD,
so internal amounts are always converted by multiplication.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from app.engine.errors import InvalidCalculationInputError, MarginConfigurationError

HOURS_PER_WEEK = 40
HOURS_PER_DAY = 8
MIN_ALLOCATION = 0
MAX_ALLOCATION = 100


@dataclass(frozen=True, slots=True)
class PlanInput:
    """Rates and week-number -> allocation percent schedule of one plan."""

    int_hourly_rate: float
    client_hourly_rate: float
    allocations: Mapping[int, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PlanMetrics:
    estimated_effort_hours: float
    total_internal_cost: float
    total_client_price: float
    margin_percent: float | None
    int_daily_rate: float
    client_daily_rate: float


@dataclass(frozen=True, slots=True)
class ProjectTotals:
    total_effort_hours: float
    total_internal_cost: float
    total_client_price: float
    margin_percent: float


def _require_rate(value: float, name: str) -> float:
    if not math.isfinite(value) or value < 0:
        raise InvalidCalculationInputError(f"{name} must be a finite number greater or equal zero.")
    return value


def _require_exchange_rate(value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise InvalidCalculationInputError("exchange_rate must be a finite number greater than zero.")
    return value


def clamp_allocation(value: int | float | str | None) -> int:
    """Coerce a user-entered allocation to an integer percent in [0, 100].

    Unparseable and non-finite input becomes 0; fractions are truncated.
    The whole value must parse, so text with a numeric prefix such as
    ``"50abc"`` becomes 0 rather than 50.
    """

    if value is None:
        return MIN_ALLOCATION
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MIN_ALLOCATION
    if not math.isfinite(number):
        return MIN_ALLOCATION
    return max(MIN_ALLOCATION, min(MAX_ALLOCATION, int(number)))


def daily_rate(hourly_rate: float) -> float:
    """Daily rate = hourly rate x 8 working hours."""

    return _require_rate(hourly_rate, "hourly_rate") * HOURS_PER_DAY


def estimated_effort_hours(plan: PlanInput, weeks: Iterable[int]) -> float:
    """Effort hours = sum(allocation / 100) x 40 over the given weeks."""

    total_percent = sum(plan.allocations.get(week, 0) for week in weeks)
    return total_percent / 100 * HOURS_PER_WEEK


def total_internal_cost(plan: PlanInput, weeks: Iterable[int]) -> float:
    """Total internal cost (USD) = effort hours x internal hourly rate."""

    rate = _require_rate(plan.int_hourly_rate, "int_hourly_rate")
    return estimated_effort_hours(plan, weeks) * rate


def total_client_price(plan: PlanInput, weeks: Iterable[int]) -> float:
    """Total client price (client currency) = effort hours x client hourly rate."""

    rate = _require_rate(plan.client_hourly_rate, "client_hourly_rate")
    return estimated_effort_hours(plan, weeks) * rate


def margin_percent(plan: PlanInput, exchange_rate: float) -> float | None:
    """Margin % = (client rate - internal rate x exchange rate) / client rate x 100.

    Returns ``None`` when the client rate is zero, negative or non-finite.
    """

    int_rate = _require_rate(plan.int_hourly_rate, "int_hourly_rate")
    rate = _require_exchange_rate(exchange_rate)
    client_rate = plan.client_hourly_rate
    if not math.isfinite(client_rate) or client_rate <= 0:
        return None
    cost_in_client_currency = int_rate * rate
    return (client_rate - cost_in_client_currency) / client_rate * 100


def auto_price_from_margin(
    internal_rate_usd: float,
    default_margin_percent: float,
    exchange_rate: float,
) -> float:
    """Client hourly rate = internal rate / (1 - margin) x exchange rate.

    Negative margins are clamped to 0. A margin of 100 or more has no finite
    price and raises ``MarginConfigurationError``.
    """

    internal_rate = _require_rate(internal_rate_usd, "internal_rate_usd")
    rate = _require_exchange_rate(exchange_rate)
    if not math.isfinite(default_margin_percent):
        raise MarginConfigurationError("default_margin must be a finite percentage.")
    margin = max(0.0, default_margin_percent)
    if margin >= 100:
        raise MarginConfigurationError("default_margin must be lower than 100 to auto-price a plan.")
    client_rate_usd = internal_rate / (1 - margin / 100)
    return client_rate_usd * rate


def aggregate_margin(plans: Iterable[PlanInput], weeks: Iterable[int], exchange_rate: float) -> float:
    """Project margin % = (sum price - sum cost x exchange rate) / sum price x 100.

    Returns 0 when the summed client price is 0.
    """

    return summarize_project(plans, weeks, exchange_rate).margin_percent


def summarize_plan(plan: PlanInput, weeks: Iterable[int], exchange_rate: float) -> PlanMetrics:
    week_list = list(weeks)
    return PlanMetrics(
        estimated_effort_hours=estimated_effort_hours(plan, week_list),
        total_internal_cost=total_internal_cost(plan, week_list),
        total_client_price=total_client_price(plan, week_list),
        margin_percent=margin_percent(plan, exchange_rate),
        int_daily_rate=daily_rate(plan.int_hourly_rate),
        client_daily_rate=daily_rate(plan.client_hourly_rate),
    )


def summarize_project(plans: Iterable[PlanInput], weeks: Iterable[int], exchange_rate: float) -> ProjectTotals:
    rate = _require_exchange_rate(exchange_rate)
    week_list = list(weeks)

    total_effort = 0.0
    total_cost = 0.0
    total_price = 0.0
    for plan in plans:
        total_effort += estimated_effort_hours(plan, week_list)
        total_cost += total_internal_cost(plan, week_list)
        total_price += total_client_price(plan, week_list)

    if total_price == 0:
        margin = 0.0
    else:
        margin = (total_price - total_cost * rate) / total_price * 100

    return ProjectTotals(
        total_effort_hours=total_effort,
        total_internal_cost=total_cost,
        total_client_price=total_price,
        margin_percent=margin,
    )
