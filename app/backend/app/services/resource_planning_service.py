"""Application service for projects, rate cards, resource lists and resource plans."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.engine import (
    PlanInput,
    PlanningEngineError,
    WeekRemovalDeclinedError,
    WeekTimeline,
    auto_price_from_margin,
    clamp_allocation,
    summarize_plan,
    summarize_project,
)
from app.models.entities import (
    ClientCurrency,
    Project,
    RateCard,
    RateCardRegion,
    ResourceList,
    ResourcePlan,
    WeeklyAllocation,
)
from app.repositories.resource_planning_repository import ResourcePlanningRepository

logger = logging.getLogger(__name__)

RATE_CARD_REGION_FIELDS = tuple(region.value for region in RateCardRegion)


def _r2(value: float) -> float:
    return round(value, 2)


@dataclass(slots=True)
class ProjectCreateData:
    name: str
    description: str | None = None
    days_in_fte: int = 20
    client_currency: ClientCurrency = ClientCurrency.EUR
    exchange_rate: float = 1.0
    default_margin: float = 0.0
    week_count: int = 8


@dataclass(slots=True)
class ProjectUpdateData:
    name: str | None = None
    description: str | None = None
    days_in_fte: int | None = None
    client_currency: ClientCurrency | None = None
    exchange_rate: float | None = None
    default_margin: float | None = None


@dataclass(slots=True)
class RateCardData:
    role: str
    naming_in_pm: str | None = None
    discipline: str | None = None
    description: str | None = None
    region_rates: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class RateCardUpdateData:
    role: str | None = None
    naming_in_pm: str | None = None
    discipline: str | None = None
    description: str | None = None
    region_rates: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class ResourceListCreateData:
    role: str
    int_rate: float
    client_role: str | None = None
    name: str | None = None
    location: str | None = None
    description: str | None = None


@dataclass(slots=True)
class ResourceListUpdateData:
    role: str | None = None
    int_rate: float | None = None
    client_role: str | None = None
    name: str | None = None
    location: str | None = None
    description: str | None = None


@dataclass(slots=True)
class ResourceListFromRateCardData:
    rate_card_id: UUID
    region: RateCardRegion
    name: str | None = None
    client_role: str | None = None
    location: str | None = None


@dataclass(slots=True)
class ResourcePlanCreateData:
    role: str = ""
    client_role: str | None = None
    name: str | None = None
    int_hourly_rate: float = 0.0
    client_hourly_rate: float = 0.0
    allocations: dict[int, int | float | str | None] = field(default_factory=dict)


@dataclass(slots=True)
class ResourcePlanUpdateData:
    role: str | None = None
    client_role: str | None = None
    name: str | None = None
    int_hourly_rate: float | None = None
    client_hourly_rate: float | None = None
    allocations: dict[int, int | float | str | None] | None = None


def _engine_http_error(exc: PlanningEngineError) -> HTTPException:
    if isinstance(exc, WeekRemovalDeclinedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class ResourcePlanningService:
    """Service implementing resource planning persistence around the planning engine."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = ResourcePlanningRepository(db)
        self.settings = get_settings()

    # ---------- Lookups ----------
    def _require_project(self, project_id: UUID) -> Project:
        project = self.repo.get_project(project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        return project

    def _require_rate_card(self, rate_card_id: UUID) -> RateCard:
        rate_card = self.repo.get_rate_card(rate_card_id)
        if rate_card is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Rate card not found.")
        return rate_card

    def _require_resource_list(self, resource_list_id: UUID) -> ResourceList:
        resource_list = self.repo.get_resource_list(resource_list_id)
        if resource_list is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource list entry not found.")
        return resource_list

    def _require_resource_plan(self, resource_plan_id: UUID) -> ResourcePlan:
        resource_plan = self.repo.get_resource_plan(resource_plan_id)
        if resource_plan is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource plan not found.")
        return resource_plan

    @staticmethod
    def timeline_for(project: Project) -> WeekTimeline:
        return WeekTimeline(project.week_count)

    def _schedules(self, plans: list[ResourcePlan]) -> dict[UUID, dict[int, int]]:
        schedules: dict[UUID, dict[int, int]] = {plan.id: {} for plan in plans}
        for row in self.repo.list_allocations_for_plans([plan.id for plan in plans]):
            schedules[row.resource_plan_id][row.week_number] = row.allocation
        return schedules

    # ---------- Serialization ----------
    @staticmethod
    def serialize_project(project: Project) -> dict[str, object]:
        return {
            "id": str(project.id),
            "name": project.name,
            "description": project.description,
            "days_in_fte": project.days_in_fte,
            "client_currency": project.client_currency.value,
            "currency_symbol": project.client_currency.symbol,
            "exchange_rate": project.exchange_rate,
            "default_margin": project.default_margin,
            "weeks": WeekTimeline(project.week_count).weeks,
            "created_at": project.created_at.isoformat(),
            "updated_at": project.updated_at.isoformat(),
        }

    @staticmethod
    def serialize_rate_card(rate_card: RateCard) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": str(rate_card.id),
            "project_id": str(rate_card.project_id),
            "role": rate_card.role,
            "naming_in_pm": rate_card.naming_in_pm,
            "discipline": rate_card.discipline,
            "description": rate_card.description,
        }
        for region in RATE_CARD_REGION_FIELDS:
            payload[region] = getattr(rate_card, region)
        return payload

    @staticmethod
    def serialize_resource_list(resource_list: ResourceList) -> dict[str, object]:
        return {
            "id": str(resource_list.id),
            "project_id": str(resource_list.project_id),
            "role": resource_list.role,
            "client_role": resource_list.client_role,
            "name": resource_list.name,
            "int_rate": resource_list.int_rate,
            "location": resource_list.location,
            "description": resource_list.description,
        }

    @staticmethod
    def serialize_allocation(row: WeeklyAllocation) -> dict[str, object]:
        return {"week_number": row.week_number, "allocation": row.allocation}

    @staticmethod
    def serialize_resource_plan(plan: ResourcePlan, schedule: dict[int, int]) -> dict[str, object]:
        return {
            "id": str(plan.id),
            "project_id": str(plan.project_id),
            "role": plan.role,
            "client_role": plan.client_role,
            "name": plan.name,
            "int_hourly_rate": plan.int_hourly_rate,
            "client_hourly_rate": plan.client_hourly_rate,
            "weekly_allocations": [
                {"week_number": week, "allocation": schedule[week]} for week in sorted(schedule)
            ],
        }

    # ---------- Projects ----------
    def list_projects(self) -> list[Project]:
        return self.repo.list_projects()

    def get_project(self, project_id: UUID) -> Project:
        return self._require_project(project_id)

    def ensure_default_project(self) -> Project:
        existing = self.repo.first_project()
        if existing is not None:
            return existing

        project = self.create_project(
            ProjectCreateData(
                name=self.settings.default_project_name,
                description=self.settings.default_project_description,
                days_in_fte=self.settings.default_days_in_fte,
                client_currency=self.settings.default_client_currency,
                exchange_rate=self.settings.default_exchange_rate,
                default_margin=self.settings.default_margin,
                week_count=self.settings.default_week_count,
            )
        )
        logger.info("Created default project %s", project.id)
        return project

    def create_project(self, data: ProjectCreateData) -> Project:
        now = datetime.utcnow()
        project = Project(
            name=data.name.strip(),
            description=_clean(data.description),
            days_in_fte=data.days_in_fte,
            client_currency=data.client_currency,
            exchange_rate=data.exchange_rate,
            default_margin=data.default_margin,
            week_count=data.week_count,
            created_at=now,
            updated_at=now,
        )
        self.repo.add_project(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def update_project(self, project_id: UUID, data: ProjectUpdateData) -> Project:
        project = self._require_project(project_id)

        if data.name is not None:
            project.name = data.name.strip()
        if data.description is not None:
            project.description = _clean(data.description)
        if data.days_in_fte is not None:
            project.days_in_fte = data.days_in_fte
        if data.client_currency is not None:
            project.client_currency = data.client_currency
        if data.exchange_rate is not None:
            project.exchange_rate = data.exchange_rate
        if data.default_margin is not None:
            project.default_margin = data.default_margin
        project.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(project)
        return project

    def project_detail(self, project_id: UUID) -> dict[str, object]:
        project = self._require_project(project_id)
        plans = self.repo.list_resource_plans(project.id)
        schedules = self._schedules(plans)
        return {
            **self.serialize_project(project),
            "rate_cards": [self.serialize_rate_card(row) for row in self.repo.list_rate_cards(project.id)],
            "resource_lists": [
                self.serialize_resource_list(row) for row in self.repo.list_resource_lists(project.id)
            ],
            "resource_plans": [self.serialize_resource_plan(plan, schedules[plan.id]) for plan in plans],
        }

    # ---------- Rate cards ----------
    def list_rate_cards(self, project_id: UUID) -> list[RateCard]:
        project = self._require_project(project_id)
        return self.repo.list_rate_cards(project.id)

    @staticmethod
    def _build_rate_card(project_id: UUID, data: RateCardData) -> RateCard:
        role = data.role.strip()
        now = datetime.utcnow()
        rate_card = RateCard(
            project_id=project_id,
            role=role,
            naming_in_pm=(data.naming_in_pm or "").strip() or role,
            discipline=(data.discipline or "").strip() or "General",
            description=(data.description or "").strip(),
            created_at=now,
            updated_at=now,
        )
        for region in RATE_CARD_REGION_FIELDS:
            setattr(rate_card, region, float(data.region_rates.get(region) or 0.0))
        return rate_card

    def create_rate_card(self, project_id: UUID, data: RateCardData) -> RateCard:
        return self.bulk_create_rate_cards(project_id, [data])[0]

    def bulk_create_rate_cards(self, project_id: UUID, rows: list[RateCardData]) -> list[RateCard]:
        project = self._require_project(project_id)
        if any(not row.role.strip() for row in rows):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Every rate card requires a non-empty role.",
            )

        rate_cards = self.repo.add_rate_cards([self._build_rate_card(project.id, row) for row in rows])
        self.db.commit()
        for rate_card in rate_cards:
            self.db.refresh(rate_card)
        logger.info("Created %d rate cards for project %s", len(rate_cards), project.id)
        return rate_cards

    def update_rate_card(self, rate_card_id: UUID, data: RateCardUpdateData) -> RateCard:
        rate_card = self._require_rate_card(rate_card_id)

        if data.role is not None:
            if not data.role.strip():
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Rate card role cannot be empty.",
                )
            rate_card.role = data.role.strip()
        if data.naming_in_pm is not None:
            rate_card.naming_in_pm = data.naming_in_pm.strip()
        if data.discipline is not None:
            rate_card.discipline = data.discipline.strip()
        if data.description is not None:
            rate_card.description = data.description.strip()
        for region, value in data.region_rates.items():
            if region in RATE_CARD_REGION_FIELDS:
                setattr(rate_card, region, float(value))
        rate_card.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(rate_card)
        return rate_card

    def delete_rate_card(self, rate_card_id: UUID) -> None:
        rate_card = self._require_rate_card(rate_card_id)
        self.repo.delete_rate_card(rate_card)
        self.db.commit()

    def delete_project_rate_cards(self, project_id: UUID) -> int:
        project = self._require_project(project_id)
        deleted = self.repo.delete_rate_cards_for_project(project.id)
        self.db.commit()
        logger.info("Deleted %d rate cards of project %s", deleted, project.id)
        return deleted

    # ---------- Resource lists ----------
    def list_resource_lists(self, project_id: UUID) -> list[ResourceList]:
        project = self._require_project(project_id)
        return self.repo.list_resource_lists(project.id)

    def create_resource_list(self, project_id: UUID, data: ResourceListCreateData) -> ResourceList:
        project = self._require_project(project_id)
        if not data.role.strip():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Resource list role cannot be empty.",
            )

        now = datetime.utcnow()
        resource_list = ResourceList(
            project_id=project.id,
            role=data.role.strip(),
            client_role=_clean(data.client_role),
            name=_clean(data.name),
            int_rate=data.int_rate,
            location=_clean(data.location),
            description=_clean(data.description),
            created_at=now,
            updated_at=now,
        )
        self.repo.add_resource_list(resource_list)
        self.db.commit()
        self.db.refresh(resource_list)
        return resource_list

    def create_resource_list_from_rate_card(
        self,
        project_id: UUID,
        data: ResourceListFromRateCardData,
    ) -> ResourceList:
        project = self._require_project(project_id)
        rate_card = self._require_rate_card(data.rate_card_id)
        if rate_card.project_id != project.id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="rate_card_id must reference a rate card in this project.",
            )

        return self.create_resource_list(
            project.id,
            ResourceListCreateData(
                role=rate_card.role,
                int_rate=float(getattr(rate_card, data.region.value)),
                client_role=data.client_role or rate_card.naming_in_pm,
                name=data.name,
                location=data.location or data.region.value,
                description=rate_card.description,
            ),
        )

    def update_resource_list(self, resource_list_id: UUID, data: ResourceListUpdateData) -> ResourceList:
        resource_list = self._require_resource_list(resource_list_id)

        if data.role is not None:
            if not data.role.strip():
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Resource list role cannot be empty.",
                )
            resource_list.role = data.role.strip()
        if data.int_rate is not None:
            resource_list.int_rate = data.int_rate
        if data.client_role is not None:
            resource_list.client_role = _clean(data.client_role)
        if data.name is not None:
            resource_list.name = _clean(data.name)
        if data.location is not None:
            resource_list.location = _clean(data.location)
        if data.description is not None:
            resource_list.description = _clean(data.description)
        resource_list.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(resource_list)
        return resource_list

    def delete_resource_list(self, resource_list_id: UUID) -> None:
        resource_list = self._require_resource_list(resource_list_id)
        self.repo.delete_resource_list(resource_list)
        self.db.commit()

    # ---------- Resource plans ----------
    def list_resource_plans(self, project_id: UUID) -> list[dict[str, object]]:
        project = self._require_project(project_id)
        plans = self.repo.list_resource_plans(project.id)
        schedules = self._schedules(plans)
        return [self.serialize_resource_plan(plan, schedules[plan.id]) for plan in plans]

    def get_resource_plan(self, resource_plan_id: UUID) -> dict[str, object]:
        plan = self._require_resource_plan(resource_plan_id)
        return self.serialize_resource_plan(plan, self._schedules([plan])[plan.id])

    def create_resource_plan(self, project_id: UUID, data: ResourcePlanCreateData) -> dict[str, object]:
        project = self._require_project(project_id)
        timeline = self.timeline_for(project)

        now = datetime.utcnow()
        plan = ResourcePlan(
            project_id=project.id,
            role=data.role.strip(),
            client_role=_clean(data.client_role),
            name=_clean(data.name),
            int_hourly_rate=data.int_hourly_rate,
            client_hourly_rate=data.client_hourly_rate,
            sequence_no=self.repo.next_plan_sequence_no(project.id),
            created_at=now,
            updated_at=now,
        )
        self.repo.add_resource_plan(plan)

        schedule = timeline.align({week: clamp_allocation(value) for week, value in data.allocations.items()})
        self.repo.replace_schedule(plan.id, schedule)
        self.db.commit()
        self.db.refresh(plan)
        return self.serialize_resource_plan(plan, schedule)

    def update_resource_plan(self, resource_plan_id: UUID, data: ResourcePlanUpdateData) -> dict[str, object]:
        plan = self._require_resource_plan(resource_plan_id)
        project = self._require_project(plan.project_id)

        if data.role is not None:
            if not data.role.strip():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Role is required and cannot be empty.",
                )
            plan.role = data.role.strip()
        if data.client_role is not None:
            plan.client_role = _clean(data.client_role)
        if data.name is not None:
            plan.name = _clean(data.name)
        if data.int_hourly_rate is not None:
            plan.int_hourly_rate = data.int_hourly_rate
        if data.client_hourly_rate is not None:
            plan.client_hourly_rate = data.client_hourly_rate
        plan.updated_at = datetime.utcnow()

        try:
            if data.allocations is not None:
                timeline = self.timeline_for(project)
                schedule = timeline.align(
                    {week: clamp_allocation(value) for week, value in data.allocations.items()}
                )
                self.repo.replace_schedule(plan.id, schedule)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Resource plan update violated allocation constraints.",
            ) from exc

        self.db.refresh(plan)
        return self.serialize_resource_plan(plan, self._schedules([plan])[plan.id])

    def delete_resource_plan(self, resource_plan_id: UUID) -> None:
        plan = self._require_resource_plan(resource_plan_id)
        self.repo.delete_resource_plan(plan)
        self.db.commit()
        logger.info("Deleted resource plan %s of project %s", plan.id, plan.project_id)

    def assign_role(self, resource_plan_id: UUID, resource_list_id: UUID) -> dict[str, object]:
        """Copy a resource list entry onto a plan and price it at the project's default margin."""

        plan = self._require_resource_plan(resource_plan_id)
        project = self._require_project(plan.project_id)
        resource = self._require_resource_list(resource_list_id)
        if resource.project_id != project.id:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="resource_list_id must reference a resource list entry in this project.",
            )

        try:
            client_rate = auto_price_from_margin(resource.int_rate, project.default_margin, project.exchange_rate)
        except PlanningEngineError as exc:
            raise _engine_http_error(exc) from exc

        plan.role = resource.role
        plan.client_role = resource.client_role
        plan.name = resource.name
        plan.int_hourly_rate = resource.int_rate
        plan.client_hourly_rate = client_rate
        plan.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(plan)
        return self.serialize_resource_plan(plan, self._schedules([plan])[plan.id])

    # ---------- Weekly allocations ----------
    def list_allocations(self, resource_plan_id: UUID) -> list[WeeklyAllocation]:
        plan = self._require_resource_plan(resource_plan_id)
        return self.repo.list_allocations(plan.id)

    def set_allocation(
        self,
        resource_plan_id: UUID,
        week_number: int,
        value: int | float | str | None,
    ) -> WeeklyAllocation:
        plan = self._require_resource_plan(resource_plan_id)
        project = self._require_project(plan.project_id)
        if week_number not in self.timeline_for(project):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Week not found in project timeline.")

        schedule = self.timeline_for(project).align(self._schedules([plan])[plan.id])
        schedule[week_number] = clamp_allocation(value)
        rows = self.repo.replace_schedule(plan.id, schedule)
        plan.updated_at = datetime.utcnow()
        self.db.commit()

        row = next(row for row in rows if row.week_number == week_number)
        self.db.refresh(row)
        return row

    # ---------- Week timeline ----------
    def get_weeks(self, project_id: UUID) -> list[int]:
        return self.timeline_for(self._require_project(project_id)).weeks

    def insert_week(self, project_id: UUID, position: int | None = None) -> list[int]:
        """Insert a week at ``position`` (append when omitted) for every plan of the project."""

        project = self._require_project(project_id)
        timeline = self.timeline_for(project)
        plans = self.repo.list_resource_plans(project.id)
        schedules = self._schedules(plans)

        try:
            if position is None:
                edit = timeline.append_week(schedules)
            else:
                edit = timeline.insert_week_at(position, schedules)
        except PlanningEngineError as exc:
            raise _engine_http_error(exc) from exc

        self._commit_timeline_edit(project, edit.timeline, edit.allocations)
        logger.info(
            "Inserted week at position %s in project %s (%d weeks, %d plans)",
            timeline.week_count if position is None else position,
            project.id,
            edit.timeline.week_count,
            len(plans),
        )
        return edit.weeks

    def remove_week(self, project_id: UUID, week_number: int) -> list[int]:
        project = self._require_project(project_id)
        timeline = self.timeline_for(project)
        plans = self.repo.list_resource_plans(project.id)
        schedules = self._schedules(plans)

        try:
            edit = timeline.remove_week(week_number, schedules)
        except WeekRemovalDeclinedError as exc:
            logger.warning("Declined removal of week %s in project %s: %s", week_number, project.id, exc.reason)
            raise _engine_http_error(exc) from exc

        self._commit_timeline_edit(project, edit.timeline, edit.allocations)
        logger.info("Removed week %s from project %s (%d weeks left)", week_number, project.id, len(edit.timeline))
        return edit.weeks

    def _commit_timeline_edit(
        self,
        project: Project,
        timeline: WeekTimeline,
        allocations: dict[UUID, dict[int, int]],
    ) -> None:
        try:
            for plan_id, schedule in allocations.items():
                self.repo.replace_schedule(plan_id, schedule)
            project.week_count = timeline.week_count
            project.updated_at = datetime.utcnow()
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Week timeline update violated allocation constraints.",
            ) from exc

    # ---------- Metrics ----------
    def plan_inputs(self, project: Project) -> list[tuple[ResourcePlan, dict[int, int], PlanInput]]:
        plans = self.repo.list_resource_plans(project.id)
        schedules = self._schedules(plans)
        return [
            (
                plan,
                schedules[plan.id],
                PlanInput(
                    int_hourly_rate=plan.int_hourly_rate,
                    client_hourly_rate=plan.client_hourly_rate,
                    allocations=schedules[plan.id],
                ),
            )
            for plan in plans
        ]

    def resource_plan_summary(self, project_id: UUID) -> dict[str, object]:
        project = self._require_project(project_id)
        weeks = self.timeline_for(project).weeks
        rows = self.plan_inputs(project)

        try:
            plan_rows = []
            for plan, schedule, plan_input in rows:
                metrics = summarize_plan(plan_input, weeks, project.exchange_rate)
                plan_rows.append(
                    {
                        **self.serialize_resource_plan(plan, schedule),
                        "int_daily_rate": _r2(metrics.int_daily_rate),
                        "client_daily_rate": _r2(metrics.client_daily_rate),
                        "margin_percent": (
                            None if metrics.margin_percent is None else _r2(metrics.margin_percent)
                        ),
                        "estimated_effort_hours": _r2(metrics.estimated_effort_hours),
                        "total_internal_cost": _r2(metrics.total_internal_cost),
                        "total_client_price": _r2(metrics.total_client_price),
                    }
                )
            totals = summarize_project([row[2] for row in rows], weeks, project.exchange_rate)
        except PlanningEngineError as exc:
            raise _engine_http_error(exc) from exc

        return {
            "project": self.serialize_project(project),
            "weeks": weeks,
            "resource_plans": plan_rows,
            "totals": {
                "total_effort_hours": _r2(totals.total_effort_hours),
                "total_internal_cost": _r2(totals.total_internal_cost),
                "total_client_price": _r2(totals.total_client_price),
                "margin_percent": _r2(totals.margin_percent),
            },
        }
