"""Repository helpers for projects, rate cards, resource lists and plans."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.models.entities import (
    Project,
    RateCard,
    ResourceList,
    ResourcePlan,
    WeeklyAllocation,
)


class ResourcePlanningRepository:
    """Persistence operations used by the resource planning service."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Projects ----------
    def list_projects(self) -> list[Project]:
        return self.db.scalars(select(Project).order_by(Project.created_at.asc(), Project.name.asc())).all()

    def first_project(self) -> Project | None:
        return self.db.scalar(select(Project).order_by(Project.created_at.asc()).limit(1))

    def get_project(self, project_id: UUID) -> Project | None:
        return self.db.scalar(select(Project).where(Project.id == project_id))

    def add_project(self, project: Project) -> Project:
        self.db.add(project)
        self.db.flush()
        return project

    # ---------- Rate cards ----------
    def list_rate_cards(self, project_id: UUID) -> list[RateCard]:
        return self.db.scalars(
            select(RateCard)
            .where(RateCard.project_id == project_id)
            .order_by(RateCard.discipline.asc(), RateCard.role.asc())
        ).all()

    def get_rate_card(self, rate_card_id: UUID) -> RateCard | None:
        return self.db.scalar(select(RateCard).where(RateCard.id == rate_card_id))

    def add_rate_cards(self, rate_cards: list[RateCard]) -> list[RateCard]:
        self.db.add_all(rate_cards)
        self.db.flush()
        return rate_cards

    def delete_rate_card(self, rate_card: RateCard) -> None:
        self.db.delete(rate_card)
        self.db.flush()

    def delete_rate_cards_for_project(self, project_id: UUID) -> int:
        result = self.db.execute(delete(RateCard).where(RateCard.project_id == project_id))
        self.db.flush()
        return int(result.rowcount or 0)

    # ---------- Resource lists ----------
    def list_resource_lists(self, project_id: UUID) -> list[ResourceList]:
        return self.db.scalars(
            select(ResourceList)
            .where(ResourceList.project_id == project_id)
            .order_by(ResourceList.role.asc(), ResourceList.created_at.asc())
        ).all()

    def get_resource_list(self, resource_list_id: UUID) -> ResourceList | None:
        return self.db.scalar(select(ResourceList).where(ResourceList.id == resource_list_id))

    def add_resource_list(self, resource_list: ResourceList) -> ResourceList:
        self.db.add(resource_list)
        self.db.flush()
        return resource_list

    def delete_resource_list(self, resource_list: ResourceList) -> None:
        self.db.delete(resource_list)
        self.db.flush()

    # ---------- Resource plans ----------
    def list_resource_plans(self, project_id: UUID) -> list[ResourcePlan]:
        return self.db.scalars(
            select(ResourcePlan)
            .where(ResourcePlan.project_id == project_id)
            .order_by(ResourcePlan.sequence_no.asc(), ResourcePlan.created_at.asc())
        ).all()

    def get_resource_plan(self, resource_plan_id: UUID) -> ResourcePlan | None:
        return self.db.scalar(select(ResourcePlan).where(ResourcePlan.id == resource_plan_id))

    def next_plan_sequence_no(self, project_id: UUID) -> int:
        current = self.db.scalar(
            select(func.max(ResourcePlan.sequence_no)).where(ResourcePlan.project_id == project_id)
        )
        return 0 if current is None else int(current) + 1

    def add_resource_plan(self, resource_plan: ResourcePlan) -> ResourcePlan:
        self.db.add(resource_plan)
        self.db.flush()
        return resource_plan

    def delete_resource_plan(self, resource_plan: ResourcePlan) -> None:
        self.db.execute(delete(WeeklyAllocation).where(WeeklyAllocation.resource_plan_id == resource_plan.id))
        self.db.delete(resource_plan)
        self.db.flush()

    # ---------- Weekly allocations ----------
    def list_allocations(self, resource_plan_id: UUID) -> list[WeeklyAllocation]:
        return self.db.scalars(
            select(WeeklyAllocation)
            .where(WeeklyAllocation.resource_plan_id == resource_plan_id)
            .order_by(WeeklyAllocation.week_number.asc())
        ).all()

    def list_allocations_for_plans(self, resource_plan_ids: list[UUID]) -> list[WeeklyAllocation]:
        if not resource_plan_ids:
            return []
        return self.db.scalars(
            select(WeeklyAllocation)
            .where(WeeklyAllocation.resource_plan_id.in_(resource_plan_ids))
            .order_by(WeeklyAllocation.resource_plan_id.asc(), WeeklyAllocation.week_number.asc())
        ).all()

    def replace_schedule(self, resource_plan_id: UUID, schedule: dict[int, int]) -> list[WeeklyAllocation]:
        """Make the plan's allocation rows equal to ``schedule`` (week number -> percent).

        Rows keep their week number; only values change, rows outside the
        schedule are deleted and missing weeks are created.
        """

        rows = {row.week_number: row for row in self.list_allocations(resource_plan_id)}
        for week_number, row in rows.items():
            if week_number not in schedule:
                self.db.delete(row)

        result: list[WeeklyAllocation] = []
        for week_number in sorted(schedule):
            row = rows.get(week_number)
            if row is None:
                row = WeeklyAllocation(
                    resource_plan_id=resource_plan_id,
                    week_number=week_number,
                    allocation=schedule[week_number],
                )
                self.db.add(row)
            else:
                row.allocation = schedule[week_number]
            result.append(row)

        self.db.flush()
        return result
