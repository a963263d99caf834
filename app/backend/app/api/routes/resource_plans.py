"""Resource plan rows, their weekly allocations and computed metrics."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.resource_planning_service import (
    ResourcePlanCreateData,
    ResourcePlanningService,
    ResourcePlanUpdateData,
)

router = APIRouter(tags=["resource-plans"])


class WeeklyAllocationPayload(BaseModel):
    week_number: int
    # Raw grid input; clamped to an integer percent in [0, 100] on save.
    allocation: int | float | str | None = 0


class ResourcePlanCreatePayload(BaseModel):
    role: str = Field(default="", max_length=255)
    client_role: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    int_hourly_rate: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    client_hourly_rate: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    weekly_allocations: list[WeeklyAllocationPayload] = Field(default_factory=list)


class ResourcePlanUpdatePayload(BaseModel):
    role: str | None = Field(default=None, max_length=255)
    client_role: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    int_hourly_rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    client_hourly_rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    weekly_allocations: list[WeeklyAllocationPayload] | None = None


class AssignRolePayload(BaseModel):
    resource_list_id: UUID


class AllocationValuePayload(BaseModel):
    allocation: int | float | str | None


def _planning_service(db: Session) -> ResourcePlanningService:
    return ResourcePlanningService(db)


def _allocation_map(rows: list[WeeklyAllocationPayload]) -> dict[int, int | float | str | None]:
    return {row.week_number: row.allocation for row in rows}


@router.get("/projects/{project_id}/resource-plans")
def list_resource_plans(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": service.list_resource_plans(project_id)}


@router.post("/projects/{project_id}/resource-plans", status_code=status.HTTP_201_CREATED)
def create_resource_plan(
    project_id: UUID,
    payload: ResourcePlanCreatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    return service.create_resource_plan(
        project_id,
        ResourcePlanCreateData(
            role=payload.role,
            client_role=payload.client_role,
            name=payload.name,
            int_hourly_rate=payload.int_hourly_rate,
            client_hourly_rate=payload.client_hourly_rate,
            allocations=_allocation_map(payload.weekly_allocations),
        ),
    )


@router.get("/projects/{project_id}/resource-plan-summary")
def get_resource_plan_summary(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    return service.resource_plan_summary(project_id)


@router.get("/resource-plans/{resource_plan_id}")
def get_resource_plan(resource_plan_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    return service.get_resource_plan(resource_plan_id)


@router.patch("/resource-plans/{resource_plan_id}")
@router.put("/resource-plans/{resource_plan_id}")
def update_resource_plan(
    resource_plan_id: UUID,
    payload: ResourcePlanUpdatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    return service.update_resource_plan(
        resource_plan_id,
        ResourcePlanUpdateData(
            role=payload.role,
            client_role=payload.client_role,
            name=payload.name,
            int_hourly_rate=payload.int_hourly_rate,
            client_hourly_rate=payload.client_hourly_rate,
            allocations=(
                None if payload.weekly_allocations is None else _allocation_map(payload.weekly_allocations)
            ),
        ),
    )


@router.delete("/resource-plans/{resource_plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource_plan(resource_plan_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.delete_resource_plan(resource_plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/resource-plans/{resource_plan_id}/assign-role")
def assign_resource_plan_role(
    resource_plan_id: UUID,
    payload: AssignRolePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    return service.assign_role(resource_plan_id, payload.resource_list_id)


@router.get("/resource-plans/{resource_plan_id}/weekly-allocations")
def list_weekly_allocations(
    resource_plan_id: UUID,
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_allocation(row) for row in service.list_allocations(resource_plan_id)]}


@router.put("/resource-plans/{resource_plan_id}/weekly-allocations/{week_number}")
def set_weekly_allocation(
    resource_plan_id: UUID,
    week_number: int,
    payload: AllocationValuePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    row = service.set_allocation(resource_plan_id, week_number, payload.allocation)
    return service.serialize_allocation(row)
