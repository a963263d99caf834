"""Project settings endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.models.entities import ClientCurrency
from app.services.resource_planning_service import (
    ProjectCreateData,
    ProjectUpdateData,
    ResourcePlanningService,
)

router = APIRouter(tags=["projects"])


class ProjectCreatePayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    days_in_fte: int = Field(default=20, ge=1)
    client_currency: ClientCurrency = ClientCurrency.EUR
    exchange_rate: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    default_margin: float = Field(default=0.0, ge=0, lt=100, allow_inf_nan=False)
    week_count: int = Field(default=8, ge=1)


class ProjectUpdatePayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    days_in_fte: int | None = Field(default=None, ge=1)
    client_currency: ClientCurrency | None = None
    exchange_rate: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    default_margin: float | None = Field(default=None, ge=0, lt=100, allow_inf_nan=False)


def _planning_service(db: Session) -> ResourcePlanningService:
    return ResourcePlanningService(db)


@router.get("/projects")
def list_projects(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_project(project) for project in service.list_projects()]}


@router.post("/projects", status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.create_project(
        ProjectCreateData(
            name=payload.name,
            description=payload.description,
            days_in_fte=payload.days_in_fte,
            client_currency=payload.client_currency,
            exchange_rate=payload.exchange_rate,
            default_margin=payload.default_margin,
            week_count=payload.week_count,
        )
    )
    return service.serialize_project(project)


@router.get("/projects/default")
def get_default_project(db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    project = service.ensure_default_project()
    return service.serialize_project(project)


@router.get("/projects/{project_id}")
def get_project(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    return service.project_detail(project_id)


@router.patch("/projects/{project_id}")
@router.put("/projects/{project_id}")
def update_project(
    project_id: UUID,
    payload: ProjectUpdatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    project = service.update_project(
        project_id,
        ProjectUpdateData(
            name=payload.name,
            description=payload.description,
            days_in_fte=payload.days_in_fte,
            client_currency=payload.client_currency,
            exchange_rate=payload.exchange_rate,
            default_margin=payload.default_margin,
        ),
    )
    return service.serialize_project(project)
