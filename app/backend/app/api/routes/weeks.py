"""Project week timeline endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.resource_planning_service import ResourcePlanningService

router = APIRouter(tags=["weeks"])


class WeekInsertPayload(BaseModel):
    # 0-based insertion point; omitted means append after the last week.
    position: int | None = None


def _planning_service(db: Session) -> ResourcePlanningService:
    return ResourcePlanningService(db)


@router.get("/projects/{project_id}/weeks")
def list_weeks(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, list[int]]:
    service = _planning_service(db)
    return {"weeks": service.get_weeks(project_id)}


@router.post("/projects/{project_id}/weeks")
def insert_week(
    project_id: UUID,
    payload: WeekInsertPayload | None = Body(default=None),
    db: Session = Depends(get_db_session),
) -> dict[str, list[int]]:
    service = _planning_service(db)
    position = None if payload is None else payload.position
    return {"weeks": service.insert_week(project_id, position)}


@router.delete("/projects/{project_id}/weeks/{week_number}")
def remove_week(project_id: UUID, week_number: int, db: Session = Depends(get_db_session)) -> dict[str, list[int]]:
    service = _planning_service(db)
    return {"weeks": service.remove_week(project_id, week_number)}
