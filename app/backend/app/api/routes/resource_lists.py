"""Resource list endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.models.entities import RateCardRegion
from app.services.resource_planning_service import (
    ResourceListCreateData,
    ResourceListFromRateCardData,
    ResourceListUpdateData,
    ResourcePlanningService,
)

router = APIRouter(tags=["resource-lists"])


class ResourceListCreatePayload(BaseModel):
    role: str = Field(min_length=1, max_length=255)
    int_rate: float = Field(ge=0, allow_inf_nan=False)
    client_role: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class ResourceListUpdatePayload(BaseModel):
    role: str | None = Field(default=None, max_length=255)
    int_rate: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    client_role: str | None = Field(default=None, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class ResourceListFromRateCardPayload(BaseModel):
    rate_card_id: UUID
    region: RateCardRegion
    name: str | None = Field(default=None, max_length=255)
    client_role: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)


def _planning_service(db: Session) -> ResourcePlanningService:
    return ResourcePlanningService(db)


@router.get("/projects/{project_id}/resource-lists")
def list_resource_lists(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_resource_list(row) for row in service.list_resource_lists(project_id)]}


@router.post("/projects/{project_id}/resource-lists", status_code=status.HTTP_201_CREATED)
def create_resource_list(
    project_id: UUID,
    payload: ResourceListCreatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    resource_list = service.create_resource_list(
        project_id,
        ResourceListCreateData(
            role=payload.role,
            int_rate=payload.int_rate,
            client_role=payload.client_role,
            name=payload.name,
            location=payload.location,
            description=payload.description,
        ),
    )
    return service.serialize_resource_list(resource_list)


@router.post("/projects/{project_id}/resource-lists/from-rate-card", status_code=status.HTTP_201_CREATED)
def create_resource_list_from_rate_card(
    project_id: UUID,
    payload: ResourceListFromRateCardPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    resource_list = service.create_resource_list_from_rate_card(
        project_id,
        ResourceListFromRateCardData(
            rate_card_id=payload.rate_card_id,
            region=payload.region,
            name=payload.name,
            client_role=payload.client_role,
            location=payload.location,
        ),
    )
    return service.serialize_resource_list(resource_list)


@router.patch("/resource-lists/{resource_list_id}")
@router.put("/resource-lists/{resource_list_id}")
def update_resource_list(
    resource_list_id: UUID,
    payload: ResourceListUpdatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    resource_list = service.update_resource_list(
        resource_list_id,
        ResourceListUpdateData(
            role=payload.role,
            int_rate=payload.int_rate,
            client_role=payload.client_role,
            name=payload.name,
            location=payload.location,
            description=payload.description,
        ),
    )
    return service.serialize_resource_list(resource_list)


@router.delete("/resource-lists/{resource_list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource_list(resource_list_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.delete_resource_list(resource_list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
