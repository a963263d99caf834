"""Rate card endpoints, including bulk create and spreadsheet import."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.resource_planning_service import (
    RATE_CARD_REGION_FIELDS,
    RateCardData,
    RateCardUpdateData,
    ResourcePlanningService,
)
from app.services.spreadsheet_service import SpreadsheetService

router = APIRouter(tags=["rate-cards"])


class RateCardPayload(BaseModel):
    role: str = Field(min_length=1, max_length=255)
    naming_in_pm: str | None = Field(default=None, max_length=255)
    discipline: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    ukraine: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    eastern_europe: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    asia_ge: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    asia_arm_kz: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    latam: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    mexico: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    india: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    new_york: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    london: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    def to_data(self) -> RateCardData:
        return RateCardData(
            role=self.role,
            naming_in_pm=self.naming_in_pm,
            discipline=self.discipline,
            description=self.description,
            region_rates={region: getattr(self, region) for region in RATE_CARD_REGION_FIELDS},
        )


class RateCardUpdatePayload(BaseModel):
    role: str | None = Field(default=None, max_length=255)
    naming_in_pm: str | None = Field(default=None, max_length=255)
    discipline: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    ukraine: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    eastern_europe: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    asia_ge: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    asia_arm_kz: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    latam: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    mexico: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    india: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    new_york: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    london: float | None = Field(default=None, ge=0, allow_inf_nan=False)


def _planning_service(db: Session) -> ResourcePlanningService:
    return ResourcePlanningService(db)


@router.get("/projects/{project_id}/rate-cards")
def list_rate_cards(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _planning_service(db)
    return {"items": [service.serialize_rate_card(row) for row in service.list_rate_cards(project_id)]}


@router.post("/projects/{project_id}/rate-cards", status_code=status.HTTP_201_CREATED)
def create_rate_card(
    project_id: UUID,
    payload: RateCardPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    rate_card = service.create_rate_card(project_id, payload.to_data())
    return service.serialize_rate_card(rate_card)


@router.post("/projects/{project_id}/rate-cards/bulk", status_code=status.HTTP_201_CREATED)
def create_rate_cards_bulk(
    project_id: UUID,
    payload: list[RateCardPayload],
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    created = service.bulk_create_rate_cards(project_id, [row.to_data() for row in payload])
    return {
        "message": f"Successfully created {len(created)} rate cards",
        "count": len(created),
    }


@router.post("/projects/{project_id}/rate-cards/import", status_code=status.HTTP_201_CREATED)
def import_rate_cards(
    project_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = SpreadsheetService(db)
    created = service.import_rate_cards(project_id, file.filename or "", file.file.read())
    return {
        "count": len(created),
        "items": [service.planning.serialize_rate_card(row) for row in created],
    }


@router.delete("/projects/{project_id}/rate-cards")
def delete_project_rate_cards(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _planning_service(db)
    deleted = service.delete_project_rate_cards(project_id)
    return {"message": f"{deleted} rate cards deleted", "count": deleted}


@router.patch("/rate-cards/{rate_card_id}")
@router.put("/rate-cards/{rate_card_id}")
def update_rate_card(
    rate_card_id: UUID,
    payload: RateCardUpdatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _planning_service(db)
    rate_card = service.update_rate_card(
        rate_card_id,
        RateCardUpdateData(
            role=payload.role,
            naming_in_pm=payload.naming_in_pm,
            discipline=payload.discipline,
            description=payload.description,
            region_rates={
                region: getattr(payload, region)
                for region in RATE_CARD_REGION_FIELDS
                if getattr(payload, region) is not None
            },
        ),
    )
    return service.serialize_rate_card(rate_card)


@router.delete("/rate-cards/{rate_card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rate_card(rate_card_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    service = _planning_service(db)
    service.delete_rate_card(rate_card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
