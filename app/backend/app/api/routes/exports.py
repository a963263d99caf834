"""Resource plan export endpoint."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.dependencies import get_db_session
from app.services.spreadsheet_service import SpreadsheetService

router = APIRouter(tags=["exports"])


def _service(db: Session) -> SpreadsheetService:
    return SpreadsheetService(db)


@router.get("/projects/{project_id}/resource-plan/export")
def export_resource_plan(
    project_id: UUID,
    format: str = Query(default="xlsx"),
    db: Session = Depends(get_db_session),
) -> Response:
    service = _service(db)
    exported = service.export_resource_plan(project_id, format)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
