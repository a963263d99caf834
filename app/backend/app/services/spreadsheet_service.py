"""Rate card import and resource plan export for spreadsheet files."""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass
from uuid import UUID
from zipfile import BadZipFile

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.engine import PlanningEngineError, summarize_plan, summarize_project
from app.models.entities import RateCard
from app.services.resource_planning_service import (
    RATE_CARD_REGION_FIELDS,
    RateCardData,
    ResourcePlanningService,
)

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Normalized header -> rate card field.
RATE_CARD_HEADERS: dict[str, str] = {
    "role": "role",
    "naminginpm": "naming_in_pm",
    "discipline": "discipline",
    "description": "description",
    **{region.replace("_", ""): region for region in RATE_CARD_REGION_FIELDS},
}


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


def _normalize_header(value: object) -> str:
    return re.sub(r"[^a-z0-9]", "", str(value or "").lower())


class InvalidRateError(ValueError):
    """Raised for a rate cell that parses to a negative or non-finite number."""


def _parse_rate(value: object) -> float:
    """Parse a rate cell; blanks and text that is not a number become 0."""

    if value in (None, ""):
        return 0.0
    try:
        rate = float(str(value).replace(",", ".").strip())
    except ValueError:
        return 0.0
    if not math.isfinite(rate) or rate < 0:
        raise InvalidRateError(f"{value!r} is not a finite rate greater or equal zero")
    return rate


def _unreadable_file(filename: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"{filename} could not be read as a rate card file.",
    )


def _read_rows(filename: str, content: bytes) -> list[list[object]]:
    lowered = filename.lower()
    if lowered.endswith(".csv"):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise _unreadable_file(filename) from exc
        return [list(row) for row in csv.reader(io.StringIO(text))]
    if lowered.endswith(".xlsx"):
        from openpyxl import load_workbook
        from openpyxl.utils.exceptions import InvalidFileException

        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (BadZipFile, InvalidFileException, KeyError) as exc:
            raise _unreadable_file(filename) from exc
        try:
            sheet = workbook.active
            return [list(row) for row in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail="file must be one of: .csv, .xlsx.",
    )


def parse_rate_card_rows(filename: str, content: bytes) -> list[RateCardData]:
    """Turn the first sheet of a rate card file into rate card rows.

    Unknown columns are ignored, rows without a role are skipped and
    rates that are not numbers become 0. Negative or non-finite rates
    reject the whole file with the offending row number.
    """

    rows = _read_rows(filename, content)
    if not rows:
        return []

    columns = [RATE_CARD_HEADERS.get(_normalize_header(cell)) for cell in rows[0]]
    if "role" not in columns:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Rate card file must contain a Role column.",
        )

    parsed: list[RateCardData] = []
    # Row numbers are 1-based and include the header row, as a spreadsheet shows them.
    for row_number, raw in enumerate(rows[1:], start=2):
        record = {column: cell for column, cell in zip(columns, raw) if column is not None}
        role = str(record.get("role") or "").strip()
        if not role:
            continue
        try:
            region_rates = {region: _parse_rate(record.get(region)) for region in RATE_CARD_REGION_FIELDS}
        except InvalidRateError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Row {row_number}: {exc}.",
            ) from exc
        parsed.append(
            RateCardData(
                role=role,
                naming_in_pm=str(record.get("naming_in_pm") or "") or None,
                discipline=str(record.get("discipline") or "") or None,
                description=str(record.get("description") or "") or None,
                region_rates=region_rates,
            )
        )
    return parsed


class SpreadsheetService:
    """File-level import and export on top of the resource planning service."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.planning = ResourcePlanningService(db)

    def import_rate_cards(self, project_id: UUID, filename: str, content: bytes) -> list[RateCard]:
        self.planning.get_project(project_id)
        rows = parse_rate_card_rows(filename, content)
        if not rows:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Rate card file contains no rows with a role.",
            )
        logger.info("Importing %d rate cards from %s into project %s", len(rows), filename, project_id)
        return self.planning.bulk_create_rate_cards(project_id, rows)

    def _resource_plan_table(self, project_id: UUID) -> list[list[object]]:
        project = self.planning.get_project(project_id)
        weeks = self.planning.timeline_for(project).weeks
        rows = self.planning.plan_inputs(project)
        symbol = project.client_currency.symbol

        header: list[object] = [
            "Role",
            "Client role",
            "Name",
            "Int hourly rate, $/h",
            "Int daily rate, $",
            f"Hourly rate, {symbol}/h",
            f"Daily rate, {symbol}",
            "Margin, %",
            *[f"Week {week}" for week in weeks],
            "Total int cost, $",
            f"Total price, {symbol}",
            "Estimated efforts, h",
        ]
        table: list[list[object]] = [header]

        try:
            for plan, schedule, plan_input in rows:
                metrics = summarize_plan(plan_input, weeks, project.exchange_rate)
                table.append(
                    [
                        plan.role,
                        plan.client_role or "",
                        plan.name or "",
                        round(plan.int_hourly_rate, 2),
                        round(metrics.int_daily_rate, 2),
                        round(plan.client_hourly_rate, 2),
                        round(metrics.client_daily_rate, 2),
                        "-" if metrics.margin_percent is None else round(metrics.margin_percent, 1),
                        *[schedule.get(week, 0) for week in weeks],
                        round(metrics.total_internal_cost, 2),
                        round(metrics.total_client_price, 2),
                        round(metrics.estimated_effort_hours, 1),
                    ]
                )
            totals = summarize_project([row[2] for row in rows], weeks, project.exchange_rate)
        except PlanningEngineError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

        table.append(
            [
                "Total",
                "",
                "",
                "",
                "",
                "",
                "",
                round(totals.margin_percent, 1),
                *["" for _ in weeks],
                round(totals.total_internal_cost, 2),
                round(totals.total_client_price, 2),
                round(totals.total_effort_hours, 1),
            ]
        )
        return table

    def export_resource_plan(self, project_id: UUID, format_name: str) -> ExportFilePayload:
        normalized_format = format_name.strip().lower()
        if normalized_format not in {"csv", "xlsx"}:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="format must be one of: csv, xlsx.",
            )

        table = self._resource_plan_table(project_id)
        base_filename = f"resource-plan-{project_id}"

        if normalized_format == "csv":
            sio = io.StringIO()
            writer = csv.writer(sio)
            writer.writerows(table)
            return ExportFilePayload(
                media_type="text/csv; charset=utf-8",
                filename=f"{base_filename}.csv",
                content=sio.getvalue().encode("utf-8"),
            )

        # XLSX
        from openpyxl import Workbook

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "resource plan"
        for row in table:
            sheet.append(row)

        output = io.BytesIO()
        workbook.save(output)
        return ExportFilePayload(
            media_type=XLSX_MEDIA_TYPE,
            filename=f"{base_filename}.xlsx",
            content=output.getvalue(),
        )
