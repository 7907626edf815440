"""Report router: listing, statistics, reference data and CRUD for TDP reports."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query

from app.core.dependencies import ReferenceDep, SettingsDep, StoreDep
from app.exceptions import NotFoundError
from app.models.analytics import ReportStats
from app.models.enums import ReportStatus
from app.models.reference import ReportTemplate, TDPInfo
from app.models.report import (
    CreateReportParams,
    GetReportsParams,
    OperationResult,
    Report,
    ReportUpdate,
    UpdateReportParams,
)
from app.services import report as report_service
from app.utils.validation import ensure_date_range

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/", response_model=list[Report])
async def list_reports(
    store: StoreDep,
    settings: SettingsDep,
    organization_id: str,
    assigned_to: str | None = None,
    status: Annotated[list[ReportStatus] | None, Query()] = None,
    category: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[Report]:
    """
    List an organization's reports, newest first.

    ## Query Parameters

    - `organization_id` (string, required): Organization to list.
    - `assigned_to` (string, optional): Only reports assigned to this leader.
    - `status` (repeatable, optional): Only reports in one of these statuses, e.g. `?status=pending&status=in_progress`.
    - `category` (string, optional): Only reports of this category.
    - `date_from` / `date_to` (ISO 8601, optional): Inclusive bounds on creation time.
    - `limit` (integer, optional): Page size, defaults to `REPORTS_DEFAULT_LIMIT`.

    The date bounds are applied to the page after it is fetched, so a narrow
    range can return fewer than `limit` reports even when more exist.

    A store failure yields an empty list, not an error.

    Raises:
        `422 ValidationError`: If `date_from` is after `date_to`.
    """
    ensure_date_range(date_from, date_to)
    params = GetReportsParams(
        organization_id=organization_id,
        assigned_to=assigned_to,
        status=status,
        category=category,
        date_from=date_from,
        date_to=date_to,
        limit=limit or settings.REPORTS_DEFAULT_LIMIT,
    )
    return await report_service.get_reports(store, params)


@router.get("/stats", response_model=ReportStats)
async def read_report_stats(
    store: StoreDep,
    settings: SettingsDep,
    organization_id: str,
    assigned_to: str | None = None,
) -> ReportStats:
    """
    Aggregate statistics for an organization, optionally for one leader.

    ## Example Response

    ```json
    {
      "total_reports": 4,
      "completed_reports": 2,
      "pending_reports": 2,
      "overdue_reports": 1,
      "completion_rate": 50.0,
      "average_completion_time": 4.0,
      "monthly_stats": [
        {"month": "2026-05", "total_reports": 0, "completed_reports": 0, "completion_rate": 0, "average_completion_time": 0}
      ]
    }
    ```

    `monthly_stats` holds one entry per trailing month, oldest first. A store
    failure yields zeroed stats with an empty `monthly_stats`.
    """
    return await report_service.get_report_stats(
        store, organization_id, assigned_to, months=settings.MONTHLY_STATS_MONTHS
    )


@router.get("/tdp", response_model=list[TDPInfo])
async def list_tdp_units(reference: ReferenceDep, organization_id: str) -> list[TDPInfo]:
    """List the reporting units (TDP) of an organization."""
    return await report_service.get_tdp_list(reference, organization_id)


@router.get("/templates", response_model=list[ReportTemplate])
async def list_report_templates(reference: ReferenceDep) -> list[ReportTemplate]:
    """List the active report form templates."""
    return await reference.report_templates()


@router.get("/{report_id}", response_model=Report)
async def read_report(store: StoreDep, report_id: str) -> Report:
    """
    Retrieve one report.

    Raises:
        `404 NotFoundError`: If the report does not exist or could not be read.
    """
    report = await report_service.get_report(store, report_id)
    if report is None:
        raise NotFoundError("Report", report_id)
    return report


@router.post("/", response_model=OperationResult, status_code=201)
async def create_report(store: StoreDep, report_in: CreateReportParams) -> OperationResult:
    """
    Assign a new report to a TDP leader.

    The report starts `pending` with an empty submission history. The body
    carries `success: false` when the store rejected the write.
    """
    return OperationResult(success=await report_service.create_report(store, report_in))


@router.patch("/{report_id}", response_model=OperationResult)
async def update_report(
    store: StoreDep, report_id: str, report_update: ReportUpdate
) -> OperationResult:
    """
    Partially update a report.

    Only the fields present in the body are written. Setting `status` to
    `approved` or `submitted` stamps `completed_at` server-side.
    """
    params = UpdateReportParams(id=report_id, **report_update.model_dump(exclude_unset=True))
    return OperationResult(success=await report_service.update_report(store, params))


@router.delete("/{report_id}", response_model=OperationResult)
async def delete_report(store: StoreDep, report_id: str) -> OperationResult:
    return OperationResult(success=await report_service.delete_report(store, report_id))
