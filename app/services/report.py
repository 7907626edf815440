"""Report access layer.

Translates report queries and commands into document store calls, normalizes
stored documents into Report values and computes aggregate statistics.

Every function is fail-soft: store errors are logged and counted, and the
caller receives an empty list, None, zeroed stats or False instead.
"""

from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.models.analytics import ReportStats
from app.models.enums import COMPLETING_REPORT_STATUSES, ReportStatus
from app.models.reference import TDPInfo
from app.models.report import (
    CreateReportParams,
    GetReportsParams,
    Report,
    UpdateReportParams,
)
from app.services.analytics import MONTHLY_STATS_MONTHS, compute_report_stats
from app.services.reference import ReferenceData
from app.services.utils import run_store_call, unwrap
from app.store.interfaces import Document, DocumentStore, FieldFilter
from app.store.timestamps import (
    from_store_timestamp,
    now_store_timestamp,
    to_store_timestamp,
)

REPORTS_COLLECTION = "reports"
_TEXT_DEFAULTS = ("title", "description", "assigned_to", "assigned_by", "category", "tdp_name")


def normalize_report_document(document: Document, now: datetime | None = None) -> Report:
    """
    Convert a stored report document into a Report.

    This is the only place defaults are applied: a missing `due_date` or
    `created_at` becomes `now`, missing text fields become empty strings, and
    store timestamps become naive local datetimes.

    Parameters:
        document: Raw document as returned by the store, including its `id`.
        now: Fallback instant for missing timestamps; defaults to the current time.

    Returns:
        Report: The normalized report.

    Raises:
        pydantic.ValidationError: If the document holds values no default can repair (e.g. an unknown status).
    """
    now = now or datetime.now()
    data: dict[str, Any] = dict(document)
    for key in _TEXT_DEFAULTS:
        if data.get(key) is None:
            data[key] = ""
    data["created_at"] = from_store_timestamp(data.get("created_at")) or now
    data["due_date"] = from_store_timestamp(data.get("due_date")) or now
    data["completed_at"] = from_store_timestamp(data.get("completed_at"))
    data.pop("updated_at", None)
    data["attachments"] = data.get("attachments") or []
    data["submission_history"] = [
        {**entry, "submitted_at": from_store_timestamp(entry.get("submitted_at")) or now}
        for entry in data.get("submission_history") or []
        if isinstance(entry, dict)
    ]
    return Report.model_validate(data)


def _normalize_all(documents: list[Document]) -> list[Report]:
    now = datetime.now()
    reports = []
    for document in documents:
        try:
            reports.append(normalize_report_document(document, now))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed report document {document.get('id')}: {e}")
    return reports


def _organization_filters(organization_id: str, assigned_to: str | None) -> list[FieldFilter]:
    filters = [FieldFilter("organization_id", "==", organization_id)]
    if assigned_to:
        filters.append(FieldFilter("assigned_to", "==", assigned_to))
    return filters


def _as_local(value: datetime) -> datetime:
    return from_store_timestamp(value) or value


async def get_reports(store: DocumentStore, params: GetReportsParams) -> list[Report]:
    """
    List reports for an organization, newest first.

    Organization, assignee, category and status predicates run in the store.
    `date_from`/`date_to` (inclusive, on `created_at`) are applied afterwards to
    the page of at most `limit` reports, so a narrow date range over a large
    organization can come back short.

    Parameters:
        store: Document store.
        params: Query parameters.

    Returns:
        list[Report]: Matching reports, or an empty list if the store fails.
    """
    filters = _organization_filters(params.organization_id, params.assigned_to)
    if params.category:
        filters.append(FieldFilter("category", "==", params.category))
    if params.status:
        filters.append(FieldFilter("status", "in", [s.value for s in params.status]))

    async def fetch() -> list[Report]:
        documents = await store.query(
            REPORTS_COLLECTION,
            filters,
            order_by="created_at",
            descending=True,
            limit=params.limit,
        )
        reports = _normalize_all(documents)
        if params.date_from:
            date_from = _as_local(params.date_from)
            reports = [r for r in reports if r.created_at >= date_from]
        if params.date_to:
            date_to = _as_local(params.date_to)
            reports = [r for r in reports if r.created_at <= date_to]
        return reports

    return unwrap("get_reports", await run_store_call(fetch, default=[]))


async def get_report(store: DocumentStore, report_id: str) -> Report | None:
    """
    Fetch one report by id.

    Returns:
        Report | None: The normalized report, or None if it does not exist or the store fails.
    """

    async def fetch() -> Report | None:
        document = await store.get(REPORTS_COLLECTION, report_id)
        if document is None:
            return None
        return normalize_report_document(document)

    return unwrap("get_report", await run_store_call(fetch, default=None))


async def create_report(store: DocumentStore, params: CreateReportParams) -> bool:
    """
    Insert a new report in the `pending` state with an empty submission history.

    Returns:
        bool: True once the store accepted the insert, False on failure.
    """
    data = params.model_dump(mode="json", exclude={"due_date"})
    data.update(
        created_at=now_store_timestamp(),
        due_date=to_store_timestamp(params.due_date),
        status=ReportStatus.PENDING.value,
        submission_history=[],
    )

    async def write() -> bool:
        report_id = await store.add(REPORTS_COLLECTION, data)
        logger.info(f"Created report {report_id} for organization {params.organization_id}")
        return True

    return unwrap("create_report", await run_store_call(write, default=False))


async def update_report(store: DocumentStore, params: UpdateReportParams) -> bool:
    """
    Apply a partial update to a report.

    Only fields the caller set are written. Moving the status to `approved` or
    `submitted` also stamps `completed_at` with the current time, overriding
    any value the caller might have sent.

    Returns:
        bool: True once the store accepted the update, False on failure (including an unknown id).
    """
    changes = params.model_dump(mode="json", exclude_unset=True, exclude={"id"})
    if params.status in COMPLETING_REPORT_STATUSES:
        changes["completed_at"] = now_store_timestamp()

    async def write() -> bool:
        await store.update(REPORTS_COLLECTION, params.id, changes)
        return True

    return unwrap("update_report", await run_store_call(write, default=False))


async def delete_report(store: DocumentStore, report_id: str) -> bool:
    """
    Remove a report.

    Returns:
        bool: True once the store removed it, False on failure (including an unknown id).
    """

    async def write() -> bool:
        await store.delete(REPORTS_COLLECTION, report_id)
        logger.info(f"Deleted report {report_id}")
        return True

    return unwrap("delete_report", await run_store_call(write, default=False))


async def get_report_stats(
    store: DocumentStore,
    organization_id: str,
    assigned_to: str | None = None,
    *,
    months: int = MONTHLY_STATS_MONTHS,
) -> ReportStats:
    """
    Compute statistics over every report of an organization.

    Unlike get_reports this reads the whole set, without a page limit.

    Parameters:
        store: Document store.
        organization_id: Organization to aggregate.
        assigned_to: Optional leader id to restrict the set to their reports.
        months: Number of trailing monthly buckets.

    Returns:
        ReportStats: Aggregates, or zeroed stats with no monthly buckets if the store fails.
    """

    async def fetch() -> ReportStats:
        documents = await store.query(
            REPORTS_COLLECTION, _organization_filters(organization_id, assigned_to)
        )
        return compute_report_stats(_normalize_all(documents), datetime.now(), months)

    return unwrap("get_report_stats", await run_store_call(fetch, default=ReportStats()))


async def get_tdp_list(reference: ReferenceData, organization_id: str) -> list[TDPInfo]:
    """
    List the reporting units of an organization.

    Returns:
        list[TDPInfo]: Units from the reference data provider, or an empty list on failure.
    """

    async def fetch() -> list[TDPInfo]:
        return await reference.tdp_units(organization_id)

    return unwrap("get_tdp_list", await run_store_call(fetch, default=[]))
