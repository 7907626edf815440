"""In-memory cache of report state for one client session.

The slice keeps the last fetched report list, stats, TDP list and the
selected report, and exposes actions that go through the report access layer
plus pure selectors over the cached list.

Two cache-update strategies coexist on purpose:

* create invalidates and re-fetches (no optimistic insert), so the list is
  stale until the re-fetch completes;
* update patches the cached report locally and never re-fetches, so values
  the store computes on write (`completed_at`) only appear after the next
  full fetch.

Overlapping calls to the same action are not serialized; the cache holds
whichever result lands last.
"""

from datetime import datetime

from loguru import logger

from app.models.analytics import ReportStats
from app.models.enums import ReportStatus
from app.models.reference import TDPInfo
from app.models.report import (
    CreateReportParams,
    GetReportsParams,
    Report,
    UpdateReportParams,
)
from app.services import report as report_service
from app.services.analytics import is_overdue
from app.services.reference import ReferenceData
from app.store.interfaces import DocumentStore

# Selector notion of "pending": work not yet handed in
SELECTOR_PENDING_STATUSES = frozenset({ReportStatus.PENDING, ReportStatus.IN_PROGRESS})


class ReportSlice:
    def __init__(self, store: DocumentStore, reference: ReferenceData):
        self._store = store
        self._reference = reference

        self.reports: list[Report] = []
        self.loading_reports = False
        self.report_stats: ReportStats | None = None
        self.loading_stats = False
        self.tdp_list: list[TDPInfo] = []
        self.loading_tdp = False
        self.selected_report: Report | None = None

    # Actions

    async def get_reports(self, params: GetReportsParams) -> None:
        """Replace the cached list with a fresh fetch; keep the old list if the fetch raises."""
        self.loading_reports = True
        try:
            self.reports = await report_service.get_reports(self._store, params)
        except Exception as e:
            logger.error(f"Error fetching reports: {e}")
        finally:
            self.loading_reports = False

    async def create_report(self, params: CreateReportParams) -> bool:
        """
        Create a report, then re-fetch the organization's reports if anything is cached.

        Returns:
            bool: Whether the report was created.
        """
        try:
            success = await report_service.create_report(self._store, params)
            if success and self.reports:
                await self.get_reports(GetReportsParams(organization_id=params.organization_id))
            return success
        except Exception as e:
            logger.error(f"Error creating report: {e}")
            return False

    async def update_report(self, params: UpdateReportParams) -> bool:
        """
        Update a report, then patch the cached copy with the sent fields and a local `updated_at`.

        Returns:
            bool: Whether the update was accepted.
        """
        try:
            success = await report_service.update_report(self._store, params)
            if success:
                changes = params.model_dump(exclude_unset=True, exclude={"id"})
                changes["updated_at"] = datetime.now()
                self.reports = [
                    report.model_copy(update=changes) if report.id == params.id else report
                    for report in self.reports
                ]
            return success
        except Exception as e:
            logger.error(f"Error updating report: {e}")
            return False

    async def delete_report(self, report_id: str) -> bool:
        try:
            success = await report_service.delete_report(self._store, report_id)
            if success:
                self.reports = [r for r in self.reports if r.id != report_id]
            return success
        except Exception as e:
            logger.error(f"Error deleting report: {e}")
            return False

    async def get_report_stats(
        self, organization_id: str, assigned_to: str | None = None
    ) -> None:
        self.loading_stats = True
        try:
            self.report_stats = await report_service.get_report_stats(
                self._store, organization_id, assigned_to
            )
        except Exception as e:
            logger.error(f"Error fetching report stats: {e}")
        finally:
            self.loading_stats = False

    async def get_tdp_list(self, organization_id: str) -> None:
        self.loading_tdp = True
        try:
            self.tdp_list = await report_service.get_tdp_list(self._reference, organization_id)
        except Exception as e:
            logger.error(f"Error fetching TDP list: {e}")
        finally:
            self.loading_tdp = False

    def set_selected_report(self, report: Report | None) -> None:
        self.selected_report = report

    # Selectors

    def _for_assignee(self, assigned_to: str | None) -> list[Report]:
        if not assigned_to:
            return self.reports
        return [r for r in self.reports if r.assigned_to == assigned_to]

    def get_pending_reports_count(self, assigned_to: str | None = None) -> int:
        """Count cached reports still pending or in progress."""
        return sum(
            1 for r in self._for_assignee(assigned_to) if r.status in SELECTOR_PENDING_STATUSES
        )

    def get_overdue_reports_count(self, assigned_to: str | None = None) -> int:
        """Count cached reports past due and not approved, as of now."""
        now = datetime.now()
        return sum(1 for r in self._for_assignee(assigned_to) if is_overdue(r, now))

    def get_reports_by_status(
        self, status: ReportStatus, assigned_to: str | None = None
    ) -> list[Report]:
        return [r for r in self._for_assignee(assigned_to) if r.status == status]
