"""Tests for the report state slice: actions, cache update strategies and selectors."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from app.exceptions import StoreReadError, StoreWriteError
from app.models.enums import ReportPriority, ReportStatus
from app.models.report import CreateReportParams, GetReportsParams, UpdateReportParams
from app.state.report_slice import ReportSlice


@pytest.fixture(name="report_slice")
def report_slice_fixture(store, reference) -> ReportSlice:
    return ReportSlice(store, reference)


def _create_params(**overrides) -> CreateReportParams:
    data = {
        "title": "Quarterly report",
        "assigned_to": "leader-1",
        "category": "quarterly",
        "organization_id": "org1",
        "priority": ReportPriority.HIGH,
        "due_date": datetime.now() + timedelta(days=7),
    }
    data.update(overrides)
    return CreateReportParams(**data)


class TestInitialState:
    def test_empty_cache(self, report_slice):
        assert report_slice.reports == []
        assert report_slice.report_stats is None
        assert report_slice.tdp_list == []
        assert report_slice.selected_report is None
        assert not report_slice.loading_reports
        assert not report_slice.loading_stats
        assert not report_slice.loading_tdp


class TestGetReports:
    @pytest.mark.asyncio
    async def test_replaces_cache(self, report_slice, add_report):
        add_report(title="First")
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))
        assert [r.title for r in report_slice.reports] == ["First"]

        add_report(title="Second", created_at=datetime.now() + timedelta(minutes=1))
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        assert [r.title for r in report_slice.reports] == ["Second", "First"]
        assert not report_slice.loading_reports

    @pytest.mark.asyncio
    async def test_store_failure_empties_cache(self, reference, report_factory):
        store = AsyncMock()
        store.query.side_effect = StoreReadError("query", "reports", "connection lost")
        report_slice = ReportSlice(store, reference)
        report_slice.reports = [report_factory(id="stale")]

        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        # The access layer answers a failed read with an empty list
        assert report_slice.reports == []
        assert not report_slice.loading_reports

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_cache_and_clears_flag(self, report_slice, report_factory):
        cached = [report_factory(id="kept")]
        report_slice.reports = cached

        with patch(
            "app.state.report_slice.report_service.get_reports",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        assert report_slice.reports == cached
        assert not report_slice.loading_reports

    @pytest.mark.asyncio
    async def test_loading_flag_set_during_fetch(self, report_slice):
        seen = []

        async def fake_get_reports(store, params):
            seen.append(report_slice.loading_reports)
            return []

        with patch("app.state.report_slice.report_service.get_reports", new=fake_get_reports):
            await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        assert seen == [True]
        assert not report_slice.loading_reports


class TestCreateReport:
    @pytest.mark.asyncio
    async def test_empty_cache_is_not_refetched(self, report_slice):
        assert await report_slice.create_report(_create_params())
        assert report_slice.reports == []

    @pytest.mark.asyncio
    async def test_non_empty_cache_is_refetched(self, report_slice, add_report):
        add_report(title="Existing", created_at=datetime.now() - timedelta(days=1))
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        assert await report_slice.create_report(_create_params(title="Fresh"))

        assert [r.title for r in report_slice.reports] == ["Fresh", "Existing"]
        fresh = report_slice.reports[0]
        assert fresh.status == ReportStatus.PENDING
        assert fresh.submission_history == []

    @pytest.mark.asyncio
    async def test_failure_leaves_cache_untouched(self, reference, report_factory):
        store = AsyncMock()
        store.add.side_effect = StoreWriteError("add", "reports", "disk full")
        report_slice = ReportSlice(store, reference)
        cached = [report_factory(id="kept")]
        report_slice.reports = cached

        assert not await report_slice.create_report(_create_params())

        assert report_slice.reports == cached
        assert not report_slice.loading_reports
        store.query.assert_not_called()


class TestUpdateReport:
    @pytest.mark.asyncio
    async def test_patches_cached_report_without_refetch(self, report_slice, add_report):
        report_id = add_report(status=ReportStatus.IN_PROGRESS.value)
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        with patch(
            "app.state.report_slice.report_service.get_reports", new=AsyncMock()
        ) as mock_get_reports:
            success = await report_slice.update_report(
                UpdateReportParams(id=report_id, status=ReportStatus.APPROVED, feedback="ok")
            )

        assert success
        mock_get_reports.assert_not_called()
        cached = report_slice.reports[0]
        assert cached.status == ReportStatus.APPROVED
        assert cached.feedback == "ok"
        assert cached.updated_at is not None
        # completed_at is stamped by the store write only, not the local patch
        assert cached.completed_at is None

    @pytest.mark.asyncio
    async def test_other_reports_untouched(self, report_slice, add_report):
        first = add_report(title="A")
        add_report(title="B", created_at=datetime.now() - timedelta(days=1))
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        await report_slice.update_report(UpdateReportParams(id=first, content="done"))

        by_title = {r.title: r for r in report_slice.reports}
        assert by_title["A"].content == "done"
        assert by_title["B"].content is None
        assert by_title["B"].updated_at is None

    @pytest.mark.asyncio
    async def test_unknown_id_fails_and_keeps_cache(self, report_slice, report_factory):
        cached = [report_factory(id="kept")]
        report_slice.reports = cached

        assert not await report_slice.update_report(
            UpdateReportParams(id="missing", status=ReportStatus.APPROVED)
        )
        assert report_slice.reports == cached


class TestDeleteReport:
    @pytest.mark.asyncio
    async def test_removes_only_that_report_in_order(self, report_slice, add_report):
        now = datetime.now()
        add_report(title="A", created_at=now)
        middle = add_report(title="B", created_at=now - timedelta(days=1))
        add_report(title="C", created_at=now - timedelta(days=2))
        await report_slice.get_reports(GetReportsParams(organization_id="org1"))

        assert await report_slice.delete_report(middle)

        assert [r.title for r in report_slice.reports] == ["A", "C"]

    @pytest.mark.asyncio
    async def test_unknown_id(self, report_slice, report_factory):
        report_slice.reports = [report_factory(id="kept")]

        assert not await report_slice.delete_report("missing")
        assert [r.id for r in report_slice.reports] == ["kept"]


class TestStatsAndTdp:
    @pytest.mark.asyncio
    async def test_get_report_stats(self, report_slice, add_report):
        add_report(status=ReportStatus.APPROVED.value)
        add_report(status=ReportStatus.PENDING.value)

        await report_slice.get_report_stats("org1")

        assert report_slice.report_stats.total_reports == 2
        assert report_slice.report_stats.completed_reports == 1
        assert not report_slice.loading_stats

    @pytest.mark.asyncio
    async def test_get_report_stats_for_assignee(self, report_slice, add_report):
        add_report(assigned_to="leader-1")
        add_report(assigned_to="leader-2")

        await report_slice.get_report_stats("org1", "leader-2")

        assert report_slice.report_stats.total_reports == 1

    @pytest.mark.asyncio
    async def test_get_tdp_list(self, report_slice):
        await report_slice.get_tdp_list("org1")

        assert [t.id for t in report_slice.tdp_list] == ["tdp-1", "tdp-2"]
        assert all(t.organization_id == "org1" for t in report_slice.tdp_list)
        assert not report_slice.loading_tdp

    @pytest.mark.asyncio
    async def test_flags_are_independent(self, report_slice):
        observed = {}

        async def fake_stats(store, organization_id, assigned_to=None):
            observed["reports"] = report_slice.loading_reports
            observed["tdp"] = report_slice.loading_tdp
            observed["stats"] = report_slice.loading_stats
            return None

        with patch("app.state.report_slice.report_service.get_report_stats", new=fake_stats):
            await report_slice.get_report_stats("org1")

        assert observed == {"reports": False, "tdp": False, "stats": True}


class TestSelectedReport:
    def test_set_and_clear(self, report_slice, report_factory):
        report = report_factory()
        report_slice.set_selected_report(report)
        assert report_slice.selected_report is report

        report_slice.set_selected_report(None)
        assert report_slice.selected_report is None


class TestSelectors:
    @pytest.fixture(name="cached_slice")
    def cached_slice_fixture(self, report_slice, report_factory):
        now = datetime.now()
        report_slice.reports = [
            report_factory(id="1", status=ReportStatus.PENDING, due_date=now + timedelta(days=3)),
            report_factory(
                id="2",
                status=ReportStatus.IN_PROGRESS,
                due_date=now - timedelta(days=1),
                assigned_to="leader-2",
            ),
            report_factory(id="3", status=ReportStatus.SUBMITTED, due_date=now - timedelta(days=2)),
            report_factory(id="4", status=ReportStatus.APPROVED, due_date=now - timedelta(days=9)),
        ]
        return report_slice

    def test_pending_count_excludes_submitted(self, cached_slice):
        assert cached_slice.get_pending_reports_count() == 2

    def test_pending_count_for_assignee(self, cached_slice):
        assert cached_slice.get_pending_reports_count("leader-2") == 1
        assert cached_slice.get_pending_reports_count("nobody") == 0

    def test_overdue_count(self, cached_slice):
        assert cached_slice.get_overdue_reports_count() == 2
        assert cached_slice.get_overdue_reports_count("leader-1") == 1

    def test_reports_by_status(self, cached_slice):
        assert [r.id for r in cached_slice.get_reports_by_status(ReportStatus.APPROVED)] == ["4"]
        assert cached_slice.get_reports_by_status(ReportStatus.REJECTED) == []
        assert (
            cached_slice.get_reports_by_status(ReportStatus.IN_PROGRESS, "leader-1") == []
        )

    def test_empty_cache(self, report_slice):
        assert report_slice.get_pending_reports_count() == 0
        assert report_slice.get_overdue_reports_count() == 0
        assert report_slice.get_reports_by_status(ReportStatus.PENDING) == []
