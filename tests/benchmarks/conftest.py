"""Shared fixtures for benchmark tests."""

import uuid
from datetime import datetime, timedelta

import pytest

from app.models.enums import ReportStatus
from app.models.report import Report

_STATUS_CYCLE = list(ReportStatus)


@pytest.fixture(name="report_set_factory")
def report_set_factory_fixture():
    """
    Create a factory that produces a realistic report set spread over the last year.

    Statuses cycle through every ReportStatus; roughly a third of the reports carry
    a completion timestamp and a quarter are past due.

    Returns:
        create_callable (Callable[[int], list[Report]]): Builds `count` reports with unique ids.
    """

    def create(count: int) -> list[Report]:
        now = datetime.now()
        reports = []
        for i in range(count):
            created_at = now - timedelta(days=i % 365, hours=i % 24)
            reports.append(
                Report(
                    id=uuid.uuid4().hex,
                    title=f"Report {i}",
                    assigned_to=f"leader-{i % 10}",
                    category="monthly",
                    organization_id="org-bench",
                    created_at=created_at,
                    due_date=created_at + timedelta(days=30 if i % 4 else -1),
                    completed_at=created_at + timedelta(days=i % 9 + 1) if i % 3 == 0 else None,
                    status=_STATUS_CYCLE[i % len(_STATUS_CYCLE)],
                )
            )
        return reports

    return create
