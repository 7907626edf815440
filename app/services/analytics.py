"""Aggregate statistics over a materialized report set.

Everything here is a pure function of the reports and a reference instant,
so repeated calls over the same inputs give identical results.
"""

import math
from datetime import datetime
from typing import Iterable, Sequence, cast

from dateutil.relativedelta import relativedelta

from app.models.analytics import MonthlyReportStats, ReportStats
from app.models.enums import OPEN_REPORT_STATUSES, ReportStatus
from app.models.report import Report

MONTHLY_STATS_MONTHS = 6
SECONDS_PER_DAY = 24 * 60 * 60


def is_overdue(report: Report, now: datetime) -> bool:
    """A report is overdue once its due date has passed and it is not approved."""
    return report.due_date < now and report.status != ReportStatus.APPROVED


def completion_days(report: Report) -> int | None:
    """
    Whole days from creation to completion, rounded up.

    Returns:
        int | None: The ceiling of the elapsed days, or None when the report has no completion timestamp.
    """
    if report.completed_at is None or report.created_at is None:
        return None
    elapsed = (report.completed_at - report.created_at).total_seconds()
    return math.ceil(elapsed / SECONDS_PER_DAY)


def average_completion_time(reports: Iterable[Report]) -> float:
    days = [d for d in (completion_days(r) for r in reports) if d is not None]
    if not days:
        return 0
    return sum(days) / len(days)


def completion_rate(completed: int, total: int) -> float:
    if total == 0:
        return 0
    return completed / total * 100


def month_keys(now: datetime, months: int = MONTHLY_STATS_MONTHS) -> list[str]:
    """
    Return the trailing `months` calendar month keys ending at the month of `now`.

    Returns:
        list[str]: Keys formatted "YYYY-MM", oldest first.
    """
    start_of_current_month = datetime(now.year, now.month, 1)
    current: datetime = cast(
        datetime, start_of_current_month - relativedelta(months=months - 1)
    )
    keys = []
    for _ in range(months):
        keys.append(current.strftime("%Y-%m"))
        current = cast(datetime, current + relativedelta(months=1))
    return keys


def calculate_monthly_stats(
    reports: Sequence[Report], now: datetime, months: int = MONTHLY_STATS_MONTHS
) -> list[MonthlyReportStats]:
    """
    Bucket reports by creation month over the trailing window.

    Reports created outside the window are left out of every bucket. Empty
    buckets are still emitted, with zero rate and zero average time.

    Parameters:
        reports: Reports to bucket.
        now: Reference instant; its month is the last bucket.
        months: Number of buckets.

    Returns:
        list[MonthlyReportStats]: Exactly `months` entries, oldest first.
    """
    buckets: dict[str, list[Report]] = {key: [] for key in month_keys(now, months)}
    for report in reports:
        bucket = buckets.get(report.created_at.strftime("%Y-%m"))
        if bucket is not None:
            bucket.append(report)

    result = []
    for month, month_reports in buckets.items():
        total = len(month_reports)
        completed = sum(1 for r in month_reports if r.status == ReportStatus.APPROVED)
        result.append(
            MonthlyReportStats(
                month=month,
                total_reports=total,
                completed_reports=completed,
                completion_rate=completion_rate(completed, total),
                average_completion_time=average_completion_time(month_reports),
            )
        )
    return result


def compute_report_stats(
    reports: Sequence[Report],
    now: datetime | None = None,
    months: int = MONTHLY_STATS_MONTHS,
) -> ReportStats:
    """
    Compute overall and monthly statistics for a report set.

    Parameters:
        reports: The full report set (not a page of it).
        now: Reference instant for overdue checks and the monthly window; defaults to the current local time.
        months: Number of monthly buckets.

    Returns:
        ReportStats: Counts, completion rate (percent), average completion time (days) and monthly buckets.
    """
    now = now or datetime.now()
    total = len(reports)
    completed = sum(1 for r in reports if r.status == ReportStatus.APPROVED)

    return ReportStats(
        total_reports=total,
        completed_reports=completed,
        pending_reports=sum(1 for r in reports if r.status in OPEN_REPORT_STATUSES),
        overdue_reports=sum(1 for r in reports if is_overdue(r, now)),
        completion_rate=completion_rate(completed, total),
        average_completion_time=average_completion_time(reports),
        monthly_stats=calculate_monthly_stats(reports, now, months),
    )
