"""Derived statistics models for report dashboards."""

from sqlmodel import SQLModel, Field


class MonthlyReportStats(SQLModel):
    """Report figures for one calendar month."""

    month: str  # Format: "YYYY-MM"
    total_reports: int = 0
    completed_reports: int = 0
    completion_rate: float = 0
    average_completion_time: float = 0


class ReportStats(SQLModel):
    """Aggregate figures over a report set. Never persisted."""

    total_reports: int = 0
    completed_reports: int = 0
    pending_reports: int = 0
    overdue_reports: int = 0
    completion_rate: float = 0
    average_completion_time: float = 0
    monthly_stats: list[MonthlyReportStats] = Field(default_factory=list)
