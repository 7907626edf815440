from datetime import datetime
from pydantic import field_validator
from sqlmodel import SQLModel, Field
from app.models.enums import ReportStatus, ReportPriority, SubmissionStatus


class ReportSubmission(SQLModel):
    submitted_at: datetime
    content: str = ""
    attachments: list[str] = Field(default_factory=list)
    feedback: str | None = None
    status: SubmissionStatus = SubmissionStatus.SUBMITTED


class ReportBase(SQLModel):
    title: str
    description: str = ""
    assigned_to: str
    priority: ReportPriority = ReportPriority.MEDIUM
    category: str
    organization_id: str
    tdp_name: str = ""


class Report(ReportBase):
    """A report as handed to callers: timestamps are naive datetimes, defaults applied."""

    id: str
    assigned_by: str = ""
    due_date: datetime
    created_at: datetime
    completed_at: datetime | None = None
    # Only ever set by local cache patches, never read back from the store
    updated_at: datetime | None = None
    status: ReportStatus = ReportStatus.PENDING
    content: str | None = None
    attachments: list[str] = Field(default_factory=list)
    feedback: str | None = None
    submission_history: list[ReportSubmission] = Field(default_factory=list)


class CreateReportParams(ReportBase):
    due_date: datetime
    assigned_by: str = ""


class ReportUpdate(SQLModel):
    content: str | None = None
    attachments: list[str] | None = None
    status: ReportStatus | None = None
    feedback: str | None = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value: ReportStatus | None) -> ReportStatus:
        # Omit the field to leave the status unchanged; null cannot be stored
        if value is None:
            raise ValueError("status cannot be null")
        return value


class UpdateReportParams(ReportUpdate):
    id: str


class GetReportsParams(SQLModel):
    organization_id: str
    assigned_to: str | None = None
    status: list[ReportStatus] | None = None
    category: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int = Field(default=50, ge=1)


class OperationResult(SQLModel):
    """Body returned by write endpoints, mirroring the boolean service contract."""

    success: bool
