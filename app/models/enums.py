from enum import Enum


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    # Never assigned by the services; overdue-ness is derived from due_date
    OVERDUE = "overdue"


class ReportPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportFieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    DATE = "date"
    FILE = "file"


class FeedbackStatus(str, Enum):
    NEW = "new"
    PROCESSING = "processing"
    RESOLVED = "resolved"


# Statuses counted as "still open" by the aggregate stats
OPEN_REPORT_STATUSES = frozenset(
    {ReportStatus.PENDING, ReportStatus.IN_PROGRESS, ReportStatus.SUBMITTED}
)
# Statuses whose update stamps completed_at
COMPLETING_REPORT_STATUSES = frozenset({ReportStatus.APPROVED, ReportStatus.SUBMITTED})
