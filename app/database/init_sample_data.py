"""Sample data initialization for non-production environments.

Seeds one organization with reports spread over the last few months in every
status, plus a citizen feedback, so dashboards have something to show.
Reports are written straight to the store because the report service always
stamps creation with the current time.

Idempotent: does nothing when the organization already has reports.
"""

from datetime import datetime, timedelta

from loguru import logger

from app.core.config import get_settings
from app.models.enums import ReportPriority, ReportStatus
from app.models.feedback import FeedbackCreate
from app.models.report import GetReportsParams
from app.services import feedback as feedback_service
from app.services import report as report_service
from app.store.interfaces import DocumentStore
from app.store.timestamps import to_store_timestamp

SAMPLE_ORGANIZATION_ID = "org-sample"

# (days ago created, days until due, days to complete, status)
_SAMPLE_REPORTS = [
    (150, 20, 12, ReportStatus.APPROVED),
    (120, 15, 7, ReportStatus.APPROVED),
    (90, 30, None, ReportStatus.REJECTED),
    (60, 10, None, ReportStatus.IN_PROGRESS),
    (30, 10, 4, ReportStatus.SUBMITTED),
    (5, 25, None, ReportStatus.PENDING),
]


async def init_sample_data(store: DocumentStore) -> None:
    """
    Seed sample reports and feedback.

    Raises:
        RuntimeError: If called with ENVIRONMENT set to production.
    """
    if get_settings().ENVIRONMENT.lower() == "production":
        raise RuntimeError("Refusing to seed sample data in production")

    existing = await report_service.get_reports(
        store, GetReportsParams(organization_id=SAMPLE_ORGANIZATION_ID, limit=1)
    )
    if existing:
        logger.info("Sample data already present, skipping")
        return

    now = datetime.now()
    for index, (age_days, due_in_days, completion_days, status) in enumerate(
        _SAMPLE_REPORTS, start=1
    ):
        created_at = now - timedelta(days=age_days)
        unit = index % 2 + 1
        document = {
            "title": f"Monthly report #{index}",
            "description": "Summary of neighborhood activities.",
            "assigned_to": f"zalo_id_tdp_{unit}",
            "assigned_by": "zalo_id_admin",
            "created_at": to_store_timestamp(created_at),
            "due_date": to_store_timestamp(created_at + timedelta(days=due_in_days)),
            "status": status.value,
            "priority": ReportPriority.MEDIUM.value,
            "category": "monthly",
            "organization_id": SAMPLE_ORGANIZATION_ID,
            "tdp_name": f"TDP No. {unit}",
            "attachments": [],
            "submission_history": [],
        }
        if completion_days is not None:
            document["completed_at"] = to_store_timestamp(
                created_at + timedelta(days=completion_days)
            )
        await store.add(report_service.REPORTS_COLLECTION, document)

    await feedback_service.create_feedback(
        store,
        FeedbackCreate(
            title="Broken street light",
            content="The street light at the corner of alley 3 has been off for a week.",
            full_name="Le Van C",
            address="Alley 3, Quarter 1",
            phone_number="0912345678",
            feedback_type_id=3,
            organization_id=SAMPLE_ORGANIZATION_ID,
        ),
    )
    logger.info(f"Seeded {len(_SAMPLE_REPORTS)} sample reports")
