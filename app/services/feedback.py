"""Citizen feedback service. Same fail-soft contract as the report access layer."""

from datetime import datetime

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.models.enums import FeedbackStatus
from app.models.feedback import Feedback, FeedbackCreate
from app.models.reference import FeedbackType
from app.services.reference import ReferenceData
from app.services.utils import run_store_call, unwrap
from app.store.interfaces import Document, DocumentStore, FieldFilter
from app.store.timestamps import from_store_timestamp, now_store_timestamp
from app.utils.validation import mask_phone

FEEDBACKS_COLLECTION = "feedbacks"


def _to_feedback(document: Document) -> Feedback:
    data = dict(document)
    data["created_at"] = from_store_timestamp(data.get("created_at")) or datetime.now()
    data["image_urls"] = data.get("image_urls") or []
    return Feedback.model_validate(data)


async def create_feedback(store: DocumentStore, feedback_in: FeedbackCreate) -> bool:
    """
    Store a new citizen feedback with status `new`.

    Returns:
        bool: True once stored, False on failure.
    """
    data = feedback_in.model_dump(mode="json")
    data.update(created_at=now_store_timestamp(), status=FeedbackStatus.NEW.value)

    async def write() -> bool:
        feedback_id = await store.add(FEEDBACKS_COLLECTION, data)
        logger.info(
            f"Feedback {feedback_id} received from {mask_phone(feedback_in.phone_number)}"
        )
        return True

    return unwrap("create_feedback", await run_store_call(write, default=False))


async def get_feedbacks(store: DocumentStore, organization_id: str) -> list[Feedback]:
    """List the feedback of an organization, newest first. Empty on failure."""

    async def fetch() -> list[Feedback]:
        documents = await store.query(
            FEEDBACKS_COLLECTION,
            [FieldFilter("organization_id", "==", organization_id)],
            order_by="created_at",
            descending=True,
        )
        feedbacks = []
        for document in documents:
            try:
                feedbacks.append(_to_feedback(document))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed feedback document {document.get('id')}: {e}")
        return feedbacks

    return unwrap("get_feedbacks", await run_store_call(fetch, default=[]))


async def get_feedback_detail(store: DocumentStore, feedback_id: str) -> Feedback | None:
    async def fetch() -> Feedback | None:
        document = await store.get(FEEDBACKS_COLLECTION, feedback_id)
        return _to_feedback(document) if document is not None else None

    return unwrap("get_feedback_detail", await run_store_call(fetch, default=None))


async def get_feedback_types(
    reference: ReferenceData, organization_id: str
) -> list[FeedbackType]:
    async def fetch() -> list[FeedbackType]:
        return await reference.feedback_types(organization_id)

    return unwrap("get_feedback_types", await run_store_call(fetch, default=[]))
