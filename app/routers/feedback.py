"""Citizen feedback router."""

from fastapi import APIRouter

from app.core.dependencies import ReferenceDep, StoreDep
from app.exceptions import NotFoundError
from app.models.feedback import Feedback, FeedbackCreate
from app.models.reference import FeedbackType
from app.models.report import OperationResult
from app.services import feedback as feedback_service

router = APIRouter(prefix="/feedbacks", tags=["feedbacks"])


@router.post("/", response_model=OperationResult, status_code=201)
async def create_feedback(store: StoreDep, feedback_in: FeedbackCreate) -> OperationResult:
    """
    Submit a citizen feedback.

    ## Example Request

    ```json
    {
      "title": "Broken street light",
      "content": "The light at the corner of alley 3 has been off for a week.",
      "full_name": "Le Van C",
      "address": "Alley 3, Quarter 1",
      "phone_number": "0912345678",
      "national_id": "",
      "feedback_type_id": 3,
      "image_urls": [],
      "organization_id": "org1"
    }
    ```

    The feedback is stored with status `new`. The body carries
    `success: false` when the store rejected the write.
    """
    return OperationResult(success=await feedback_service.create_feedback(store, feedback_in))


@router.get("/", response_model=list[Feedback])
async def list_feedbacks(store: StoreDep, organization_id: str) -> list[Feedback]:
    return await feedback_service.get_feedbacks(store, organization_id)


@router.get("/types", response_model=list[FeedbackType])
async def list_feedback_types(
    reference: ReferenceDep, organization_id: str
) -> list[FeedbackType]:
    """List the feedback categories citizens can pick from, in display order."""
    return await feedback_service.get_feedback_types(reference, organization_id)


@router.get("/{feedback_id}", response_model=Feedback)
async def read_feedback(store: StoreDep, feedback_id: str) -> Feedback:
    """
    Retrieve one feedback.

    Raises:
        `404 NotFoundError`: If the feedback does not exist or could not be read.
    """
    feedback = await feedback_service.get_feedback_detail(store, feedback_id)
    if feedback is None:
        raise NotFoundError("Feedback", feedback_id)
    return feedback
