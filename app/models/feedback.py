from datetime import datetime
from sqlmodel import SQLModel, Field
from app.models.enums import FeedbackStatus


class FeedbackBase(SQLModel):
    title: str = Field(max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    full_name: str = Field(max_length=100)
    address: str = ""
    phone_number: str = Field(max_length=20)
    national_id: str = ""
    feedback_type_id: int
    image_urls: list[str] = Field(default_factory=list)
    organization_id: str


class FeedbackCreate(FeedbackBase):
    pass


class Feedback(FeedbackBase):
    id: str
    created_at: datetime
    status: FeedbackStatus = FeedbackStatus.NEW
