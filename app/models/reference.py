"""Read-only reference data: reporting units, feedback types and report templates."""

from datetime import datetime
from sqlmodel import SQLModel, Field
from app.models.enums import ReportFieldType


class TDPInfo(SQLModel):
    """A local reporting unit (neighborhood group) and its leader."""

    id: str
    name: str
    leader_zalo_id: str
    leader_name: str
    leader_phone: str = ""
    address: str = ""
    households: int = 0
    population: int = 0
    organization_id: str
    is_active: bool = True


class FeedbackType(SQLModel):
    id: int
    title: str
    order: int = 0


class ReportFieldValidation(SQLModel):
    min: float | None = None
    max: float | None = None
    pattern: str | None = None


class ReportField(SQLModel):
    id: str
    label: str
    type: ReportFieldType = ReportFieldType.TEXT
    required: bool = False
    placeholder: str | None = None
    validation: ReportFieldValidation | None = None


class ReportTemplate(SQLModel):
    id: str
    title: str
    description: str = ""
    category: str
    fields: list[ReportField] = Field(default_factory=list)
    is_active: bool = True
    created_by: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
