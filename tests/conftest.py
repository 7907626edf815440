import pytest
from datetime import datetime
from typing import Any
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.database.database import get_store
from app.models.enums import ReportPriority, ReportStatus
from app.models.report import Report
from app.services.reference import StaticReferenceData, get_reference_data
from app.store.sql import SQLDocumentStore, StoredDocument
from app.store.timestamps import to_store_timestamp


@pytest.fixture(scope="function")
def test_settings():
    """Provide test settings with an in-memory database."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        ENVIRONMENT="test",
        BACKEND_CORS_ORIGINS="",
    )


@pytest.fixture(scope="function")
def test_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="store")
def store_fixture(test_engine) -> SQLDocumentStore:
    """Provide a document store over the in-memory engine."""
    return SQLDocumentStore(test_engine)


@pytest.fixture(name="reference")
def reference_fixture() -> StaticReferenceData:
    """Provide the built-in reference catalog."""
    return StaticReferenceData()


def make_report_document(**overrides: Any) -> dict[str, Any]:
    """
    Build a stored report document; datetime overrides are converted to store timestamps.
    """
    now = datetime.now()
    document: dict[str, Any] = {
        "title": "Monthly report",
        "description": "Neighborhood summary",
        "assigned_to": "leader-1",
        "assigned_by": "admin-1",
        "created_at": now,
        "due_date": now,
        "status": ReportStatus.PENDING.value,
        "priority": ReportPriority.MEDIUM.value,
        "category": "monthly",
        "organization_id": "org1",
        "tdp_name": "TDP No. 1",
        "attachments": [],
        "submission_history": [],
    }
    document.update(overrides)
    return {
        key: to_store_timestamp(value) if isinstance(value, datetime) else value
        for key, value in document.items()
    }


@pytest.fixture(name="add_report")
def add_report_fixture(test_engine):
    """
    Factory inserting a report document directly through a session.

    Usable from sync and async tests alike. Returns the new document id.
    """

    def add(collection: str = "reports", **overrides: Any) -> str:
        row = StoredDocument(collection=collection, data=make_report_document(**overrides))
        with Session(test_engine) as session:
            session.add(row)
            session.commit()
            session.refresh(row)
            return row.id

    return add


@pytest.fixture(name="read_document")
def read_document_fixture(test_engine):
    """Read back the raw stored payload of a document."""

    def read(doc_id: str) -> dict[str, Any] | None:
        with Session(test_engine) as session:
            row = session.get(StoredDocument, doc_id)
            return dict(row.data) if row else None

    return read


def make_report(**overrides: Any) -> Report:
    """Build an in-memory Report with sensible defaults."""
    now = datetime.now()
    data: dict[str, Any] = {
        "id": "r1",
        "title": "Monthly report",
        "assigned_to": "leader-1",
        "category": "monthly",
        "organization_id": "org1",
        "created_at": now,
        "due_date": now,
    }
    data.update(overrides)
    return Report.model_validate(data)


@pytest.fixture(name="client")
def client_fixture(store, reference, test_settings):
    """TestClient whose store, reference data and settings point at the test doubles."""
    from app.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_reference_data] = lambda: reference
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(name="report_factory")
def report_factory_fixture():
    """Expose make_report to tests."""
    return make_report


@pytest.fixture(name="document_factory")
def document_factory_fixture():
    """Expose make_report_document to tests."""
    return make_report_document
