"""Reference data providers: reporting units, feedback types and report templates.

Callers depend on the ReferenceData protocol, so the static catalog below can
later be swapped for a store-backed provider without touching them.
"""

import json
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from app.core.config import get_settings
from app.models.reference import FeedbackType, ReportTemplate, TDPInfo

DEFAULT_TDP_UNITS: list[dict[str, Any]] = [
    {
        "id": "tdp-1",
        "name": "TDP No. 1",
        "leader_zalo_id": "zalo_id_tdp_1",
        "leader_name": "Nguyen Van A",
        "leader_phone": "0123456789",
        "address": "Quarter 1, Ha Huy Tap ward",
        "households": 120,
        "population": 350,
        "is_active": True,
    },
    {
        "id": "tdp-2",
        "name": "TDP No. 2",
        "leader_zalo_id": "zalo_id_tdp_2",
        "leader_name": "Tran Thi B",
        "leader_phone": "0123456788",
        "address": "Quarter 2, Ha Huy Tap ward",
        "households": 95,
        "population": 280,
        "is_active": True,
    },
]

DEFAULT_FEEDBACK_TYPES: list[dict[str, Any]] = [
    {"id": 1, "title": "Security and public order", "order": 1},
    {"id": 2, "title": "Culture and social affairs", "order": 2},
    {"id": 3, "title": "Land, construction, business and urban affairs", "order": 3},
    {"id": 4, "title": "Other", "order": 4},
]

DEFAULT_REPORT_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "monthly-status",
        "title": "Monthly status report",
        "description": "Periodic summary submitted by each TDP leader.",
        "category": "monthly",
        "fields": [
            {"id": "summary", "label": "Summary", "type": "textarea", "required": True},
            {
                "id": "households_visited",
                "label": "Households visited",
                "type": "number",
                "required": False,
                "validation": {"min": 0},
            },
            {"id": "evidence", "label": "Attachments", "type": "file", "required": False},
        ],
        "is_active": True,
        "created_by": "system",
        "created_at": datetime(2024, 1, 1),
    },
]


class ReferenceData(Protocol):
    async def tdp_units(self, organization_id: str) -> list[TDPInfo]: ...

    async def feedback_types(self, organization_id: str) -> list[FeedbackType]: ...

    async def report_templates(self) -> list[ReportTemplate]: ...


class StaticReferenceData:
    """In-memory catalog.

    TDP entries without an `organization_id` are shared: they are returned for
    any organization, stamped with the requested id. Entries that carry one are
    only returned for that organization.
    """

    def __init__(
        self,
        tdp_units: list[dict[str, Any]] | None = None,
        feedback_types: list[dict[str, Any]] | None = None,
        report_templates: list[dict[str, Any]] | None = None,
    ):
        self._tdp_units = DEFAULT_TDP_UNITS if tdp_units is None else tdp_units
        self._feedback_types = [
            FeedbackType.model_validate(t)
            for t in (DEFAULT_FEEDBACK_TYPES if feedback_types is None else feedback_types)
        ]
        self._report_templates = [
            ReportTemplate.model_validate(t)
            for t in (
                DEFAULT_REPORT_TEMPLATES if report_templates is None else report_templates
            )
        ]

    async def tdp_units(self, organization_id: str) -> list[TDPInfo]:
        units = []
        for entry in self._tdp_units:
            owner = entry.get("organization_id")
            if owner is not None and owner != organization_id:
                continue
            units.append(TDPInfo.model_validate({**entry, "organization_id": organization_id}))
        return units

    async def feedback_types(self, organization_id: str) -> list[FeedbackType]:
        return sorted(self._feedback_types, key=lambda t: t.order)

    async def report_templates(self) -> list[ReportTemplate]:
        return [t for t in self._report_templates if t.is_active]


def load_reference_data(path: str | Path) -> StaticReferenceData:
    """
    Build a StaticReferenceData from a JSON file.

    The file holds an object with optional `tdp_units`, `feedback_types` and
    `report_templates` arrays; missing keys fall back to the built-in defaults.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON or an entry fails validation.
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    logger.info(f"Loaded reference data from {path}")
    return StaticReferenceData(
        tdp_units=raw.get("tdp_units"),
        feedback_types=raw.get("feedback_types"),
        report_templates=raw.get("report_templates"),
    )


@lru_cache()
def get_reference_data() -> ReferenceData:
    """
    Return the process-wide reference data provider.

    Uses REFERENCE_DATA_PATH when configured, otherwise the built-in catalog.
    """
    path = get_settings().REFERENCE_DATA_PATH
    if path:
        return load_reference_data(path)
    return StaticReferenceData()
