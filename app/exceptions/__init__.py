"""
Application exceptions module.

This module provides a clean separation of concerns for error handling:
- Base exceptions define the hierarchy
- CRUD exceptions are raised by routers when a lookup comes back empty
- Store exceptions describe document store failures and stay inside the services
- HTTP mapping is handled separately in app/core/error_handlers.py
"""

from app.exceptions.base import AppException
from app.exceptions.crud import NotFoundError, ValidationError
from app.exceptions.store import (
    StoreError,
    StoreReadError,
    StoreWriteError,
    DocumentNotFoundError,
)

__all__ = [
    # Base
    "AppException",
    # CRUD
    "NotFoundError",
    "ValidationError",
    # Store
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "DocumentNotFoundError",
]
