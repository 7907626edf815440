"""Document store exceptions.

These never cross the report access layer: the services catch them, log them
and fall back to a safe default value.
"""

from app.exceptions.base import AppException


class StoreError(AppException):
    """Base class for failures talking to the document store."""

    def __init__(self, operation: str, collection: str, reason: str | None = None):
        """
        Parameters:
            operation (str): Store operation that failed (for example "query" or "update").
            collection (str): Collection the operation targeted.
            reason (str | None): Optional underlying cause, appended to the message.
        """
        self.operation = operation
        self.collection = collection
        self.reason = reason
        message = f"Store {operation} on '{collection}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StoreReadError(StoreError):
    """A query or point lookup could not be completed."""


class StoreWriteError(StoreError):
    """An insert, update or delete could not be completed."""


class DocumentNotFoundError(StoreWriteError):
    """A write targeted a document id that does not exist."""

    def __init__(self, collection: str, doc_id: str, operation: str = "write"):
        self.doc_id = doc_id
        super().__init__(operation, collection, f"document '{doc_id}' not found")
