"""Contract of the document store the services read from and write to.

The store is a collection-of-documents service: equality and membership
predicates, ordering on one field, result capping, point lookups and
insert/partial-update/delete by id. Documents are plain dicts whose
timestamps use the store-native representation (see app/store/timestamps.py).
"""

from dataclasses import dataclass
from typing import Any, Literal, Protocol

Document = dict[str, Any]
FilterOp = Literal["==", "in"]


@dataclass(frozen=True)
class FieldFilter:
    """One predicate on a top-level document field.

    Attributes:
        field: Document key the predicate applies to.
        op: `==` for equality, `in` for membership in `value`.
        value: Scalar for `==`, sequence for `in`.
    """

    field: str
    op: FilterOp
    value: Any


class DocumentStore(Protocol):
    """Async port to the remote document store.

    Every returned document carries its identity under the `id` key.
    """

    async def query(
        self,
        collection: str,
        filters: list[FieldFilter],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Return documents matching every filter, ordered and capped.

        `order_by` names a timestamp field; it sorts numerically on store-native
        epoch milliseconds. Datetime values are converted to that form on write.

        Raises:
            StoreReadError: Raised when the store cannot serve the query.
        """

    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Return one document, or None when the id is unknown.

        Raises:
            StoreReadError: Raised when the store cannot serve the lookup.
        """

    async def add(self, collection: str, data: Document) -> str:
        """Insert a document and return its generated id.

        Raises:
            StoreWriteError: Raised when the insert fails.
        """

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        """Merge `data` into an existing document.

        Raises:
            DocumentNotFoundError: Raised when the id is unknown.
            StoreWriteError: Raised when the write fails.
        """

    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: Raised when the id is unknown.
            StoreWriteError: Raised when the delete fails.
        """
