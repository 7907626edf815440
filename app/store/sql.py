"""Document store backed by a single SQL table with a JSON payload column.

Predicates and ordering are pushed into SQL through JSON path expressions,
which SQLAlchemy renders for both PostgreSQL and SQLite.
"""

import uuid
from datetime import datetime
from typing import Any

from anyio import to_thread
from sqlalchemy import Column, JSON
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Field, Session, select

from app.exceptions import StoreReadError, StoreWriteError, DocumentNotFoundError
from app.store.interfaces import Document, FieldFilter
from app.store.timestamps import to_store_timestamp


def _new_document_id() -> str:
    return uuid.uuid4().hex


class StoredDocument(SQLModel, table=True):
    __tablename__ = "document"  # type: ignore

    id: str = Field(default_factory=_new_document_id, primary_key=True, max_length=32)
    collection: str = Field(index=True, max_length=64)
    data: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    def to_document(self) -> Document:
        return {**self.data, "id": self.id}


def _typed_path(field: str, sample: Any):
    """
    Return a typed JSON path expression for `field`, cast according to `sample`.

    bool is checked before int since it is a subclass of it.
    """
    path = StoredDocument.data[field]  # type: ignore[index]
    if isinstance(sample, bool):
        return path.as_boolean()
    if isinstance(sample, int):
        return path.as_integer()
    if isinstance(sample, float):
        return path.as_float()
    return path.as_string()


def _to_payload(data: Document) -> Document:
    """Drop the `id` key and store datetimes as epoch milliseconds so they order numerically."""
    return {
        key: to_store_timestamp(value) if isinstance(value, datetime) else value
        for key, value in data.items()
        if key != "id"
    }


def _plain(value: Any) -> Any:
    # str enums bind as their value
    return getattr(value, "value", value)


class SQLDocumentStore:
    """DocumentStore implementation over a SQLModel engine.

    Each call opens its own short-lived session in a worker thread so the
    event loop never blocks on database I/O.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    async def query(
        self,
        collection: str,
        filters: list[FieldFilter],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        return await to_thread.run_sync(
            self._query, collection, filters, order_by, descending, limit
        )

    async def get(self, collection: str, doc_id: str) -> Document | None:
        return await to_thread.run_sync(self._get, collection, doc_id)

    async def add(self, collection: str, data: Document) -> str:
        return await to_thread.run_sync(self._add, collection, data)

    async def update(self, collection: str, doc_id: str, data: Document) -> None:
        await to_thread.run_sync(self._update, collection, doc_id, data)

    async def delete(self, collection: str, doc_id: str) -> None:
        await to_thread.run_sync(self._delete, collection, doc_id)

    def _query(
        self,
        collection: str,
        filters: list[FieldFilter],
        order_by: str | None,
        descending: bool,
        limit: int | None,
    ) -> list[Document]:
        statement = select(StoredDocument).where(StoredDocument.collection == collection)
        for field_filter in filters:
            if field_filter.op == "in":
                values = [_plain(v) for v in field_filter.value]
                if not values:
                    return []
                statement = statement.where(_typed_path(field_filter.field, values[0]).in_(values))
            else:
                value = _plain(field_filter.value)
                statement = statement.where(_typed_path(field_filter.field, value) == value)

        if order_by:
            # Ordering fields hold epoch milliseconds
            order_column = StoredDocument.data[order_by].as_float()  # type: ignore[index]
            statement = statement.order_by(
                order_column.desc() if descending else order_column.asc()
            )
        if limit is not None:
            statement = statement.limit(limit)

        try:
            with Session(self._engine) as session:
                rows = session.exec(statement).all()
                return [row.to_document() for row in rows]
        except SQLAlchemyError as e:
            raise StoreReadError("query", collection, str(e)) from e

    def _get(self, collection: str, doc_id: str) -> Document | None:
        try:
            with Session(self._engine) as session:
                row = session.get(StoredDocument, doc_id)
                if row is None or row.collection != collection:
                    return None
                return row.to_document()
        except SQLAlchemyError as e:
            raise StoreReadError("get", collection, str(e)) from e

    def _add(self, collection: str, data: Document) -> str:
        payload = _to_payload(data)
        try:
            with Session(self._engine) as session:
                row = StoredDocument(collection=collection, data=payload)
                session.add(row)
                session.commit()
                session.refresh(row)
                return row.id
        except SQLAlchemyError as e:
            raise StoreWriteError("add", collection, str(e)) from e

    def _update(self, collection: str, doc_id: str, data: Document) -> None:
        try:
            with Session(self._engine) as session:
                row = session.get(StoredDocument, doc_id)
                if row is None or row.collection != collection:
                    raise DocumentNotFoundError(collection, doc_id, "update")
                # Reassign so the JSON column is flagged dirty
                row.data = {**row.data, **_to_payload(data)}
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StoreWriteError("update", collection, str(e)) from e

    def _delete(self, collection: str, doc_id: str) -> None:
        try:
            with Session(self._engine) as session:
                row = session.get(StoredDocument, doc_id)
                if row is None or row.collection != collection:
                    raise DocumentNotFoundError(collection, doc_id, "delete")
                session.delete(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StoreWriteError("delete", collection, str(e)) from e
