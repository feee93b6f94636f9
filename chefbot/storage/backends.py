"""
Record-level backends behind the generic repository.

Both backends speak plain dicts keyed by snake_case field names and address
records by collection name (see ``tables.TABLES``):

- ``SqlBackend`` runs each operation in its own SQLAlchemy session.
- ``MemoryBackend`` keeps the demo dataset in process-local dicts.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import func, select, update
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .tables import TABLES, UNIQUE_KEYS, Base

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class StorageError(RuntimeError):
    """A query against the active backend failed."""


class ConflictError(StorageError):
    """A write would violate a uniqueness constraint."""


class Backend(Protocol):
    def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[Record]: ...

    def get(self, collection: str, record_id: str) -> Record | None: ...

    def insert(self, collection: str, record: Record) -> Record: ...

    def update(self, collection: str, record_id: str, fields: Record) -> Record | None: ...

    def delete(self, collection: str, record_id: str) -> bool: ...

    def count(self, collection: str) -> int: ...

    def increment(
        self,
        collection: str,
        match: dict[str, Any],
        counter: str,
        touched: Record,
        new_record: Record,
    ) -> Record: ...


def _model_for(collection: str) -> type[Base]:
    try:
        return TABLES[collection]
    except KeyError:
        raise StorageError(f"Unknown collection: {collection}") from None


def _row_to_record(row: Base) -> Record:
    return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}


# ---------------------------------------------------------------------------
# SQL backend
# ---------------------------------------------------------------------------


class SqlBackend:
    def __init__(self, engine: Engine):
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise ConflictError("Record conflicts with an existing entry") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Database operation failed", exc_info=True)
            raise StorageError("Database operation failed") from exc
        finally:
            session.close()

    def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        model = _model_for(collection)
        query = select(model)
        for field, value in (filters or {}).items():
            query = query.where(getattr(model, field) == value)
        if order_by:
            query = query.order_by(getattr(model, order_by), model.id)
        with self._session() as session:
            return [_row_to_record(row) for row in session.scalars(query)]

    def get(self, collection: str, record_id: str) -> Record | None:
        model = _model_for(collection)
        with self._session() as session:
            row = session.get(model, record_id)
            return _row_to_record(row) if row is not None else None

    def insert(self, collection: str, record: Record) -> Record:
        model = _model_for(collection)
        with self._session() as session:
            row = model(**record)
            session.add(row)
            session.flush()
            return _row_to_record(row)

    def update(self, collection: str, record_id: str, fields: Record) -> Record | None:
        model = _model_for(collection)
        with self._session() as session:
            row = session.get(model, record_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            session.flush()
            return _row_to_record(row)

    def delete(self, collection: str, record_id: str) -> bool:
        model = _model_for(collection)
        with self._session() as session:
            row = session.get(model, record_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def count(self, collection: str) -> int:
        model = _model_for(collection)
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(model)) or 0

    def _bump(
        self,
        model: type[Base],
        conditions: list[Any],
        counter: str,
        touched: Record,
    ) -> Record | None:
        with self._session() as session:
            result = session.execute(
                update(model)
                .where(*conditions)
                .values({counter: getattr(model, counter) + 1, **touched})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            row = session.scalars(select(model).where(*conditions)).one()
            return _row_to_record(row)

    def increment(
        self,
        collection: str,
        match: dict[str, Any],
        counter: str,
        touched: Record,
        new_record: Record,
    ) -> Record:
        model = _model_for(collection)
        conditions = [getattr(model, field) == value for field, value in match.items()]
        record = self._bump(model, conditions, counter, touched)
        if record is not None:
            return record
        try:
            return self.insert(collection, new_record)
        except ConflictError:
            # A concurrent request created the row between the update and the insert.
            record = self._bump(model, conditions, counter, touched)
            if record is None:
                raise
            return record


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


class MemoryBackend:
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Record]] = {name: {} for name in TABLES}
        # Reentrant: increment calls insert while holding it.
        self._lock = threading.RLock()

    def _records(self, collection: str) -> dict[str, Record]:
        try:
            return self._collections[collection]
        except KeyError:
            raise StorageError(f"Unknown collection: {collection}") from None

    def _check_unique(self, collection: str, candidate: Record) -> None:
        for fields in UNIQUE_KEYS.get(collection, ()):
            key = tuple(candidate.get(f) for f in fields)
            for other in self._records(collection).values():
                if other["id"] != candidate["id"] and tuple(other.get(f) for f in fields) == key:
                    raise ConflictError("Record conflicts with an existing entry")

    def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        with self._lock:
            matches = [
                record
                for record in self._records(collection).values()
                if all(record.get(field) == value for field, value in (filters or {}).items())
            ]
            if order_by:
                matches.sort(key=lambda r: (r.get(order_by), r["id"]))
            return copy.deepcopy(matches)

    def get(self, collection: str, record_id: str) -> Record | None:
        with self._lock:
            record = self._records(collection).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def insert(self, collection: str, record: Record) -> Record:
        with self._lock:
            records = self._records(collection)
            if record["id"] in records:
                raise ConflictError("Record conflicts with an existing entry")
            self._check_unique(collection, record)
            records[record["id"]] = copy.deepcopy(record)
            return copy.deepcopy(record)

    def update(self, collection: str, record_id: str, fields: Record) -> Record | None:
        with self._lock:
            records = self._records(collection)
            existing = records.get(record_id)
            if existing is None:
                return None
            merged = {**existing, **copy.deepcopy(fields)}
            self._check_unique(collection, merged)
            records[record_id] = merged
            return copy.deepcopy(merged)

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            return self._records(collection).pop(record_id, None) is not None

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._records(collection))

    def _bump(self, collection: str, match: dict[str, Any], counter: str, touched: Record) -> Record | None:
        for record in self._records(collection).values():
            if all(record.get(field) == value for field, value in match.items()):
                record[counter] += 1
                record.update(touched)
                return copy.deepcopy(record)
        return None

    def increment(
        self,
        collection: str,
        match: dict[str, Any],
        counter: str,
        touched: Record,
        new_record: Record,
    ) -> Record:
        with self._lock:
            record = self._bump(collection, match, counter, touched)
            if record is not None:
                return record
            try:
                return self.insert(collection, new_record)
            except ConflictError:
                record = self._bump(collection, match, counter, touched)
                if record is None:
                    raise
                return record
