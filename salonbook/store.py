# salonbook/store.py

"""
Persistence gateway.

Every entity is addressed by its SQLModel table class (``kind``) and an
integer id. ``MemoryStore`` keeps plain dict rows per kind and is what the
tests and ``STORE_BACKEND=memory`` use; ``SqlStore`` wraps a SQLModel
``Session``. Both hand back table-model instances and behave the same way:

- ``insert`` assigns the id (and any ``created_at`` default)
- ``update`` overrides only the keys it is given
- ``delete`` reports whether a row was removed
- ``transaction()`` makes a group of writes all-or-nothing; blocks nest and
  only the outermost one commits
"""

import copy
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from salonbook.errors import PersistenceError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SQLModel)


class Store(ABC):
    @abstractmethod
    def get(self, kind: Type[M], row_id: int) -> Optional[M]:
        ...

    @abstractmethod
    def list(self, kind: Type[M], **filters: Any) -> List[M]:
        """Rows whose fields equal every filter value, ordered by id."""

    @abstractmethod
    def insert(self, kind: Type[M], data: Dict[str, Any]) -> M:
        ...

    @abstractmethod
    def update(self, kind: Type[M], row_id: int, changes: Dict[str, Any]) -> Optional[M]:
        ...

    @abstractmethod
    def delete(self, kind: Type[M], row_id: int) -> bool:
        ...

    @abstractmethod
    def transaction(self) -> Iterator["Store"]:
        ...

    def count(self, kind: Type[M], **filters: Any) -> int:
        return len(self.list(kind, **filters))


class MemoryStore(Store):
    def __init__(self):
        self._rows: Dict[type, Dict[int, Dict[str, Any]]] = defaultdict(dict)
        self._next_id: Dict[type, int] = defaultdict(lambda: 1)
        # held for single operations and for whole transactions, so readers
        # never see a half-applied multi-row write
        self._lock = threading.RLock()

    def get(self, kind, row_id):
        with self._lock:
            row = self._rows[kind].get(row_id)
            return kind(**row) if row is not None else None

    def list(self, kind, **filters):
        with self._lock:
            return [
                kind(**row)
                for _, row in sorted(self._rows[kind].items())
                if all(row.get(k) == v for k, v in filters.items())
            ]

    def insert(self, kind, data):
        with self._lock:
            # build through the model so column defaults are applied
            obj = kind(**data)
            obj.id = self._next_id[kind]
            self._next_id[kind] += 1
            self._rows[kind][obj.id] = obj.model_dump()
            return kind(**self._rows[kind][obj.id])

    def update(self, kind, row_id, changes):
        with self._lock:
            row = self._rows[kind].get(row_id)
            if row is None:
                return None
            row.update(changes)
            return kind(**row)

    def delete(self, kind, row_id):
        with self._lock:
            return self._rows[kind].pop(row_id, None) is not None

    @contextmanager
    def transaction(self):
        with self._lock:
            rows = copy.deepcopy(self._rows)
            next_id = copy.deepcopy(self._next_id)
            try:
                yield self
            except Exception:
                self._rows = rows
                self._next_id = next_id
                raise


class SqlStore(Store):
    def __init__(self, session: Session):
        self.session = session
        self._depth = 0

    def _commit(self):
        if self._depth == 0:
            self.session.commit()
        else:
            self.session.flush()

    def _fail(self, exc: SQLAlchemyError):
        logger.exception("Database operation failed")
        self.session.rollback()
        raise PersistenceError("Database operation failed") from exc

    def get(self, kind, row_id):
        try:
            return self.session.get(kind, row_id)
        except SQLAlchemyError as exc:
            self._fail(exc)

    def list(self, kind, **filters):
        stmt = select(kind)
        for field, value in filters.items():
            stmt = stmt.where(getattr(kind, field) == value)
        stmt = stmt.order_by(kind.id)
        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as exc:
            self._fail(exc)

    def insert(self, kind, data):
        obj = kind(**data)
        self.session.add(obj)
        try:
            self._commit()
            self.session.refresh(obj)  # fills obj.id
        except SQLAlchemyError as exc:
            self._fail(exc)
        return obj

    def update(self, kind, row_id, changes):
        try:
            obj = self.session.get(kind, row_id)
            if obj is None:
                return None
            for field, value in changes.items():
                setattr(obj, field, value)
            self.session.add(obj)
            self._commit()
            self.session.refresh(obj)
        except SQLAlchemyError as exc:
            self._fail(exc)
        return obj

    def delete(self, kind, row_id):
        try:
            obj = self.session.get(kind, row_id)
            if obj is None:
                return False
            self.session.delete(obj)
            self._commit()
        except SQLAlchemyError as exc:
            self._fail(exc)
        return True

    @contextmanager
    def transaction(self):
        outermost = self._depth == 0
        self._depth += 1
        try:
            yield self
            if outermost:
                self.session.commit()
        except SQLAlchemyError as exc:
            if outermost:
                self._fail(exc)
            raise
        except Exception:
            if outermost:
                self.session.rollback()
            raise
        finally:
            self._depth -= 1
