"""
Tenant-scoped data access.

Every read and write on tenant-owned rows goes through a repository that
folds the tenant id into the query predicate. A row in another tenant and a
row that does not exist look the same to the caller: both are NotFound.

Repositories flush but never commit; the transaction belongs to the
service that called them.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Mapping, NoReturn, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from inventory_pro.core.errors import DuplicateRecord, LedgerError, NotFound, StorageError
from inventory_pro.models.tenant import Base

T = TypeVar("T", bound=Base)


class TenantScopedRepository(Generic[T]):
    model: Type[T]
    not_found_message = "Not found"
    # Columns that no patch may touch
    immutable_fields = frozenset({"id", "tenant_id", "created_at"})
    append_only = False

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.entity_name = self.model.__name__

    def _handle_db_error(self, e: Exception, operation_name: str) -> NoReturn:
        if isinstance(e, LedgerError):
            raise e
        if isinstance(e, IntegrityError):
            error_message = str(e.orig).lower() if e.orig is not None else str(e).lower()
            if "unique" in error_message or "duplicate" in error_message:
                self.logger.warning("Duplicate %s in %s", self.entity_name, operation_name)
                raise DuplicateRecord(f"{self.entity_name} already exists") from e
            self.logger.error("Integrity violation in %s.%s: %s", self.entity_name, operation_name, error_message)
            raise StorageError() from e
        if isinstance(e, SQLAlchemyError):
            self.logger.error("Database error in %s.%s", self.entity_name, operation_name, exc_info=True)
            raise StorageError() from e
        raise e

    @contextmanager
    def _session_operation(self, operation_name: str, is_read_only: bool = False) -> Iterator[Session]:
        try:
            yield self.db
            # Flush writes now so constraint violations surface inside the caller's transaction
            if not is_read_only:
                self.db.flush()
        except Exception as e:
            self._handle_db_error(e, operation_name)

    def _scoped(self, tenant_id: int) -> Query:
        if tenant_id is None:
            raise ValueError(f"{self.entity_name} access requires a tenant id")
        return self.db.query(self.model).filter(self.model.tenant_id == tenant_id)

    def find(
        self,
        tenant_id: int,
        *criteria: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[T]:
        with self._session_operation("find", is_read_only=True):
            query = self._scoped(tenant_id).filter(*criteria).filter_by(**filters)
            if order_by is not None:
                query = query.order_by(*order_by) if isinstance(order_by, (list, tuple)) else query.order_by(order_by)
            if limit is not None:
                query = query.limit(limit)
            return query.all()

    def first(self, tenant_id: int, *criteria: Any, **filters: Any) -> Optional[T]:
        with self._session_operation("first", is_read_only=True):
            return self._scoped(tenant_id).filter(*criteria).filter_by(**filters).first()

    def count(self, tenant_id: int, *criteria: Any, **filters: Any) -> int:
        with self._session_operation("count", is_read_only=True):
            return self._scoped(tenant_id).filter(*criteria).filter_by(**filters).count()

    def get(self, tenant_id: int, entity_id: int, for_update: bool = False) -> T:
        with self._session_operation("get", is_read_only=True):
            query = self._scoped(tenant_id).filter(self.model.id == entity_id)
            if for_update:
                # SQLite ignores FOR UPDATE; other stores hold the row until commit
                query = query.with_for_update()
            entity = query.first()
        if entity is None:
            raise NotFound(self.not_found_message)
        return entity

    def exists_anywhere(self, **filters: Any) -> bool:
        """
        Existence probe across all tenants, for store-wide uniqueness rules.

        Returns only a boolean; no row from another tenant leaves this method.
        """
        with self._session_operation("exists_anywhere", is_read_only=True):
            return self.db.query(self.model.id).filter_by(**filters).first() is not None

    def insert(self, tenant_id: int, entity: T) -> T:
        if tenant_id is None:
            raise ValueError(f"{self.entity_name} insert requires a tenant id")
        if entity.tenant_id is not None and entity.tenant_id != tenant_id:
            raise ValueError(f"{self.entity_name} belongs to another tenant")
        entity.tenant_id = tenant_id
        with self._session_operation("insert"):
            self.db.add(entity)
        return entity

    def update(self, tenant_id: int, entity_id: int, patch: Mapping[str, Any]) -> T:
        if self.append_only:
            raise TypeError(f"{self.entity_name} records are append-only")
        entity = self.get(tenant_id, entity_id, for_update=True)
        locked = self.immutable_fields.intersection(patch)
        if locked:
            raise ValueError(f"Cannot modify {', '.join(sorted(locked))} on {self.entity_name}")
        with self._session_operation("update"):
            for field, value in patch.items():
                if not hasattr(self.model, field):
                    raise ValueError(f"{self.entity_name} has no field {field}")
                setattr(entity, field, value)
        return entity

    def delete(self, tenant_id: int, entity_id: int) -> None:
        if self.append_only:
            raise TypeError(f"{self.entity_name} records are append-only")
        entity = self.get(tenant_id, entity_id, for_update=True)
        with self._session_operation("delete"):
            self.db.delete(entity)
