# app/repository.py
# Role: Generic CRUD over one ORM table, parameterized by a ResourceSchema.
#       Instantiated once per resource (expenses, earnings, inventory).

"""
Resource repositories.

Every public method takes the request's Session as its first argument, the
same way route handlers receive it from get_db. Each call either returns
ORM rows or raises ValidationError / NotFoundError / StorageError.
"""

from contextlib import contextmanager
from typing import Any, Iterable, List, Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Expense, Earning, InventoryItem
from app.errors import NotFoundError, StorageError
from app.schemas import (
    ResourceSchema,
    EXPENSE_SCHEMA,
    EARNING_SCHEMA,
    INVENTORY_SCHEMA,
)

logger = structlog.get_logger(__name__)


class ResourceRepository:
    def __init__(self, model, schema: ResourceSchema, order_by: Sequence[Any]):
        self.model = model
        self.schema = schema
        self.order_by = tuple(order_by)

    @contextmanager
    def _storage_errors(self, db: Session, message: str):
        """
        Roll back and turn any SQLAlchemy failure into a StorageError whose
        message is safe to show; the driver detail is logged only.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(
                "storage_error",
                resource=self.schema.name,
                error=repr(exc),
                exc_info=True,
            )
            raise StorageError(message) from exc

    def _fetch(self, db: Session, item_id: int):
        obj = db.get(self.model, item_id)
        if obj is None:
            raise NotFoundError(f"{self.schema.item_name} not found")
        return obj

    # ---- Reads ----

    def list(self, db: Session) -> List[Any]:
        with self._storage_errors(db, f"Failed to fetch {self.schema.plural_label}"):
            return db.query(self.model).order_by(*self.order_by).all()

    def get(self, db: Session, item_id: int):
        with self._storage_errors(db, f"Failed to fetch {self.schema.singular_label}"):
            return self._fetch(db, item_id)

    # ---- Writes ----

    def create(self, db: Session, payload: Any):
        values = self.schema.validate(payload)

        with self._storage_errors(db, f"Failed to add {self.schema.singular_label}"):
            obj = self.model(**values)
            db.add(obj)
            db.commit()
            db.refresh(obj)

        logger.info("record_created", resource=self.schema.name, id=obj.id)
        return obj

    def create_many(self, db: Session, payloads: Iterable[Any]) -> List[Any]:
        """
        Validate every payload first, then insert all of them in one commit.
        Nothing is written when any payload is invalid.
        """
        rows = [self.model(**self.schema.validate(p)) for p in payloads]
        if not rows:
            return []

        with self._storage_errors(db, f"Failed to add {self.schema.plural_label}"):
            db.add_all(rows)
            db.commit()
            for obj in rows:
                db.refresh(obj)

        logger.info("records_created", resource=self.schema.name, count=len(rows))
        return rows

    def update(self, db: Session, item_id: int, payload: Any):
        """
        Full replace: every schema field is overwritten with the submitted
        (validated) value.
        """
        values = self.schema.validate(payload)

        with self._storage_errors(db, f"Failed to update {self.schema.singular_label}"):
            obj = self._fetch(db, item_id)
            for name, value in values.items():
                setattr(obj, name, value)
            db.commit()
            db.refresh(obj)

        logger.info("record_updated", resource=self.schema.name, id=item_id)
        return obj

    def delete(self, db: Session, item_id: int) -> None:
        with self._storage_errors(db, f"Failed to delete {self.schema.singular_label}"):
            obj = self._fetch(db, item_id)
            db.delete(obj)
            db.commit()

        logger.info("record_deleted", resource=self.schema.name, id=item_id)


# -------------------------------------------------------------------
# One repository per resource
# -------------------------------------------------------------------

expenses = ResourceRepository(
    Expense,
    EXPENSE_SCHEMA,
    order_by=(Expense.date.desc(), Expense.id.desc()),
)

earnings = ResourceRepository(
    Earning,
    EARNING_SCHEMA,
    order_by=(Earning.date.desc(), Earning.id.desc()),
)

inventory = ResourceRepository(
    InventoryItem,
    INVENTORY_SCHEMA,
    order_by=(InventoryItem.name.asc(), InventoryItem.id.asc()),
)

REPOSITORIES = {repo.schema.name: repo for repo in (expenses, earnings, inventory)}
