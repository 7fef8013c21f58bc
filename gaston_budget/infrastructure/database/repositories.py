"""Data access layer for entities and their documents"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gaston_budget.domain.exceptions import ConcurrentUpdateError, EntityNotFoundError
from gaston_budget.domain.models import Entity, EntityKind
from gaston_budget.domain.ports import StoredDocument
from gaston_budget.infrastructure.database.models import BudgetDocument, BudgetEntity
from gaston_budget.infrastructure.observability.metrics import document_conflict_counter, document_write_counter

logger = logging.getLogger(__name__)


def _to_entity(row: BudgetEntity) -> Entity:
    return Entity(id=row.id, name=row.name, kind=EntityKind(row.kind), owner_id=row.owner_id)


class EntityRepository:
    """Repository for budgeting entities"""

    def __init__(self, db: Session):
        self.db = db

    def create_entity(self, name: str, kind: EntityKind, owner_id: str) -> Entity:
        row = BudgetEntity(name=name, kind=kind.value, owner_id=owner_id)
        self.db.add(row)
        self.db.flush()  # Get ID without committing
        return _to_entity(row)

    def get_entity(self, entity_id: str) -> Entity:
        row = self.db.get(BudgetEntity, entity_id)
        if row is None:
            raise EntityNotFoundError(f"Entity {entity_id} not found")
        return _to_entity(row)

    def list_by_owner(self, owner_id: str) -> List[Entity]:
        rows = self.db.execute(
            select(BudgetEntity)
            .where(BudgetEntity.owner_id == owner_id)
            .order_by(BudgetEntity.created_at, BudgetEntity.name)
        ).scalars()
        return [_to_entity(r) for r in rows]


class DocumentRepository:
    """
    SQL-backed document store.

    Writes are compare-and-swap on the revision column: the UPDATE only
    matches the row at the expected revision, and inserts rely on the
    (entity, module, year_month) unique key.
    """

    def __init__(self, db: Session):
        self.db = db

    def _row(self, entity_id: str, module: str, year_month: str) -> Optional[BudgetDocument]:
        return self.db.execute(
            select(BudgetDocument).where(
                BudgetDocument.entity_id == entity_id,
                BudgetDocument.module == module,
                BudgetDocument.year_month == year_month,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get(self, entity_id: str, module: str, year_month: str = "") -> Optional[StoredDocument]:
        row = self._row(entity_id, module, year_month)
        if row is None:
            return None
        return StoredDocument(data=row.data, revision=row.revision)

    def put(
        self,
        entity_id: str,
        module: str,
        data: Dict[str, Any],
        expected_revision: int,
        year_month: str = "",
    ) -> StoredDocument:
        if expected_revision == 0:
            stored = self._insert(entity_id, module, data, year_month)
        else:
            stored = self._update(entity_id, module, data, expected_revision, year_month)

        document_write_counter.labels(module=module).inc()
        return stored

    def _insert(self, entity_id: str, module: str, data: Dict[str, Any], year_month: str) -> StoredDocument:
        current = self._row(entity_id, module, year_month)
        if current is not None:
            document_conflict_counter.labels(module=module).inc()
            raise ConcurrentUpdateError(0, current.revision)

        self.db.add(
            BudgetDocument(
                entity_id=entity_id,
                module=module,
                year_month=year_month,
                data=data,
                revision=1,
            )
        )
        try:
            self.db.flush()
        except IntegrityError as e:
            # Another writer created the document between the check and the flush
            document_conflict_counter.labels(module=module).inc()
            raise ConcurrentUpdateError(0, 1) from e

        return StoredDocument(data=data, revision=1)

    def _update(
        self,
        entity_id: str,
        module: str,
        data: Dict[str, Any],
        expected_revision: int,
        year_month: str,
    ) -> StoredDocument:
        result = self.db.execute(
            update(BudgetDocument)
            .where(
                BudgetDocument.entity_id == entity_id,
                BudgetDocument.module == module,
                BudgetDocument.year_month == year_month,
                BudgetDocument.revision == expected_revision,
            )
            .values(data=data, revision=expected_revision + 1)
            .execution_options(synchronize_session="fetch")
        )

        if result.rowcount != 1:
            current = self._row(entity_id, module, year_month)
            actual = current.revision if current else 0
            document_conflict_counter.labels(module=module).inc()
            logger.warning(
                "Document write conflict",
                extra={
                    "entity_id": entity_id,
                    "module": module,
                    "year_month": year_month,
                    "expected_revision": expected_revision,
                    "actual_revision": actual,
                },
            )
            raise ConcurrentUpdateError(expected_revision, actual)

        return StoredDocument(data=data, revision=expected_revision + 1)

    def list_year_months(self, entity_id: str, module: str) -> List[str]:
        rows = self.db.execute(
            select(BudgetDocument.year_month).where(
                BudgetDocument.entity_id == entity_id,
                BudgetDocument.module == module,
                BudgetDocument.year_month != "",
            )
        ).scalars()
        return sorted(rows)
