"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from gaston_budget.config import settings
from gaston_budget.domain.models import Entity
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.domain.recommendations import PriorityThresholds
from gaston_budget.infrastructure.database.repositories import DocumentRepository, EntityRepository
from gaston_budget.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_document_store(db: Session = Depends(get_db)) -> DocumentStore:
    """Provide the document store bound to the request's session"""
    return DocumentRepository(db)


def get_entity_repository(db: Session = Depends(get_db)) -> EntityRepository:
    return EntityRepository(db)


def get_entity(
    entity_id: str,
    entities: EntityRepository = Depends(get_entity_repository),
) -> Entity:
    """Resolve the path's entity or fail with EntityNotFoundError"""
    return entities.get_entity(entity_id)


def get_priority_thresholds() -> PriorityThresholds:
    return PriorityThresholds(
        high_rate=settings.priority_high_rate,
        medium_rate=settings.priority_medium_rate,
    )
