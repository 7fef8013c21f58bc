"""POST/GET /v1/entities - financial spaces owned by a user"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from gaston_budget.api.dependencies import get_document_store, get_entity_repository, get_request_id
from gaston_budget.api.documents import save_config
from gaston_budget.api.v1.schemas import EntityCreate, EntityListResponse, EntityResponse
from gaston_budget.config import settings
from gaston_budget.domain.entity_config import template_config
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.infrastructure.database.repositories import EntityRepository
from gaston_budget.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/entities", response_model=EntityResponse, status_code=201)
def create_entity(
    request_body: EntityCreate,
    request: Request,
    db: Session = Depends(get_db),
    entities: EntityRepository = Depends(get_entity_repository),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Create a household, business or trip and seed its configuration.

    The config is cloned from the template for the entity's kind.
    """
    entity = entities.create_entity(request_body.name, request_body.kind, request_body.owner_id)
    config = template_config(request_body.kind, currency=settings.default_currency)
    save_config(store, entity.id, config, expected_revision=0, today=date.today())
    db.commit()

    logging.info(
        "Entity created",
        extra={
            "request_id": get_request_id(request),
            "entity_id": entity.id,
            "kind": entity.kind.value,
        },
    )
    return EntityResponse.model_validate(entity)


@router.get("/entities", response_model=EntityListResponse)
def list_entities(
    owner_id: str = Query(..., min_length=1, description="Owner identifier"),
    entities: EntityRepository = Depends(get_entity_repository),
):
    return EntityListResponse(
        owner_id=owner_id,
        entities=[EntityResponse.model_validate(e) for e in entities.list_by_owner(owner_id)],
    )
