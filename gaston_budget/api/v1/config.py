"""GET/PUT /v1/entities/{entity_id}/config - categories, budget items, debts, goals"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gaston_budget.api.dependencies import get_document_store, get_entity
from gaston_budget.api.documents import load_config, save_config
from gaston_budget.api.v1.schemas import CategoryCreate, ConfigResponse, ConfigSchema, ConfigUpdate
from gaston_budget.domain.entity_config import (
    add_category,
    keep_goal_balances,
    remove_category,
    validate_config,
)
from gaston_budget.domain.models import Entity
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.infrastructure.database.session import get_db

router = APIRouter()


def _response(entity_id: str, config, revision: int) -> ConfigResponse:
    return ConfigResponse(
        entity_id=entity_id,
        revision=revision,
        config=ConfigSchema.model_validate(config),
    )


@router.get("/entities/{entity_id}/config", response_model=ConfigResponse)
def get_config(
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    config, revision = load_config(store, entity)
    return _response(entity.id, config, revision)


@router.put("/entities/{entity_id}/config", response_model=ConfigResponse)
def replace_config(
    request_body: ConfigUpdate,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Replace the whole configuration.

    Fails with 409 when `expected_revision` is not the stored revision, so two
    editors cannot silently overwrite each other. Budget expense categories
    must be configured (422). Existing goals keep their stored balance and
    contribution log; funds only arrive through the goal funds endpoint.
    """
    stored, _ = load_config(store, entity)
    config = keep_goal_balances(stored, request_body.config.to_domain())
    validate_config(config)
    revision = save_config(store, entity.id, config, request_body.expected_revision, date.today())
    db.commit()
    return _response(entity.id, config, revision)


@router.post("/entities/{entity_id}/config/categories", response_model=ConfigResponse)
def create_category(
    request_body: CategoryCreate,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    config, revision = load_config(store, entity)
    config = add_category(config, request_body.name)
    revision = save_config(store, entity.id, config, revision, date.today())
    db.commit()
    return _response(entity.id, config, revision)


@router.delete("/entities/{entity_id}/config/categories/{name}", response_model=ConfigResponse)
def delete_category(
    name: str,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    config, revision = load_config(store, entity)
    config = remove_category(config, name)
    revision = save_config(store, entity.id, config, revision, date.today())
    db.commit()
    return _response(entity.id, config, revision)
