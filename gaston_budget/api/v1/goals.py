"""POST /v1/entities/{entity_id}/goals/{goal_id}/funds - contribute to a goal"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from gaston_budget.api.dependencies import get_document_store, get_entity, get_request_id
from gaston_budget.api.documents import load_config, save_config
from gaston_budget.api.v1.schemas import FinancialGoalSchema, FundsRequest, GoalResponse
from gaston_budget.domain.entity_config import find_goal, replace_goal
from gaston_budget.domain.exceptions import DocumentNotFoundError
from gaston_budget.domain.goals import add_funds, goal_progress
from gaston_budget.domain.models import Entity
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/entities/{entity_id}/goals/{goal_id}/funds", response_model=GoalResponse, status_code=201)
def add_goal_funds(
    goal_id: str,
    request_body: FundsRequest,
    request: Request,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Append a contribution to the goal's log and raise its current amount"""
    config, revision = load_config(store, entity)
    goal = find_goal(config, goal_id)
    if goal is None:
        raise DocumentNotFoundError(f"Goal {goal_id} not found")

    funded = add_funds(goal, request_body.amount, request_body.date or date.today(), request_body.note)
    revision = save_config(store, entity.id, replace_goal(config, funded), revision, date.today())
    db.commit()

    logging.info(
        "Goal funded",
        extra={
            "request_id": get_request_id(request),
            "entity_id": entity.id,
            "goal_id": goal_id,
            "current_amount": str(funded.current_amount),
        },
    )

    return GoalResponse(
        entity_id=entity.id,
        revision=revision,
        goal=FinancialGoalSchema.model_validate(funded),
        progress_percent=goal_progress(funded),
    )
