"""GET /v1/entities/{entity_id}/projects - project spending against contributions"""

from fastapi import APIRouter, Depends

from gaston_budget.api.dependencies import get_document_store, get_entity
from gaston_budget.api.documents import load_config
from gaston_budget.api.v1.schemas import ProjectListResponse, ProjectSchema, ProjectView
from gaston_budget.domain.goals import project_summary
from gaston_budget.domain.models import Entity
from gaston_budget.domain.ports import DocumentStore

router = APIRouter()


@router.get("/entities/{entity_id}/projects", response_model=ProjectListResponse)
def list_projects(
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    """Projects with total spent and balance (contribution - spent, negative when over)"""
    config, _ = load_config(store, entity)

    views = []
    for project in config.projects:
        summary = project_summary(project)
        views.append(
            ProjectView(
                **ProjectSchema.model_validate(project).model_dump(),
                total_spent=summary.total_spent,
                balance=summary.balance,
            )
        )

    return ProjectListResponse(entity_id=entity.id, projects=views)
