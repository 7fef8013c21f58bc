"""GET/PUT /v1/entities/{entity_id}/trip - shared trip expense groups"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gaston_budget.api.dependencies import get_document_store, get_entity
from gaston_budget.api.documents import load_trip, save_trip
from gaston_budget.api.v1.schemas import GroupSummarySchema, TripGroupView, TripResponse, TripSchema, TripUpdate
from gaston_budget.domain.goals import trip_group_summary
from gaston_budget.domain.models import Entity, TripLedger
from gaston_budget.domain.ports import DocumentStore
from gaston_budget.infrastructure.database.session import get_db

router = APIRouter()


def _response(entity_id: str, trip: TripLedger, revision: int) -> TripResponse:
    return TripResponse(
        entity_id=entity_id,
        revision=revision,
        trip=TripSchema.model_validate(trip),
        groups=[
            TripGroupView(
                id=g.id,
                name=g.name,
                summary=GroupSummarySchema.model_validate(trip_group_summary(g)),
            )
            for g in trip.groups
        ],
    )


@router.get("/entities/{entity_id}/trip", response_model=TripResponse)
def get_trip(
    entity: Entity = Depends(get_entity),
    store: DocumentStore = Depends(get_document_store),
):
    trip, revision = load_trip(store, entity.id)
    return _response(entity.id, trip, revision)


@router.put("/entities/{entity_id}/trip", response_model=TripResponse)
def replace_trip(
    request_body: TripUpdate,
    entity: Entity = Depends(get_entity),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
):
    """Replace all groups; 409 when `expected_revision` is stale"""
    trip = request_body.trip.to_domain()
    revision = save_trip(store, entity.id, trip, request_body.expected_revision)
    db.commit()
    return _response(entity.id, trip, revision)
