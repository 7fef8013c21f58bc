"""Load and save domain documents through the document store port"""

from datetime import date
from typing import Tuple

from gaston_budget.config import settings
from gaston_budget.domain.budget import blank_ledger
from gaston_budget.domain.entity_config import template_config
from gaston_budget.domain.models import Config, Entity, MonthlyLedger, TripLedger
from gaston_budget.domain.ports import (
    CONFIG_MODULE,
    LEDGER_MODULE,
    TRIP_MODULE,
    DocumentStore,
)
from gaston_budget.infrastructure.database.documents import (
    config_from_dict,
    config_to_dict,
    ledger_from_dict,
    ledger_to_dict,
    trip_from_dict,
    trip_to_dict,
)
from gaston_budget.utils.date_utils import to_year_month

CONFIG_HISTORY_MODULE = "config_history"


def load_config(store: DocumentStore, entity: Entity) -> Tuple[Config, int]:
    """Entity config and its revision; the kind's template (revision 0) if never saved"""
    stored = store.get(entity.id, CONFIG_MODULE)
    if stored is None:
        return template_config(entity.kind, currency=settings.default_currency), 0
    return config_from_dict(stored.data), stored.revision


def save_config(
    store: DocumentStore,
    entity_id: str,
    config: Config,
    expected_revision: int,
    today: date,
) -> int:
    """
    Replace the entity config and snapshot it for the current month.

    The snapshot feeds the planned-vs-actual history; it is overwritten on
    every save within the same month.
    """
    data = config_to_dict(config)
    stored = store.put(entity_id, CONFIG_MODULE, data, expected_revision)

    month_key = to_year_month(today)
    snapshot = store.get(entity_id, CONFIG_HISTORY_MODULE, month_key)
    store.put(
        entity_id,
        CONFIG_HISTORY_MODULE,
        data,
        snapshot.revision if snapshot else 0,
        year_month=month_key,
    )
    return stored.revision


def load_config_snapshot(store: DocumentStore, entity_id: str, month_key: str) -> Config | None:
    stored = store.get(entity_id, CONFIG_HISTORY_MODULE, month_key)
    return config_from_dict(stored.data) if stored else None


def load_ledger(store: DocumentStore, entity_id: str, month_key: str) -> Tuple[MonthlyLedger, int]:
    """Month ledger and its revision; an empty month (revision 0) if never saved"""
    stored = store.get(entity_id, LEDGER_MODULE, month_key)
    if stored is None:
        return blank_ledger(), 0
    return ledger_from_dict(stored.data), stored.revision


def save_ledger(
    store: DocumentStore,
    entity_id: str,
    month_key: str,
    ledger: MonthlyLedger,
    expected_revision: int,
) -> int:
    stored = store.put(
        entity_id, LEDGER_MODULE, ledger_to_dict(ledger), expected_revision, year_month=month_key
    )
    return stored.revision


def load_trip(store: DocumentStore, entity_id: str) -> Tuple[TripLedger, int]:
    stored = store.get(entity_id, TRIP_MODULE)
    if stored is None:
        return TripLedger(), 0
    return trip_from_dict(stored.data), stored.revision


def save_trip(store: DocumentStore, entity_id: str, trip: TripLedger, expected_revision: int) -> int:
    return store.put(entity_id, TRIP_MODULE, trip_to_dict(trip), expected_revision).revision
