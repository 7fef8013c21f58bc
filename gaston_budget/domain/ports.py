"""Storage port consumed by the orchestration layer; the engine never touches it"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

CONFIG_MODULE = "config"
LEDGER_MODULE = "ledger"
TRIP_MODULE = "trip"


@dataclass(frozen=True)
class StoredDocument:
    data: Dict[str, Any]
    revision: int


class DocumentStore(Protocol):
    """Whole-document store keyed by entity id, module and optional YYYY-MM"""

    def get(self, entity_id: str, module: str, year_month: str = "") -> Optional[StoredDocument]:
        ...

    def put(
        self,
        entity_id: str,
        module: str,
        data: Dict[str, Any],
        expected_revision: int,
        year_month: str = "",
    ) -> StoredDocument:
        """
        Replace the document if its revision still equals `expected_revision`
        (0 means the document must not exist yet).

        Raises:
            ConcurrentUpdateError: the stored revision moved on
        """
        ...

    def list_year_months(self, entity_id: str, module: str) -> List[str]:
        ...
