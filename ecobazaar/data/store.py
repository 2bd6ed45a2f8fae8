# ecobazaar/data/store.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Sequence

Record = Dict[str, Any]
Filters = Mapping[str, Any]


class RecordStore(ABC):
    """
    Generic table-oriented store.

    - every call touches one table and is atomic on its own
    - there is no transaction spanning calls or tables
    - filters are equality matches; a list/tuple/set value means IN, None means IS NULL
    - ``order`` uses the PostgREST form, e.g. ``"created_at.desc"``
    - ``embed`` names a related table joined through a foreign key, the related
      record lands under that name (``cart_items`` + ``"products"``)

    Implementations raise ``StoreError`` for every failed call.
    """

    @abstractmethod
    def insert(self, table: str, records: Sequence[Mapping[str, Any]]) -> List[Record]:
        """Insert records, returning them as stored (generated id/timestamps included)."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order: str | None = None,
        embed: str | None = None,
    ) -> List[Record]:
        ...

    @abstractmethod
    def update(self, table: str, patch: Mapping[str, Any], filters: Filters) -> int:
        """Apply ``patch`` to matching rows, returning the affected count."""

    @abstractmethod
    def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows, returning the affected count."""

    @abstractmethod
    def ping(self) -> bool:
        ...


def parse_order(order: str | None) -> List[tuple[str, bool]]:
    """``"created_at.desc,name"`` -> ``[("created_at", True), ("name", False)]``"""
    if not order:
        return []
    parsed = []
    for part in order.split(","):
        column, _, direction = part.strip().partition(".")
        parsed.append((column, direction.lower() == "desc"))
    return parsed
