"""Read-only queries over a :class:`~valvecost.rates.RateTable`."""
from __future__ import annotations

from typing import List, Optional

from .models import RateEntry
from .rates import RateTable


class RateResolver:
    """Stateless lookups; callers that repeat combo checks may cache results themselves."""

    def __init__(self, table: RateTable) -> None:
        self._table = table

    def get_entries_for_cell(self, material: str, sub_material: str, size: str) -> List[RateEntry]:
        entries = self._table.cell(material, sub_material, size)
        return list(entries) if entries else []

    def get_rate(
        self,
        material: str,
        sub_material: str,
        size: str,
        process_type: str,
        supplier: str,
    ) -> Optional[float]:
        """Return the rate for the full key, or ``None`` when nothing is stored.

        ``0.0`` is a real rate and is returned as such.
        """
        entries = self._table.cell(material, sub_material, size)
        if not entries:
            return None
        for entry in entries:
            if entry.process_type == process_type and entry.supplier == supplier:
                return entry.rate
        return None

    def has_rates_for_combo(self, material: str, process_type: str, supplier: str) -> bool:
        for sizes in self._table.grades(material).values():
            for entries in sizes.values():
                if any(e.process_type == process_type and e.supplier == supplier for e in entries):
                    return True
        return False


__all__ = ["RateResolver"]
