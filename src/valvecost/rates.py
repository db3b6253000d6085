"""
Supplier rate table.

Rates are held in a fixed-depth nested mapping::

    material -> sub-material (grade) -> size -> [RateEntry, ...]

A missing key at any level means "no data". Within one cell the pair
``(process_type, supplier)`` is unique; :meth:`RateTable.set_rate` is the only
writer and always upserts.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .models import BulkRule, RateEntry

LOGGER = logging.getLogger(__name__)

SizeRates = Dict[str, List[RateEntry]]
SubMaterialRates = Dict[str, SizeRates]
MaterialRates = Dict[str, SubMaterialRates]


def _validate_rate(rate: object) -> float:
    try:
        value = float(rate)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Rate must be a number, got {rate!r}") from exc
    if math.isnan(value) or value < 0:
        raise ValueError(f"Rate must be a non-negative number, got {rate!r}")
    return value


class RateTable:
    def __init__(self) -> None:
        self._rates: MaterialRates = {}

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_entries())

    def set_rate(
        self,
        material: str,
        sub_material: str,
        size: str,
        process_type: str,
        supplier: str,
        rate: float,
    ) -> None:
        """Insert or overwrite the rate for one (process, supplier) pair in a cell."""
        value = _validate_rate(rate)
        size = str(size)

        if material not in self._rates:
            self._rates[material] = {}
        grades = self._rates[material]
        if sub_material not in grades:
            grades[sub_material] = {}
        sizes = grades[sub_material]
        if size not in sizes:
            sizes[size] = []
        entries = sizes[size]

        for position, entry in enumerate(entries):
            if entry.process_type == process_type and entry.supplier == supplier:
                entries[position] = replace(entry, rate=value)
                return
        entries.append(RateEntry(supplier=supplier, process_type=process_type, rate=value))

    def cell(self, material: str, sub_material: str, size: str) -> Optional[List[RateEntry]]:
        """Return the stored entry list for a cell, or ``None`` when any level is absent."""
        return self._rates.get(material, {}).get(sub_material, {}).get(str(size))

    def grades(self, material: str) -> SubMaterialRates:
        return self._rates.get(material, {})

    def materials(self) -> List[str]:
        return list(self._rates)

    def sub_materials(self, material: str) -> List[str]:
        return list(self._rates.get(material, {}))

    def sizes(self, material: str, sub_material: str) -> List[str]:
        return list(self._rates.get(material, {}).get(sub_material, {}))

    def iter_entries(self) -> Iterator[Tuple[str, str, str, RateEntry]]:
        for material, grades in self._rates.items():
            for sub_material, sizes in grades.items():
                for size, entries in sizes.items():
                    for entry in entries:
                        yield material, sub_material, size, entry


def apply_bulk_rule(
    table: RateTable,
    material: str,
    rule: BulkRule,
    sizes: Sequence[str],
    process_type: str,
    supplier: str,
) -> List[str]:
    """Write ``rule.rate`` for every size between ``rule.from_size`` and ``rule.to_size``.

    ``sizes`` gives the display order of size labels; the range is inclusive
    and may be given in either direction. Returns the sizes written, or an
    empty list when either bound is not in ``sizes``.
    """
    labels = [str(size) for size in sizes]
    try:
        start = labels.index(str(rule.from_size))
        end = labels.index(str(rule.to_size))
    except ValueError:
        LOGGER.debug(
            "Bulk rule %s-%s does not match the size list; nothing written",
            rule.from_size,
            rule.to_size,
        )
        return []
    if start > end:
        start, end = end, start
    written = labels[start : end + 1]
    for size in written:
        table.set_rate(material, rule.material, size, process_type, supplier, rule.rate)
    LOGGER.debug(
        "Applied bulk rate %.2f to %s/%s for %d sizes", rule.rate, material, rule.material, len(written)
    )
    return written


__all__ = ["RateTable", "apply_bulk_rule", "MaterialRates", "SubMaterialRates", "SizeRates"]
