"""Reconcile sourcing options against the rate table."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from .rates import RateTable
from .sourcing import SourcingRegistry

LOGGER = logging.getLogger(__name__)

UNSOURCED_RATE = "unsourced-rate"
UNPRICED_SOURCING = "unpriced-sourcing"


@dataclass(frozen=True)
class ConsistencyIssue:
    kind: str
    material: str
    process_type: str
    supplier: str


def _priced_pairs(table: RateTable) -> Dict[str, Set[Tuple[str, str]]]:
    priced: Dict[str, Set[Tuple[str, str]]] = {}
    for material, _sub, _size, entry in table.iter_entries():
        priced.setdefault(material, set()).add(entry.key)
    return priced


def check_consistency(registry: SourcingRegistry, table: RateTable) -> List[ConsistencyIssue]:
    """
    Compare the (process, supplier) pairs known to each structure.

    Reports pairs priced in ``table`` but absent from every registry material
    of that name (``unsourced-rate``), and pairs sourced in ``registry`` with no
    rate anywhere under the material (``unpriced-sourcing``). Rates for
    materials that are not in the BOM at all are not reported. Neither
    structure is modified.
    """

    priced = _priced_pairs(table)
    names = sorted({material.name for material in registry.iter_materials()})
    issues: List[ConsistencyIssue] = []
    for name in names:
        sourced = registry.valid_pairs(name)
        rated = priced.get(name, set())
        for process_type, supplier in sorted(rated - sourced):
            issues.append(ConsistencyIssue(UNSOURCED_RATE, name, process_type, supplier))
        for process_type, supplier in sorted(sourced - rated):
            issues.append(ConsistencyIssue(UNPRICED_SOURCING, name, process_type, supplier))

    if issues:
        LOGGER.warning(
            "Sourcing/rate mismatch: %d unsourced rate pair(s), %d unpriced sourcing pair(s)",
            sum(1 for issue in issues if issue.kind == UNSOURCED_RATE),
            sum(1 for issue in issues if issue.kind == UNPRICED_SOURCING),
        )
    return issues


__all__ = ["ConsistencyIssue", "check_consistency", "UNSOURCED_RATE", "UNPRICED_SOURCING"]
