from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Tuple

from .catalog import PROCESS_RATE_MULTIPLIERS
from .rates import RateTable

LOGGER = logging.getLogger(__name__)


def effective_rate(
    material: str,
    process_type: str,
    base_rate: float,
    multipliers: Mapping[Tuple[str, str], float],
) -> float:
    return float(base_rate) * float(multipliers.get((material, process_type), 1.0))


def build_initial_rates(
    valid_combos: Mapping[str, Mapping[str, Iterable[str]]],
    sub_materials_map: Mapping[str, Iterable[str]],
    base_prices: Mapping[str, Mapping[str, Mapping[object, float]]],
    multipliers: Optional[Mapping[Tuple[str, str], float]] = None,
) -> RateTable:
    """
    Build the starting rate table from the sourcing catalog and base prices.

    Parameters
    ----------
    valid_combos:
        Material name -> process -> eligible supplier names.
    sub_materials_map:
        Material name -> applicable grades.
    base_prices:
        Material name -> grade -> size -> base rate.
    multipliers:
        Surcharge factors keyed on ``(material, process)``; defaults to
        :data:`~valvecost.catalog.PROCESS_RATE_MULTIPLIERS`.

    Returns
    -------
    RateTable
        One entry per (material, grade, size, process, supplier) for which a
        base price exists. Inputs are only read.

    Notes
    -----
    Entries are written through :meth:`RateTable.set_rate`, so a supplier
    listed twice under one process still yields a single entry per cell.
    """

    factors = PROCESS_RATE_MULTIPLIERS if multipliers is None else multipliers
    table = RateTable()
    for material, processes in valid_combos.items():
        grades = list(sub_materials_map.get(material) or [])
        material_prices = base_prices.get(material) or {}
        for process_type, suppliers in processes.items():
            for supplier in suppliers:
                for grade in grades:
                    grade_prices = material_prices.get(grade)
                    if not grade_prices:
                        continue
                    for size, base_rate in grade_prices.items():
                        rate = effective_rate(material, process_type, base_rate, factors)
                        table.set_rate(material, grade, str(size), process_type, supplier, rate)
    LOGGER.info(
        "Seeded %d rate entries across %d materials", len(table), len(table.materials())
    )
    return table


__all__ = ["build_initial_rates", "effective_rate"]
