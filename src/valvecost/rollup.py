from __future__ import annotations

from typing import Iterator, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .models import Material
from .rates import RateTable
from .resolver import RateResolver
from .sourcing import SourcingRegistry

RATE_COLUMNS = ["MATERIAL", "SUB_MATERIAL", "SIZE", "PROCESS_TYPE", "SUPPLIER", "RATE"]
ROLLUP_COLUMNS = [
    "MATERIAL_ID",
    "MATERIAL",
    "TYPE",
    "DEPTH",
    "QTY",
    "SUB_MATERIAL",
    "PROCESS_TYPE",
    "SUPPLIER",
    "UNIT_RATE",
    "EXTENDED_COST",
]

Selection = Tuple[str, str, str]


def rates_frame(table: RateTable) -> pd.DataFrame:
    """Flatten the rate table into one row per entry."""
    rows = [
        (material, sub_material, size, entry.process_type, entry.supplier, entry.rate)
        for material, sub_material, size, entry in table.iter_entries()
    ]
    frame = pd.DataFrame(rows, columns=RATE_COLUMNS)
    frame["RATE"] = frame["RATE"].astype(float)
    return frame


def _walk(materials: List[Material], multiplier: float = 1.0, depth: int = 0) -> Iterator[Tuple[Material, float, int]]:
    for material in materials:
        qty = float(material.qty) * multiplier
        yield material, qty, depth
        yield from _walk(material.children, qty, depth + 1)


def cost_rollup(
    registry: SourcingRegistry,
    resolver: RateResolver,
    size: str,
    selections: Mapping[str, Selection],
    lp_factor: float = 1.0,
) -> pd.DataFrame:
    """
    Price every BOM node at one valve size.

    ``selections`` maps a material name to the ``(sub_material, process_type,
    supplier)`` chosen for it. Child quantities are multiplied by their
    parent's quantity. Nodes without a selection or without a stored rate get
    ``NaN`` for ``UNIT_RATE`` and ``EXTENDED_COST``.
    """

    rows = []
    for material, qty, depth in _walk(registry.materials):
        choice: Optional[Selection] = selections.get(material.name)
        unit_rate = np.nan
        sub_material = process_type = supplier = None
        if choice is not None:
            sub_material, process_type, supplier = choice
            rate = resolver.get_rate(material.name, sub_material, str(size), process_type, supplier)
            if rate is not None:
                unit_rate = rate
        rows.append(
            {
                "MATERIAL_ID": material.id,
                "MATERIAL": material.name,
                "TYPE": material.type,
                "DEPTH": depth,
                "QTY": qty,
                "SUB_MATERIAL": sub_material,
                "PROCESS_TYPE": process_type,
                "SUPPLIER": supplier,
                "UNIT_RATE": unit_rate,
            }
        )
    frame = pd.DataFrame(rows, columns=ROLLUP_COLUMNS[:-1])
    frame["UNIT_RATE"] = frame["UNIT_RATE"].astype(float)
    frame["EXTENDED_COST"] = frame["QTY"].astype(float) * frame["UNIT_RATE"] * float(lp_factor)
    return frame


def make_summary_text(rollup: pd.DataFrame, top: int = 5) -> str:
    priced = rollup.dropna(subset=["EXTENDED_COST"])
    total = float(priced["EXTENDED_COST"].sum())
    missing = int(rollup["EXTENDED_COST"].isna().sum())
    drivers = priced.sort_values("EXTENDED_COST", ascending=False).head(top)[
        ["MATERIAL", "SUB_MATERIAL", "SUPPLIER", "QTY", "UNIT_RATE", "EXTENDED_COST"]
    ]
    text = f"Assembly subtotal (qty x rate x LP factor): {total:,.2f}.\n"
    if not drivers.empty:
        text += f"Top cost drivers:\n{drivers.to_string(index=False)}\n"
    if missing:
        text += f"{missing} BOM line(s) have no rate for the selected size.\n"
    return text


__all__ = ["rates_frame", "cost_rollup", "make_summary_text", "RATE_COLUMNS", "ROLLUP_COLUMNS"]
