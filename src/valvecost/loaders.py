"""Read seeding inputs (base prices, valid combos, grades) from CSV or Excel files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

import pandas as pd

LOGGER = logging.getLogger(__name__)


class CatalogFileError(ValueError):
    """Raised when a catalog file cannot be parsed."""


BASE_PRICE_COLUMNS = ("MATERIAL", "SUB_MATERIAL", "SIZE", "BASE_RATE")
VALID_COMBO_COLUMNS = ("MATERIAL", "PROCESS_TYPE", "SUPPLIER")
SUB_MATERIAL_COLUMNS = ("MATERIAL", "SUB_MATERIAL")


def _read_table(path: Path, required: Iterable[str]) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise CatalogFileError(f"Catalog file not found: {path}")
    suffix = path.suffix.lower()
    try:
        if suffix in {".xlsx", ".xlsm"}:
            frame = pd.read_excel(path, dtype=str, engine="openpyxl")
        else:
            frame = pd.read_csv(path, dtype=str)
    except (OSError, ValueError) as exc:
        raise CatalogFileError(f"Unable to read {path}: {exc}") from exc

    frame.columns = [str(col).strip().upper() for col in frame.columns]
    missing = [col for col in required if col not in frame.columns]
    if missing:
        raise CatalogFileError(f"{path.name} is missing required columns: {', '.join(missing)}")

    frame = frame.dropna(how="all")
    for col in required:
        frame[col] = frame[col].fillna("").astype(str).str.strip()
    if frame.empty:
        raise CatalogFileError(f"{path.name} contains no rows")
    LOGGER.debug("Read %d rows from %s", len(frame), path)
    return frame


def _require_keys(frame: pd.DataFrame, columns: Iterable[str], path: Path) -> None:
    for col in columns:
        blank = frame.index[frame[col] == ""]
        if len(blank):
            # header is line 1
            line_number = int(blank[0]) + 2
            raise CatalogFileError(f"{Path(path).name} row {line_number}: {col} is required")


def load_base_prices(path: Path) -> Dict[str, Dict[str, Dict[str, float]]]:
    """Return material -> grade -> size -> base rate from a price sheet."""

    frame = _read_table(path, BASE_PRICE_COLUMNS)
    _require_keys(frame, ("MATERIAL", "SUB_MATERIAL", "SIZE"), path)
    rates = pd.to_numeric(frame["BASE_RATE"].str.replace(",", "", regex=False), errors="coerce")
    bad = rates.isna() | (rates < 0)
    if bad.any():
        line_number = int(frame.index[bad.to_numpy()][0]) + 2
        raise CatalogFileError(
            f"{Path(path).name} row {line_number}: BASE_RATE must be a non-negative number"
        )

    prices: Dict[str, Dict[str, Dict[str, float]]] = {}
    for material, grade, size, rate in zip(frame["MATERIAL"], frame["SUB_MATERIAL"], frame["SIZE"], rates):
        prices.setdefault(material, {}).setdefault(grade, {})[size] = float(rate)
    return prices


def load_valid_combos(path: Path) -> Dict[str, Dict[str, List[str]]]:
    """Return material -> process -> suppliers, dropping repeated rows."""

    frame = _read_table(path, VALID_COMBO_COLUMNS)
    _require_keys(frame, VALID_COMBO_COLUMNS, path)
    combos: Dict[str, Dict[str, List[str]]] = {}
    for material, process_type, supplier in zip(frame["MATERIAL"], frame["PROCESS_TYPE"], frame["SUPPLIER"]):
        suppliers = combos.setdefault(material, {}).setdefault(process_type, [])
        if supplier not in suppliers:
            suppliers.append(supplier)
    return combos


def load_sub_materials(path: Path) -> Dict[str, List[str]]:
    frame = _read_table(path, SUB_MATERIAL_COLUMNS)
    _require_keys(frame, SUB_MATERIAL_COLUMNS, path)
    grades: Dict[str, List[str]] = {}
    for material, grade in zip(frame["MATERIAL"], frame["SUB_MATERIAL"]):
        names = grades.setdefault(material, [])
        if grade not in names:
            names.append(grade)
    return grades


__all__ = [
    "CatalogFileError",
    "load_base_prices",
    "load_valid_combos",
    "load_sub_materials",
    "BASE_PRICE_COLUMNS",
    "VALID_COMBO_COLUMNS",
    "SUB_MATERIAL_COLUMNS",
]
