from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

MAKE = "MAKE"
BUY = "BUY"
MATERIAL_TYPES = (MAKE, BUY)


def normalize_material_type(value: object | None) -> Optional[str]:
    """Return ``MAKE``, ``BUY`` or ``None`` for a user supplied type value."""
    if value is None:
        return None
    text = str(value).strip().upper()
    if not text:
        return None
    if text not in MATERIAL_TYPES:
        raise ValueError(f"Material type must be MAKE, BUY or empty, got {value!r}")
    return text


@dataclass
class ProcessSourcing:
    """Suppliers eligible to run one manufacturing or procurement process."""

    process_type: str
    suppliers: List[str] = field(default_factory=list)

    def add_supplier(self, supplier: str) -> bool:
        if supplier in self.suppliers:
            return False
        self.suppliers.append(supplier)
        return True


@dataclass
class Material:
    """A BOM node: one part of the assembly and how it can be sourced."""

    name: str
    qty: float = 1
    type: Optional[str] = None
    id: Optional[str] = None
    sourcing: List[ProcessSourcing] = field(default_factory=list)
    children: List["Material"] = field(default_factory=list)

    def find_process(self, process_type: str) -> Optional[ProcessSourcing]:
        return next((ps for ps in self.sourcing if ps.process_type == process_type), None)

    def sourcing_pairs(self) -> set[tuple[str, str]]:
        return {(ps.process_type, supplier) for ps in self.sourcing for supplier in ps.suppliers}


@dataclass(frozen=True)
class RateEntry:
    """Quoted unit price for a supplier executing a process."""

    supplier: str
    process_type: str
    rate: float

    @property
    def key(self) -> tuple[str, str]:
        return (self.process_type, self.supplier)


@dataclass(frozen=True)
class BulkRule:
    """One rate applied to a grade row across an inclusive size range."""

    material: str
    rate: float
    from_size: str
    to_size: str


@dataclass
class ProductConfig:
    product: Optional[str] = None
    selected_sizes: List[str] = field(default_factory=list)
    lp_factor: float = 1.0

    def set_product(self, name: Optional[str]) -> None:
        self.product = name

    def set_sizes(self, sizes: List[str]) -> None:
        self.selected_sizes = [str(size) for size in sizes]

    def set_lp_factor(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"LP factor must be positive, got {value!r}")
        self.lp_factor = float(value)


__all__ = [
    "MAKE",
    "BUY",
    "MATERIAL_TYPES",
    "normalize_material_type",
    "ProcessSourcing",
    "Material",
    "RateEntry",
    "BulkRule",
    "ProductConfig",
]
