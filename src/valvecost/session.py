"""Costing session: one sourcing registry and one rate table behind a read/write lock."""
from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from . import catalog
from .config import Config
from .consistency import ConsistencyIssue, check_consistency
from .loaders import load_base_prices, load_sub_materials, load_valid_combos
from .models import BulkRule, Material, ProductConfig, RateEntry
from .rates import RateTable, apply_bulk_rule
from .resolver import RateResolver
from .rollup import Selection, cost_rollup, rates_frame
from .seeding import build_initial_rates
from .sourcing import SourcingRegistry, make_id_factory

LOGGER = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class CostingSession:
    """Owns the registry and rate table for one user session.

    Locks are not re-entrant: methods here must not call each other while
    holding the lock.
    """

    def __init__(
        self,
        registry: SourcingRegistry,
        rates: RateTable,
        product: Optional[ProductConfig] = None,
    ) -> None:
        self._registry = registry
        self._rates = rates
        self._resolver = RateResolver(rates)
        self.product = product or ProductConfig()
        self._lock = ReadWriteLock()

    # Registry reads and writes hand back copies; change state through the methods below.
    def materials(self) -> List[Material]:
        with self._lock.read():
            return copy.deepcopy(self._registry.materials)

    def get_material(self, material_id: str) -> Optional[Material]:
        with self._lock.read():
            return copy.deepcopy(self._registry.get_material(material_id))

    def add_material(self, material: Material, parent_id: Optional[str] = None) -> Material:
        with self._lock.write():
            return copy.deepcopy(self._registry.add_material(material, parent_id=parent_id))

    def delete_material(self, material_id: str) -> None:
        with self._lock.write():
            self._registry.delete_material(material_id)

    def add_supplier_to_process(self, material_id: str, process_type: str, supplier: str) -> None:
        with self._lock.write():
            self._registry.add_supplier_to_process(material_id, process_type, supplier)

    def set_quantity(self, material_id: str, qty: float) -> None:
        with self._lock.write():
            self._registry.set_quantity(material_id, qty)

    def set_type(self, material_id: str, material_type: Optional[str]) -> None:
        with self._lock.write():
            self._registry.set_type(material_id, material_type)

    # Rates
    def set_rate(
        self,
        material: str,
        sub_material: str,
        size: str,
        process_type: str,
        supplier: str,
        rate: float,
    ) -> None:
        with self._lock.write():
            self._rates.set_rate(material, sub_material, size, process_type, supplier, rate)

    def apply_bulk_rule(
        self,
        material: str,
        rule: BulkRule,
        process_type: str,
        supplier: str,
        sizes: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Apply ``rule`` across ``sizes`` (the product's selected sizes by default)."""
        with self._lock.write():
            size_list = list(sizes) if sizes is not None else list(self.product.selected_sizes)
            return apply_bulk_rule(self._rates, material, rule, size_list, process_type, supplier)

    def get_entries_for_cell(self, material: str, sub_material: str, size: str) -> List[RateEntry]:
        with self._lock.read():
            return self._resolver.get_entries_for_cell(material, sub_material, size)

    def get_rate(
        self,
        material: str,
        sub_material: str,
        size: str,
        process_type: str,
        supplier: str,
    ) -> Optional[float]:
        with self._lock.read():
            return self._resolver.get_rate(material, sub_material, size, process_type, supplier)

    def has_rates_for_combo(self, material: str, process_type: str, supplier: str) -> bool:
        with self._lock.read():
            return self._resolver.has_rates_for_combo(material, process_type, supplier)

    # Reports
    def check_consistency(self) -> List[ConsistencyIssue]:
        with self._lock.read():
            return check_consistency(self._registry, self._rates)

    def rates_frame(self) -> pd.DataFrame:
        with self._lock.read():
            return rates_frame(self._rates)

    def cost_rollup(self, size: str, selections: Mapping[str, Selection]) -> pd.DataFrame:
        with self._lock.read():
            return cost_rollup(
                self._registry, self._resolver, size, selections, lp_factor=self.product.lp_factor
            )


def create_session(config: Optional[Config] = None) -> CostingSession:
    """Build a seeded session from the demo catalog, or from the files named in ``config``."""

    cfg = config or Config(base_prices_path=None, valid_combos_path=None, sub_materials_path=None)
    valid_combos = (
        load_valid_combos(cfg.valid_combos_path) if cfg.valid_combos_path else catalog.VALID_DEMO_COMBOS
    )
    sub_materials = (
        load_sub_materials(cfg.sub_materials_path) if cfg.sub_materials_path else catalog.SUB_MATERIALS_MAP
    )
    base_prices = load_base_prices(cfg.base_prices_path) if cfg.base_prices_path else catalog.BASE_PRICE

    registry = SourcingRegistry.from_catalog(
        catalog.DEFAULT_BOM, valid_combos, id_factory=make_id_factory(cfg.id_strategy)
    )
    rates = build_initial_rates(valid_combos, sub_materials, base_prices)
    session = CostingSession(registry, rates, product=ProductConfig(lp_factor=cfg.lp_factor))
    if cfg.check_consistency:
        issues = session.check_consistency()
        for issue in issues:
            LOGGER.debug("%s: %s / %s / %s", issue.kind, issue.material, issue.process_type, issue.supplier)
    return session


__all__ = ["CostingSession", "ReadWriteLock", "create_session"]
