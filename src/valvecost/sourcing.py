"""BOM part list and the sourcing options for each part."""
from __future__ import annotations

import itertools
import logging
import uuid
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from .models import Material, ProcessSourcing, normalize_material_type

LOGGER = logging.getLogger(__name__)

ID_STRATEGIES = ("uuid", "counter")


def make_id_factory(strategy: str = "uuid") -> Callable[[], str]:
    """Return a collision-free id generator.

    ``uuid`` yields random UUID4 hex tokens; ``counter`` yields ``mat-1``,
    ``mat-2``, ... from a counter private to the returned callable.
    """
    key = (strategy or "uuid").strip().lower()
    if key == "uuid":
        return lambda: uuid.uuid4().hex
    if key == "counter":
        counter = itertools.count(1)
        return lambda: f"mat-{next(counter)}"
    raise ValueError(f"Unknown id strategy {strategy!r}; expected one of {', '.join(ID_STRATEGIES)}")


def _validate_qty(qty: object) -> float:
    try:
        value = float(qty)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Material qty must be a number, got {qty!r}") from exc
    if value <= 0:
        raise ValueError(f"Material qty must be positive, got {qty!r}")
    return value


def _coerce_qty(qty: object, name: str) -> float:
    try:
        return _validate_qty(qty)
    except ValueError as exc:
        LOGGER.warning("%s; using qty 1 for %s", exc, name)
        return 1.0


def _coerce_type(value: object | None, name: str) -> Optional[str]:
    try:
        return normalize_material_type(value)
    except ValueError as exc:
        LOGGER.warning("%s; leaving type of %s unset", exc, name)
        return None


class SourcingRegistry:
    """Owns the BOM materials and their (process, supplier) sourcing options.

    Materials live in nested ``children`` lists for display, while an id index
    gives direct access to any node in the tree.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None) -> None:
        self._materials: List[Material] = []
        self._index: Dict[str, Material] = {}
        self._parents: Dict[str, Optional[str]] = {}
        self._new_id = id_factory or make_id_factory("uuid")

    @property
    def materials(self) -> List[Material]:
        return self._materials

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, material_id: object) -> bool:
        return material_id in self._index

    def iter_materials(self) -> Iterator[Material]:
        """Walk every material depth-first, parents before children."""
        stack = list(reversed(self._materials))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_material(self, material_id: str) -> Optional[Material]:
        return self._index.get(material_id)

    def find_by_name(self, name: str) -> List[Material]:
        return [material for material in self.iter_materials() if material.name == name]

    def add_material(self, material: Material, parent_id: Optional[str] = None) -> Material:
        """Register ``material`` (and any children) and return the stored node.

        Never fails. The whole subtree is built first and registered in one
        step. Stored nodes start with empty sourcing; a missing or already
        taken id is replaced by a generated one, a qty that is not a positive
        number becomes 1 and an unknown type becomes ``None``. An unknown
        ``parent_id`` places the material at the top level.
        """
        parent = self._index.get(parent_id) if parent_id is not None else None
        if parent is None and parent_id is not None:
            LOGGER.debug("Parent %s not found; adding %s at top level", parent_id, material.name)

        staged = self._stage(material, parent.id if parent is not None else None, set())
        stored = staged[0][0]
        if parent is None:
            self._materials.append(stored)
        else:
            parent.children.append(stored)
        for node, node_parent in staged:
            self._index[node.id] = node
            self._parents[node.id] = node_parent
        return stored

    def _stage(
        self, material: Material, parent_id: Optional[str], taken: Set[str]
    ) -> List[Tuple[Material, Optional[str]]]:
        material_id = material.id
        if not material_id or material_id in self._index or material_id in taken:
            if material_id:
                LOGGER.warning("Material id %s is already in use; assigning a new id", material_id)
            material_id = self._generate_id(taken)
        taken.add(material_id)

        stored = Material(
            name=material.name,
            qty=_coerce_qty(material.qty, material.name),
            type=_coerce_type(material.type, material.name),
            id=material_id,
        )
        staged: List[Tuple[Material, Optional[str]]] = [(stored, parent_id)]
        for child in material.children:
            child_staged = self._stage(child, material_id, taken)
            stored.children.append(child_staged[0][0])
            staged.extend(child_staged)
        return staged

    def delete_material(self, material_id: str) -> None:
        node = self._index.get(material_id)
        if node is None:
            LOGGER.debug("delete_material: no material with id %s", material_id)
            return
        parent_id = self._parents.get(material_id)
        siblings = self._materials if parent_id is None else self._index[parent_id].children
        siblings[:] = [item for item in siblings if item.id != material_id]
        for removed in self._subtree(node):
            self._index.pop(removed.id, None)
            self._parents.pop(removed.id, None)

    def add_supplier_to_process(self, material_id: str, process_type: str, supplier: str) -> None:
        material = self._index.get(material_id)
        if material is None:
            LOGGER.debug("add_supplier_to_process: no material with id %s", material_id)
            return
        sourcing = material.find_process(process_type)
        if sourcing is None:
            sourcing = ProcessSourcing(process_type=process_type)
            material.sourcing.append(sourcing)
        sourcing.add_supplier(supplier)

    def set_quantity(self, material_id: str, qty: float) -> None:
        material = self._index.get(material_id)
        if material is None:
            LOGGER.debug("set_quantity: no material with id %s", material_id)
            return
        material.qty = _validate_qty(qty)

    def set_type(self, material_id: str, material_type: Optional[str]) -> None:
        material = self._index.get(material_id)
        if material is None:
            LOGGER.debug("set_type: no material with id %s", material_id)
            return
        material.type = normalize_material_type(material_type)

    def valid_pairs(self, material_name: str) -> set[tuple[str, str]]:
        """Return every (process, supplier) pair sourced for materials named ``material_name``."""
        pairs: set[tuple[str, str]] = set()
        for material in self.find_by_name(material_name):
            pairs |= material.sourcing_pairs()
        return pairs

    def _generate_id(self, taken: Set[str] = frozenset()) -> str:
        candidate = self._new_id()
        while candidate in self._index or candidate in taken:
            candidate = self._new_id()
        return candidate

    @staticmethod
    def _subtree(node: Material) -> Iterable[Material]:
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(current.children)

    @classmethod
    def from_catalog(
        cls,
        bom: Iterable[Mapping[str, object]],
        valid_combos: Mapping[str, Mapping[str, Iterable[str]]],
        id_factory: Optional[Callable[[], str]] = None,
    ) -> "SourcingRegistry":
        """Build a registry from BOM rows whose sourcing mirrors ``valid_combos``."""
        registry = cls(id_factory=id_factory)
        for row in bom:
            material = registry.add_material(
                Material(
                    name=str(row["name"]),
                    qty=row.get("qty", 1),  # type: ignore[arg-type]
                    type=row.get("type"),  # type: ignore[arg-type]
                )
            )
            for process_type, suppliers in (valid_combos.get(material.name) or {}).items():
                for supplier in suppliers:
                    registry.add_supplier_to_process(material.id, process_type, supplier)
        LOGGER.debug("Built sourcing registry with %d materials", len(registry))
        return registry


__all__ = ["SourcingRegistry", "make_id_factory", "ID_STRATEGIES"]
