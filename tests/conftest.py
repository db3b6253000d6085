from __future__ import annotations

import pytest

from valvecost import catalog
from valvecost.rates import RateTable
from valvecost.resolver import RateResolver
from valvecost.seeding import build_initial_rates
from valvecost.sourcing import SourcingRegistry, make_id_factory


@pytest.fixture
def registry() -> SourcingRegistry:
    return SourcingRegistry(id_factory=make_id_factory("counter"))


@pytest.fixture
def demo_rates() -> RateTable:
    return build_initial_rates(catalog.VALID_DEMO_COMBOS, catalog.SUB_MATERIALS_MAP, catalog.BASE_PRICE)


@pytest.fixture
def demo_resolver(demo_rates: RateTable) -> RateResolver:
    return RateResolver(demo_rates)


@pytest.fixture
def demo_registry() -> SourcingRegistry:
    return SourcingRegistry.from_catalog(
        catalog.DEFAULT_BOM, catalog.VALID_DEMO_COMBOS, id_factory=make_id_factory("counter")
    )
