from __future__ import annotations

import copy

import pytest

from valvecost import catalog
from valvecost.rates import RateTable
from valvecost.resolver import RateResolver
from valvecost.seeding import build_initial_rates

IRONCORE = "IRONCORE CASTINGS PVT. LTD."


def _entry_set(table: RateTable) -> set:
    return {(m, s, z, e.process_type, e.supplier, e.rate) for m, s, z, e in table.iter_entries()}


def test_seeded_body_rate_and_edit(demo_rates: RateTable, demo_resolver: RateResolver) -> None:
    assert demo_resolver.get_rate("BODY", "CI", "2", "SAND CAST", IRONCORE) == 104

    demo_rates.set_rate("BODY", "CI", "2", "SAND CAST", IRONCORE, 110)

    assert demo_resolver.get_rate("BODY", "CI", "2", "SAND CAST", IRONCORE) == 110
    matching = [
        e
        for e in demo_resolver.get_entries_for_cell("BODY", "CI", "2")
        if (e.process_type, e.supplier) == ("SAND CAST", IRONCORE)
    ]
    assert len(matching) == 1


def test_investment_casting_surcharge_on_body(demo_resolver: RateResolver) -> None:
    rate = demo_resolver.get_rate("BODY", "CI", "2", "INVESTMENT CASTING", "PRIMECAST ENGINEERING")
    assert rate == pytest.approx(156.0)


def test_surcharge_is_scoped_to_material(demo_resolver: RateResolver) -> None:
    rate = demo_resolver.get_rate("DISC", "NDI", "2", "INVESTMENT CASTING", "PRIMECAST ENGINEERING")
    assert rate == pytest.approx(96.0)


def test_custom_multipliers_replace_defaults() -> None:
    table = build_initial_rates(
        {"BODY": {"INVESTMENT CASTING": ["PRIMECAST ENGINEERING"]}},
        {"BODY": ["CI"]},
        {"BODY": {"CI": {"2": 100}}},
        multipliers={},
    )
    assert RateResolver(table).get_rate("BODY", "CI", "2", "INVESTMENT CASTING", "PRIMECAST ENGINEERING") == 100


def test_grades_without_base_price_are_skipped(demo_rates: RateTable) -> None:
    assert "LCB" not in demo_rates.sub_materials("BODY")
    assert "COMPONENTS" not in demo_rates.materials()


def test_duplicate_suppliers_do_not_duplicate_entries() -> None:
    table = build_initial_rates(
        {"SEAT": {"BROUGHT OUT": ["ELASTOSEAL RUBBER INDUSTRIES", "ELASTOSEAL RUBBER INDUSTRIES"]}},
        {"SEAT": ["VITON", "VITON"]},
        {"SEAT": {"VITON": {"2": 165, 3: 190}}},
    )
    resolver = RateResolver(table)

    assert len(resolver.get_entries_for_cell("SEAT", "VITON", "2")) == 1
    assert resolver.get_rate("SEAT", "VITON", "3", "BROUGHT OUT", "ELASTOSEAL RUBBER INDUSTRIES") == 190
    assert len(table) == 2


def test_input_order_does_not_change_entries() -> None:
    reversed_combos = {
        material: {process: list(reversed(suppliers)) for process, suppliers in reversed(list(processes.items()))}
        for material, processes in reversed(list(catalog.VALID_DEMO_COMBOS.items()))
    }
    reversed_grades = {m: list(reversed(g)) for m, g in catalog.SUB_MATERIALS_MAP.items()}

    forward = build_initial_rates(catalog.VALID_DEMO_COMBOS, catalog.SUB_MATERIALS_MAP, catalog.BASE_PRICE)
    backward = build_initial_rates(reversed_combos, reversed_grades, catalog.BASE_PRICE)

    assert _entry_set(forward) == _entry_set(backward)
    assert len(forward) == len(backward)


def test_seeding_is_deterministic_and_pure() -> None:
    combos = copy.deepcopy(catalog.VALID_DEMO_COMBOS)
    grades = copy.deepcopy(catalog.SUB_MATERIALS_MAP)
    prices = copy.deepcopy(catalog.BASE_PRICE)

    first = build_initial_rates(combos, grades, prices)
    second = build_initial_rates(combos, grades, prices)

    assert _entry_set(first) == _entry_set(second)
    assert combos == catalog.VALID_DEMO_COMBOS
    assert grades == catalog.SUB_MATERIALS_MAP
    assert prices == catalog.BASE_PRICE


def test_every_seeded_pair_is_a_valid_combo(demo_rates: RateTable) -> None:
    for material, _sub, _size, entry in demo_rates.iter_entries():
        assert entry.supplier in catalog.VALID_DEMO_COMBOS[material][entry.process_type]


def test_unit_labels() -> None:
    assert catalog.get_unit_for_material("BODY") == "per Kg"
    assert catalog.get_unit_for_material("SEAT") == "per Unit"
