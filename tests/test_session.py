from __future__ import annotations

import logging
import threading
import time

import pytest

from valvecost.config import Config
from valvecost.models import BulkRule, Material
from valvecost.session import ReadWriteLock, create_session

IRONCORE = "IRONCORE CASTINGS PVT. LTD."


def _config(**overrides) -> Config:
    values = dict(base_prices_path=None, valid_combos_path=None, sub_materials_path=None, id_strategy="counter")
    values.update(overrides)
    return Config(**values)


def test_create_session_seeds_demo_data() -> None:
    session = create_session(_config())

    assert [m.name for m in session.materials()] == ["BODY", "DISC", "SEAT", "STEM", "PACKING", "OPERATOR"]
    assert session.materials()[0].id == "mat-1"
    assert session.get_rate("BODY", "CI", "2", "SAND CAST", IRONCORE) == 104
    assert session.check_consistency() == []


def test_sessions_are_isolated() -> None:
    first = create_session(_config())
    second = create_session(_config())

    first.set_rate("BODY", "CI", "2", "SAND CAST", IRONCORE, 110)

    assert first.get_rate("BODY", "CI", "2", "SAND CAST", IRONCORE) == 110
    assert second.get_rate("BODY", "CI", "2", "SAND CAST", IRONCORE) == 104


def test_session_writes_and_reads() -> None:
    session = create_session(_config())
    gasket = session.add_material(Material(name="GASKET", qty=2))

    session.add_supplier_to_process(gasket.id, "BROUGHT OUT", "SEALCO")
    session.set_quantity(gasket.id, 4)
    session.set_type(gasket.id, "BUY")
    session.set_rate("GASKET", "PTFE", "2", "BROUGHT OUT", "SEALCO", 12.5)

    stored = session.get_material(gasket.id)
    assert stored is not None and stored.qty == 4 and stored.type == "BUY"
    assert session.has_rates_for_combo("GASKET", "BROUGHT OUT", "SEALCO")
    assert [e.rate for e in session.get_entries_for_cell("GASKET", "PTFE", "2")] == [12.5]

    session.delete_material(gasket.id)
    assert session.get_material(gasket.id) is None
    assert session.get_rate("GASKET", "PTFE", "2", "BROUGHT OUT", "SEALCO") == 12.5


def test_returned_materials_are_copies() -> None:
    session = create_session(_config())
    body = session.materials()[0]
    body_id = body.id

    body.qty = 99
    body.sourcing.clear()
    body.children.append(Material(name="ROGUE"))
    fetched = session.get_material(body_id)
    assert fetched is not None
    fetched.sourcing[0].suppliers.append("ROGUE SUPPLIER")
    added = session.add_material(Material(name="GASKET"))
    added.qty = 50

    stored = session.get_material(body_id)
    assert stored is not None
    assert stored.qty == 1
    assert stored.children == []
    assert "ROGUE SUPPLIER" not in stored.sourcing[0].suppliers
    assert session.check_consistency() == []
    gasket = session.get_material(added.id)
    assert gasket is not None and gasket.qty == 1


def test_create_session_leaves_root_logging_alone(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(logging.getLogger(), "handlers", [])

    create_session(_config())

    assert calls == []


def test_bulk_rule_defaults_to_selected_sizes() -> None:
    session = create_session(_config())
    session.product.set_sizes(["2", "3", "4", "6"])

    written = session.apply_bulk_rule(
        "BODY", BulkRule(material="CI", rate=120, from_size="3", to_size="4"), "SAND CAST", IRONCORE
    )

    assert written == ["3", "4"]
    assert session.get_rate("BODY", "CI", "3", "SAND CAST", IRONCORE) == 120
    assert session.get_rate("BODY", "CI", "6", "SAND CAST", IRONCORE) == 172


def test_cost_rollup_uses_lp_factor() -> None:
    session = create_session(_config(lp_factor=2.0))

    frame = session.cost_rollup("2", {"BODY": ("CI", "SAND CAST", IRONCORE)})

    body = frame.loc[frame["MATERIAL"] == "BODY"].iloc[0]
    assert body["EXTENDED_COST"] == pytest.approx(208.0)
    assert len(session.rates_frame()) > 0


def test_writer_waits_for_active_reader() -> None:
    lock = ReadWriteLock()
    events = []
    reader_in = threading.Event()

    def reader() -> None:
        with lock.read():
            reader_in.set()
            time.sleep(0.05)
            events.append("read-done")

    def writer() -> None:
        reader_in.wait()
        with lock.write():
            events.append("write")

    threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert events == ["read-done", "write"]


def test_readers_share_the_lock() -> None:
    lock = ReadWriteLock()
    both_in = threading.Barrier(2, timeout=5)

    def reader() -> None:
        with lock.read():
            both_in.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert not both_in.broken
