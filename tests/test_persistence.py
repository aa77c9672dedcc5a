import copy
import json

import pytest

from pathpaint.core.errors import CorruptRecord
from pathpaint.core.grid import Grid
from pathpaint.core.persistence import SlotStore, deserialize, load_into, serialize


def _painted():
    g = Grid(6, 7)
    g.set_start((0, 1))
    g.set_end((5, 6))
    g.toggle_wall((2, 2))
    g.toggle_wall((3, 2))
    g.set_weight((4, 4), 8)
    g.set_weight((1, 5), 3)
    return g


def _flags(grid):
    return [(s.weight, s.is_wall, s.role) for s in grid.iter_states()]


def test_serialize_shape():
    record = serialize(_painted())
    assert record["rows"] == 6 and record["cols"] == 7
    assert len(record["cells"]) == 42
    assert record["cells"][1] == {"weight": 1, "isWall": False, "isStart": True, "isEnd": False}
    assert record["cells"][4 * 7 + 4]["weight"] == 8
    assert record["cells"][2 * 7 + 2]["isWall"] is True


def test_round_trip_keeps_every_cell():
    g = _painted()
    restored = deserialize(json.loads(json.dumps(serialize(g))))
    assert (restored.rows, restored.cols) == (g.rows, g.cols)
    assert restored.start == g.start and restored.end == g.end
    assert _flags(restored) == _flags(g)


def test_weight_may_be_a_string():
    record = serialize(Grid(5, 5))
    record["cells"][3]["weight"] = "4"
    assert deserialize(record).weight_of((0, 3)) == 4


def test_record_without_endpoints():
    g = deserialize(serialize(Grid(5, 6)))
    assert g.start is None and g.end is None


@pytest.mark.parametrize("mutate", [
    lambda r: r.pop("rows"),
    lambda r: r.pop("cells"),
    lambda r: r.update(rows=3),
    lambda r: r.update(cols="wide"),
    lambda r: r.update(cells="nope"),
    lambda r: r["cells"].pop(),
    lambda r: r["cells"][0].pop("isWall"),
    lambda r: r["cells"][0].update(weight=0),
    lambda r: r["cells"][0].update(weight="heavy"),
    lambda r: r["cells"][0].update(isWall="yes"),
    lambda r: r["cells"].__setitem__(2, 7),
    lambda r: r["cells"][8].update(isStart=True),
    lambda r: r["cells"][8].update(isEnd=True),
    lambda r: r["cells"][1].update(isEnd=True),
])
def test_corrupt_records_rejected(mutate):
    record = serialize(_painted())
    mutate(record)
    with pytest.raises(CorruptRecord):
        deserialize(record)


def test_non_dict_record_rejected():
    with pytest.raises(CorruptRecord):
        deserialize([1, 2, 3])


def test_load_into_leaves_grid_untouched_on_failure():
    live = _painted()
    before = _flags(live)
    bad = serialize(Grid(5, 5))
    bad["cells"] = bad["cells"][:-1]
    with pytest.raises(CorruptRecord):
        load_into(live, bad)
    assert (live.rows, live.cols) == (6, 7)
    assert _flags(live) == before


def test_load_into_replaces_live_grid():
    live = Grid(9, 9)
    live.toggle_wall((8, 8))
    load_into(live, serialize(_painted()))
    assert (live.rows, live.cols) == (6, 7)
    assert live.start == (0, 1)
    assert _flags(live) == _flags(_painted())


def test_slot_store_round_trip(tmp_path):
    store = SlotStore(tmp_path / "nested" / "grid.json")
    assert store.load() is None
    assert store.load_into(Grid(5, 5)) is False

    store.save(_painted())
    assert store.exists()
    assert _flags(store.load()) == _flags(_painted())

    live = Grid(5, 5)
    assert store.load_into(live) is True
    assert live.end == (5, 6)

    store.clear()
    assert not store.exists()


def test_slot_store_bad_json(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptRecord):
        SlotStore(path).load()


def test_serialize_does_not_alias_grid():
    g = _painted()
    record = serialize(g)
    snapshot = copy.deepcopy(record)
    g.toggle_wall((0, 0))
    assert record == snapshot


def test_slot_store_undecodable_bytes(tmp_path):
    path = tmp_path / "grid.json"
    path.write_bytes(b'{"rows": 5, "cols": 5, "cells": ["\xff\xfe"]}')
    store = SlotStore(path)
    with pytest.raises(CorruptRecord):
        store.load()
    live = Grid(6, 6)
    with pytest.raises(CorruptRecord):
        store.load_into(live)
    assert (live.rows, live.cols) == (6, 6)
