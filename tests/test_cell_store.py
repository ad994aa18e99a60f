import pytest
from world.cell_store import CellStore, CellRecord, is_in_range, DEFAULT_PALETTE
from world.coords import CellCoord

def test_generated_value_is_stable_and_in_palette():
    store = CellStore()
    for x in range(-20, 20):
        for y in range(-5, 5):
            v = store.get_value(x, y)
            assert v in DEFAULT_PALETTE
            assert store.get_value(x, y) == v
            assert CellStore().get_value(x, y) == v

def test_generated_values_cover_palette():
    store = CellStore()
    seen = {store.get_value(x, y) for x in range(50) for y in range(50)}
    assert seen == set(DEFAULT_PALETTE)

def test_generation_stores_nothing():
    store = CellStore()
    for x in range(30):
        store.get_value(x, x)
        store.is_spawn_eligible(x, x)
    assert len(store) == 0

def test_override_precedence():
    store = CellStore()
    generated = store.get_value(4, 9)
    store.set_override(4, 9, generated + 100)
    assert store.get_value(4, 9) == generated + 100
    assert store.generated_value(4, 9) == generated
    assert store.has_override(4, 9)
    assert not store.has_override(9, 4)

def test_override_replaces_record():
    store = CellStore()
    store.set_override(1, 1, 4)
    store.set_override(1, 1, 0)
    assert store.get_value(1, 1) == 0
    assert len(store) == 1

def test_spawn_eligibility_with_override():
    store = CellStore(spawn_probability=0.0)
    assert store.is_spawn_eligible(2, 3) is False
    store.set_override(2, 3, 0)
    assert store.is_spawn_eligible(2, 3) is True

def test_spawn_probability_extremes():
    always = CellStore(spawn_probability=1.0)
    never = CellStore(spawn_probability=0.0)
    for x in range(10):
        assert always.is_spawn_eligible(x, -x) is True
        assert never.is_spawn_eligible(x, -x) is False

def test_spawn_eligibility_is_stable():
    store = CellStore()
    first = [store.is_spawn_eligible(x, y) for x in range(20) for y in range(20)]
    second = [store.is_spawn_eligible(x, y) for x in range(20) for y in range(20)]
    assert first == second
    assert any(first) and not all(first)

def test_clear_restores_generation():
    store = CellStore()
    generated = store.get_value(7, 7)
    store.set_override(7, 7, generated + 2)
    store.clear()
    assert len(store) == 0
    assert store.get_value(7, 7) == generated

def test_records_in_insertion_order():
    store = CellStore()
    store.set_override(5, 5, 2)
    store.set_override(-1, 0, 8)
    store.set_override(0, 0, 0)
    assert [c for c, _ in store.records()] == [CellCoord(5, 5), CellCoord(-1, 0), CellCoord(0, 0)]
    assert dict(store.records())[CellCoord(-1, 0)] == CellRecord(value=8, overridden=True)

def test_proximity_boundary():
    player = CellCoord(0, 0)
    assert is_in_range(CellCoord(5, 0), player, 5) is True
    assert is_in_range(CellCoord(-5, 5), player, 5) is True
    assert is_in_range(CellCoord(6, 0), player, 5) is False
    assert is_in_range(CellCoord(0, -6), player, 5) is False
