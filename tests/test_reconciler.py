import pytest
from engine.events import EventBus, EVT_CELL_CREATED, EVT_CELL_DESTROYED, EVT_CELL_RECLASSIFIED
from engine.reconciler import Viewport, ViewportReconciler
from world.cell_store import CellStore
from world.coords import CellCoord

TILE = 1e-4

def recording_bus():
    bus = EventBus()
    events = []
    bus.subscribe("*", events.append)
    return bus, events

def test_cell_rect_is_inclusive():
    rec = ViewportReconciler(CellStore(), TILE, 5)
    vp = Viewport(south=0.0, west=0.0, north=0.0009, east=0.0004)
    assert rec.cell_rect(vp) == (0, 9, 0, 4)

def test_viewport_around():
    vp = Viewport.around(0.0, 0.0, 2, 3, TILE)
    assert vp == Viewport(south=-0.0002, west=-0.0003, north=0.0002, east=0.0003)

def test_creates_every_eligible_cell():
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 5)
    vp = Viewport(south=0.0, west=0.0, north=0.0009, east=0.0004)
    result = rec.reconcile(vp, 0.0, 0.0)
    assert len(result.created) == 50
    assert not result.destroyed and not result.reclassified
    assert len(rec.materialized) == 50

def test_only_overrides_spawn_at_zero_probability():
    store = CellStore(spawn_probability=0.0)
    store.set_override(3, 3, 2)
    rec = ViewportReconciler(store, TILE, 5)
    result = rec.reconcile(Viewport(0.0, 0.0, 0.0009, 0.0009), 0.0, 0.0)
    assert result.created == [CellCoord(3, 3)]

def test_reconcile_is_idempotent():
    bus, events = recording_bus()
    rec = ViewportReconciler(CellStore(), TILE, 5, bus=bus)
    vp = Viewport.around(0.0, 0.0, 10, 10, TILE)
    first = rec.reconcile(vp, 0.0, 0.0)
    assert not first.is_empty
    count = len(events)
    second = rec.reconcile(vp, 0.0, 0.0)
    assert second.is_empty
    assert len(events) == count

def test_destroys_cells_leaving_viewport():
    bus, events = recording_bus()
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 5, bus=bus)
    rec.reconcile(Viewport(0.0, 0.0, 0.0004, 0.0004), 0.0, 0.0)
    result = rec.reconcile(Viewport(0.0001, 0.0, 0.0005, 0.0004), 0.0, 0.0)
    assert sorted(result.destroyed) == [CellCoord(0, y) for y in range(5)]
    assert sorted(result.created) == [CellCoord(5, y) for y in range(5)]
    destroyed_keys = [e.data["key"] for e in events if e.event_key == EVT_CELL_DESTROYED]
    assert sorted(destroyed_keys) == sorted(f"0,{y}" for y in range(5))

def test_reclassifies_on_player_move():
    bus, events = recording_bus()
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 1, bus=bus)
    vp = Viewport(0.0, 0.0, 0.0004, 0.0)
    created = rec.reconcile(vp, 0.0, 0.0)
    assert len(created.created) == 5
    assert rec.is_interactive(CellCoord(1, 0))
    assert not rec.is_interactive(CellCoord(2, 0))

    events.clear()
    # Player steps to cell (2, 0): cells 1..3 in range, 0 and 4 out
    result = rec.reconcile(vp, 0.0002, 0.0)
    assert not result.created and not result.destroyed
    assert sorted(result.reclassified) == [CellCoord(0, 0), CellCoord(2, 0), CellCoord(3, 0)]
    flags = {e.data["key"]: e.data["in_range"] for e in events if e.event_key == EVT_CELL_RECLASSIFIED}
    assert flags == {"0,0": False, "2,0": True, "3,0": True}

def test_proximity_boundary_in_reconcile():
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 5)
    rec.reconcile(Viewport(0.0, 0.0, 0.0006, 0.0), 0.0, 0.0)
    assert rec.is_interactive(CellCoord(5, 0)) is True
    assert rec.is_interactive(CellCoord(6, 0)) is False

def test_created_events_carry_interactivity():
    bus, events = recording_bus()
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 0, bus=bus)
    rec.reconcile(Viewport(0.0, 0.0, 0.0001, 0.0), 0.0, 0.0)
    created = {e.data["key"]: e.data["in_range"] for e in events if e.event_key == EVT_CELL_CREATED}
    assert created == {"0,0": True, "1,0": False}

def test_clear_destroys_everything():
    bus, events = recording_bus()
    rec = ViewportReconciler(CellStore(spawn_probability=1.0), TILE, 5, bus=bus)
    rec.reconcile(Viewport(0.0, 0.0, 0.0001, 0.0001), 0.0, 0.0)
    events.clear()
    destroyed = rec.clear()
    assert len(destroyed) == 4
    assert rec.materialized == {}
    assert all(e.event_key == EVT_CELL_DESTROYED for e in events)
