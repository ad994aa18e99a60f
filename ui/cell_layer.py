"""
GridCache — ui/cell_layer.py
CellLayer: mirrors the reconciler's create/destroy/reclassify signals as
tcod-ecs entities for the renderer.
"""

from __future__ import annotations
from typing import Dict, List, Optional

import tcod.ecs

from engine.events import (
    EventBus,
    GridEvent,
    EVT_CELL_CREATED,
    EVT_CELL_DESTROYED,
    EVT_CELL_RECLASSIFIED,
)
from engine.ecs.components import CellMarker, Position
from world.cell_store import CellStore
from world.coords import CellCoord


class CellLayer:
    """
    Passive subscriber. Owns one entity per materialized cell.
    Values are always re-read from the Cell Store through the entity's key.
    """
    def __init__(self, registry: tcod.ecs.Registry, bus: EventBus):
        self.registry = registry
        self.bus = bus
        self._entities: Dict[CellCoord, tcod.ecs.Entity] = {}
        bus.subscribe(EVT_CELL_CREATED, self._on_created)
        bus.subscribe(EVT_CELL_DESTROYED, self._on_destroyed)
        bus.subscribe(EVT_CELL_RECLASSIFIED, self._on_reclassified)

    def detach(self) -> None:
        """Stops listening and drops every cell entity."""
        self.bus.unsubscribe(EVT_CELL_CREATED, self._on_created)
        self.bus.unsubscribe(EVT_CELL_DESTROYED, self._on_destroyed)
        self.bus.unsubscribe(EVT_CELL_RECLASSIFIED, self._on_reclassified)
        for entity in self._entities.values():
            entity.clear()
        self._entities.clear()

    def __len__(self) -> int:
        return len(self._entities)

    def entity_at(self, x: int, y: int) -> Optional[tcod.ecs.Entity]:
        return self._entities.get(CellCoord(x, y))

    def cells(self) -> List[tcod.ecs.Entity]:
        return list(self.registry.Q.all_of(components=[Position, CellMarker]))

    def value_of(self, entity: tcod.ecs.Entity, store: CellStore) -> int:
        pos = entity.components[Position]
        return store.get_value(pos.x, pos.y)

    def _on_created(self, event: GridEvent) -> None:
        coord = CellCoord.from_key(event.data["key"])
        entity = self.registry.new_entity()
        entity.components[Position] = Position(x=coord.x, y=coord.y)
        entity.components[CellMarker] = CellMarker(key=coord.key, interactive=event.data["in_range"])
        self._entities[coord] = entity

    def _on_destroyed(self, event: GridEvent) -> None:
        entity = self._entities.pop(CellCoord.from_key(event.data["key"]), None)
        if entity is not None:
            entity.clear()

    def _on_reclassified(self, event: GridEvent) -> None:
        entity = self._entities.get(CellCoord.from_key(event.data["key"]))
        if entity is not None:
            entity.components[CellMarker].interactive = event.data["in_range"]
