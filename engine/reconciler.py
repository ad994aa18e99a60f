"""
GridCache — engine/reconciler.py
Viewport Reconciler: keeps the materialized cell set in step with the
viewport and the player's position.
=====================================================================
Version:     0.1
Stack:       Python 3.11+ | bespoke EventBus
Status:      Canonical.

Algorithm (one synchronous pass)
--------------------------------
  1. Map the viewport to an inclusive cell-index rectangle.
  2. Every spawn-eligible cell in it "should exist".
  3. Materialized cells that should not exist   -> destroy.
  4. Cells that should exist but are not present -> create (with in_range).
  5. Surviving cells whose in_range flag changed -> reclassify.

in_range is the interactivity flag consumed by renderers: out-of-range cells
are display-only. A second pass with unchanged inputs emits nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from engine.events import (
    EventBus,
    GridEvent,
    EVT_CELL_CREATED,
    EVT_CELL_DESTROYED,
    EVT_CELL_RECLASSIFIED,
)
from world.cell_store import CellStore, is_in_range
from world.coords import CellCoord, offset_position, player_cell, to_cell_index


@dataclass(frozen=True)
class Viewport:
    """Rectangle in continuous coordinates. Latitude spans south..north."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def around(cls, lat: float, lng: float, half_lat_cells: int, half_lng_cells: int, tile_size: float) -> "Viewport":
        """A viewport centred on (lat, lng) spanning the given number of tiles each way."""
        return cls(
            south=offset_position(lat, -half_lat_cells, tile_size),
            west=offset_position(lng, -half_lng_cells, tile_size),
            north=offset_position(lat, half_lat_cells, tile_size),
            east=offset_position(lng, half_lng_cells, tile_size),
        )


@dataclass
class MaterializedCell:
    coord: CellCoord
    in_range: bool


@dataclass
class ReconcileResult:
    created: List[CellCoord] = field(default_factory=list)
    destroyed: List[CellCoord] = field(default_factory=list)
    reclassified: List[CellCoord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.destroyed or self.reclassified)


class ViewportReconciler:
    def __init__(self, store: CellStore, tile_size: float, interaction_radius: int, bus: Optional[EventBus] = None):
        self.store = store
        self.tile_size = tile_size
        self.interaction_radius = interaction_radius
        self.bus = bus
        self.materialized: Dict[CellCoord, MaterializedCell] = {}

    def cell_rect(self, viewport: Viewport) -> Tuple[int, int, int, int]:
        """Inclusive (min_x, max_x, min_y, max_y) covering the viewport."""
        return (
            to_cell_index(viewport.south, self.tile_size),
            to_cell_index(viewport.north, self.tile_size),
            to_cell_index(viewport.west, self.tile_size),
            to_cell_index(viewport.east, self.tile_size),
        )

    def is_interactive(self, coord: CellCoord) -> bool:
        cell = self.materialized.get(coord)
        return cell is not None and cell.in_range

    def reconcile(self, viewport: Viewport, player_lat: float, player_lng: float) -> ReconcileResult:
        result = ReconcileResult()
        player = player_cell(player_lat, player_lng, self.tile_size)
        min_x, max_x, min_y, max_y = self.cell_rect(viewport)

        should_exist = set()
        for x in range(min_x, max_x + 1):
            for y in range(min_y, max_y + 1):
                if self.store.is_spawn_eligible(x, y):
                    should_exist.add(CellCoord(x, y))

        for coord in list(self.materialized):
            if coord not in should_exist:
                del self.materialized[coord]
                result.destroyed.append(coord)
                self._emit(EVT_CELL_DESTROYED, coord)

        for coord in sorted(should_exist):
            in_range = is_in_range(coord, player, self.interaction_radius)
            cell = self.materialized.get(coord)
            if cell is None:
                self.materialized[coord] = MaterializedCell(coord=coord, in_range=in_range)
                result.created.append(coord)
                self._emit(EVT_CELL_CREATED, coord, in_range=in_range)
            elif cell.in_range != in_range:
                cell.in_range = in_range
                result.reclassified.append(coord)
                self._emit(EVT_CELL_RECLASSIFIED, coord, in_range=in_range)

        return result

    def clear(self) -> List[CellCoord]:
        """Destroys every materialized cell (used on reset)."""
        destroyed = list(self.materialized)
        self.materialized.clear()
        for coord in destroyed:
            self._emit(EVT_CELL_DESTROYED, coord)
        return destroyed

    def _emit(self, event_key: str, coord: CellCoord, **data) -> None:
        if self.bus is None:
            return
        self.bus.emit(GridEvent(
            event_key=event_key,
            source="ViewportReconciler",
            data={"key": coord.key, **data},
        ))
