"""
GridCache — engine/game_state.py
GameState: the single aggregate of everything that survives a reload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from engine.config import GameConfig
from world.cell_store import CellStore
from world.coords import CellCoord, player_cell


@dataclass
class GameState:
    player_lat: float
    player_lng: float
    held_token: Optional[int] = None
    geolocation_mode: bool = False
    cells: CellStore = field(default_factory=CellStore)

    def player_cell(self, tile_size: float) -> CellCoord:
        return player_cell(self.player_lat, self.player_lng, tile_size)


def new_cell_store(config: GameConfig) -> CellStore:
    return CellStore(
        palette=tuple(config.world.value_palette),
        spawn_probability=config.world.spawn_probability,
    )


def default_state(config: GameConfig) -> GameState:
    """Fresh-start state: spawn point, empty hands, no overrides."""
    return GameState(
        player_lat=config.world.start_lat,
        player_lng=config.world.start_lng,
        cells=new_cell_store(config),
    )
