"""
GridCache — engine/loop.py
Game Session: single owner of GameState. Wires the Cell Store, the
interaction machine, the Viewport Reconciler, persistence and the bus.
======================================================================
Version:     0.1
Stack:       Python 3.11+ | Pydantic v2 | bespoke EventBus
Status:      Integration entry point.

Every state-affecting call completes synchronously: mutate -> persist ->
emit -> reconcile, before returning. Nothing is batched, so a reload after
any returned call reflects it exactly once.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from engine.config import GameConfig, load_game_config
from engine.events import (
    EventBus,
    GridEvent,
    EVT_CELL_VALUE_CHANGED,
    EVT_PLAYER_MOVED,
    EVT_PLAYER_WON,
    EVT_STATE_RESET,
    EVT_TOKEN_CHANGED,
)
from engine.game_state import GameState
from engine.persistence import SaveStore, reset as reset_store
from engine.reconciler import ReconcileResult, Viewport, ViewportReconciler
from engine.sensing import PeriodicTrigger, PositionSource, PositionUnavailable
from engine.tokens import CellAction, apply_action, available_actions, is_winning
from world.cell_store import is_in_range
from world.coords import CellCoord, offset_position

logger = logging.getLogger("gridcache.session")


class GameSession:
    """
    Core controller for one play session.
    Loads saved state at construction and writes through on every mutation.
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        save_path: Optional[Path] = None,
        position_source: Optional[PositionSource] = None,
        bus: Optional[EventBus] = None,
        trigger: Optional[PeriodicTrigger] = None,
    ):
        self.config = config if config is not None else load_game_config()
        if save_path is None:
            save_path = Path(self.config.session.save_path)

        self.bus = bus if bus is not None else EventBus()
        self.store = SaveStore(save_path)
        self.position_source = position_source
        self.trigger = trigger if trigger is not None else PeriodicTrigger(self.config.session.position_poll_seconds)

        self.state: GameState = self.store.load_state(self.config)
        self.reconciler = ViewportReconciler(
            store=self.state.cells,
            tile_size=self.tile_size,
            interaction_radius=self.config.player.interaction_radius,
            bus=self.bus,
        )
        self.viewport: Optional[Viewport] = None
        self._follow: Optional[Tuple[int, int]] = None

        if self.state.geolocation_mode and self.can_sense:
            self.trigger.enable()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def tile_size(self) -> float:
        return self.config.world.tile_degrees

    @property
    def player_cell(self) -> CellCoord:
        return self.state.player_cell(self.tile_size)

    @property
    def is_winning(self) -> bool:
        return is_winning(self.state.held_token, self.config.win_threshold)

    def cell_value(self, x: int, y: int) -> int:
        return self.state.cells.get_value(x, y)

    def in_range(self, x: int, y: int) -> bool:
        return is_in_range(CellCoord(x, y), self.player_cell, self.config.player.interaction_radius)

    def is_interactive(self, x: int, y: int) -> bool:
        """An in-range cell that exists on the map. Empty ground never is."""
        return self.in_range(x, y) and self.state.cells.is_spawn_eligible(x, y)

    @property
    def can_sense(self) -> bool:
        return self.position_source is not None

    def available_actions(self, x: int, y: int) -> FrozenSet[CellAction]:
        """Legal actions on (x, y). Cells that are not interactive offer none."""
        if not self.is_interactive(x, y):
            return frozenset()
        return available_actions(self.state.held_token, self.cell_value(x, y))

    def status_text(self) -> str:
        if self.state.held_token is None:
            text = "..."
        else:
            text = f"You are holding a token of value {self.state.held_token}."
        if self.is_winning:
            text += " You win!"
        return text

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        self.store.save_state(self.state)

    def reset(self) -> None:
        """Clears persisted state, overrides and the materialized set."""
        self.reconciler.clear()
        self.state = reset_store(self.store, self.config)
        self.reconciler.store = self.state.cells
        self.trigger.disable()
        self.save()
        self.bus.emit(GridEvent(event_key=EVT_STATE_RESET, source="GameSession"))
        self.refresh()

    # ------------------------------------------------------------------
    # Movement & viewport
    # ------------------------------------------------------------------

    def set_viewport(self, viewport: Viewport) -> ReconcileResult:
        """Pins the viewport in place (stops following the player)."""
        self._follow = None
        self.viewport = viewport
        return self.refresh()

    def follow_player(self, half_lat_cells: int, half_lng_cells: int) -> ReconcileResult:
        """Keeps the viewport centred on the player, re-centring on every refresh."""
        self._follow = (half_lat_cells, half_lng_cells)
        return self.refresh()

    def refresh(self) -> ReconcileResult:
        """One reconciliation pass against the current viewport, if any."""
        if self._follow is not None:
            self.viewport = Viewport.around(
                self.state.player_lat, self.state.player_lng, *self._follow, self.tile_size
            )
        if self.viewport is None:
            return ReconcileResult()
        return self.reconciler.reconcile(self.viewport, self.state.player_lat, self.state.player_lng)

    def move_player(self, d_lat_cells: int, d_lng_cells: int) -> ReconcileResult:
        """Steps the player by whole tiles."""
        lat = offset_position(self.state.player_lat, d_lat_cells, self.tile_size)
        lng = offset_position(self.state.player_lng, d_lng_cells, self.tile_size)
        return self.set_player_position(lat, lng)

    def set_player_position(self, lat: float, lng: float) -> ReconcileResult:
        self.state.player_lat = lat
        self.state.player_lng = lng
        self.save()
        cell = self.player_cell
        self.bus.emit(GridEvent(
            event_key=EVT_PLAYER_MOVED,
            source="GameSession",
            data={"lat": lat, "lng": lng, "cell": cell.key},
        ))
        return self.refresh()

    # ------------------------------------------------------------------
    # Position sensing
    # ------------------------------------------------------------------

    def set_geolocation_mode(self, enabled: bool) -> bool:
        """Toggles position following. Enabling needs a position source."""
        if enabled and not self.can_sense:
            logger.warning("Geolocation mode needs a position source, staying in manual mode")
            return False
        self.state.geolocation_mode = enabled
        if enabled:
            self.trigger.enable()
        else:
            self.trigger.disable()
        self.save()
        return True

    def poll(self, now: Optional[float] = None) -> Optional[ReconcileResult]:
        """Called from the main loop. Senses the position when the trigger is due."""
        if not self.state.geolocation_mode:
            return None
        if not self.trigger.due(now):
            return None
        return self.sense_position()

    def sense_position(self) -> Optional[ReconcileResult]:
        """Pulls a fix from the position source. Failures are logged and skipped."""
        if self.position_source is None:
            logger.warning("Position sensing requested but no position source is configured")
            return None
        try:
            lat, lng = self.position_source.current_position()
        except PositionUnavailable as exc:
            logger.warning("Position unavailable, keeping previous position: %s", exc)
            return None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            logger.warning("Ignoring non-finite position fix (%r, %r)", lat, lng)
            return None
        return self.set_player_position(lat, lng)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def poke(self, x: int, y: int) -> bool:
        return self.act(CellAction.POKE, x, y)

    def craft(self, x: int, y: int) -> bool:
        return self.act(CellAction.CRAFT, x, y)

    def place(self, x: int, y: int) -> bool:
        return self.act(CellAction.PLACE, x, y)

    def act(self, action: CellAction, x: int, y: int) -> bool:
        """
        Applies a cell action if (x, y) is interactive and the guard holds.
        Illegal requests are silent no-ops returning False.
        """
        if not self.is_interactive(x, y):
            return False

        was_winning = self.is_winning
        if not apply_action(self.state, action, x, y):
            return False

        self.save()

        coord = CellCoord(x, y)
        self.bus.emit(GridEvent(event_key=EVT_CELL_VALUE_CHANGED, source="GameSession", data={"key": coord.key}))
        self.bus.emit(GridEvent(event_key=EVT_TOKEN_CHANGED, source="GameSession", data={"held": self.state.held_token}))
        if self.is_winning and not was_winning:
            self.bus.emit(GridEvent(event_key=EVT_PLAYER_WON, source="GameSession", data={"held": self.state.held_token}))

        # An override makes the cell spawn-eligible; make sure it is materialized
        self.refresh()
        return True
