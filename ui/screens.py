"""
GridCache — ui/screens.py
Implementations of the UI Screen States.
"""
from typing import Optional

import tcod
import tcod.ecs
from tcod import libtcodpy

from ui.states import BaseState, Engine
from ui.renderer import Renderer, Color
from ui.cell_layer import CellLayer
from engine.ecs.components import CellMarker, Position
from engine.loop import GameSession
from engine.tokens import CellAction

IN_RANGE_FG: Color = (80, 140, 255)
OUT_OF_RANGE_FG: Color = (220, 60, 60)
PLAYER_FG: Color = (0, 255, 255)
CURSOR_BG: Color = (70, 70, 20)
HUD_FG: Color = (150, 150, 150)

# Arrow keys step the player; north is up on screen
MOVE_KEYS = {
    tcod.event.KeySym.UP: (1, 0),
    tcod.event.KeySym.DOWN: (-1, 0),
    tcod.event.KeySym.LEFT: (0, -1),
    tcod.event.KeySym.RIGHT: (0, 1),
}

CURSOR_KEYS = {
    tcod.event.KeySym.W: (1, 0),
    tcod.event.KeySym.S: (-1, 0),
    tcod.event.KeySym.A: (0, -1),
    tcod.event.KeySym.D: (0, 1),
}

ACTION_KEYS = {
    tcod.event.KeySym.P: CellAction.POKE,
    tcod.event.KeySym.C: CellAction.CRAFT,
    tcod.event.KeySym.L: CellAction.PLACE,
}


class MainMenuState(BaseState):
    """The title screen."""

    def __init__(self, engine: Engine, session: Optional[GameSession] = None):
        super().__init__(engine)
        self.session = session

    def on_render(self, renderer: Renderer) -> None:
        renderer.root_console.print(
            renderer.width // 2,
            renderer.height // 2 - 5,
            "GridCache",
            fg=(255, 255, 0),
            alignment=libtcodpy.CENTER
        )
        renderer.root_console.print(renderer.width // 2, renderer.height // 2, "[C]ontinue", alignment=libtcodpy.CENTER)
        renderer.root_console.print(renderer.width // 2, renderer.height // 2 + 1, "[N]ew Game", alignment=libtcodpy.CENTER)
        renderer.root_console.print(renderer.width // 2, renderer.height // 2 + 2, "[Q]uit", alignment=libtcodpy.CENTER)

    def _session(self) -> GameSession:
        if self.session is None:
            self.session = GameSession()
        return self.session

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym == tcod.event.KeySym.Q:
            self.engine.running = False
        elif event.sym == tcod.event.KeySym.C:
            self.engine.change_state(MapState(self.engine, self._session()))
        elif event.sym == tcod.event.KeySym.N:
            session = self._session()
            session.reset()
            self.engine.change_state(MapState(self.engine, session))


class MapState(BaseState):
    """
    The main gameplay screen. One console tile per grid cell, player centred.
    Cell x (latitude) grows upwards, cell y (longitude) grows to the right.
    """

    def __init__(self, engine: Engine, session: GameSession):
        super().__init__(engine)
        self.session = session
        self.registry = tcod.ecs.Registry()
        self.layer = CellLayer(self.registry, session.bus)
        # Selection cursor, relative to the player's cell
        self.cursor = (0, 0)

        renderer = engine.renderer
        self.center_row = renderer.map_height // 2
        self.center_col = renderer.width // 2
        session.reconciler.clear()
        session.follow_player(self.center_row, self.center_col)

    @property
    def target(self) -> tuple[int, int]:
        player = self.session.player_cell
        return player.x + self.cursor[0], player.y + self.cursor[1]

    def on_render(self, renderer: Renderer) -> None:
        renderer.fill_map_background()
        player = self.session.player_cell
        store = self.session.state.cells

        for ent in self.layer.cells():
            pos = ent.components[Position]
            marker = ent.components[CellMarker]
            sy = self.center_row - (pos.x - player.x)
            sx = self.center_col + (pos.y - player.y)
            value = self.layer.value_of(ent, store)
            char = str(value) if value < 10 else "*"
            renderer.draw_tile(sx, sy, char, fg=IN_RANGE_FG if marker.interactive else OUT_OF_RANGE_FG)

        tx, ty = self.target
        cursor_sy = self.center_row - (tx - player.x)
        cursor_sx = self.center_col + (ty - player.y)
        if 0 <= cursor_sx < renderer.width and 0 <= cursor_sy < renderer.map_height:
            renderer.root_console.bg[cursor_sy, cursor_sx] = CURSOR_BG
        renderer.draw_tile(self.center_col, self.center_row, "@", fg=PLAYER_FG)

        # HUD
        hud_y = renderer.map_height
        renderer.root_console.print(1, hud_y, self.session.status_text(), fg=(255, 255, 255))

        actions = self.session.available_actions(tx, ty)
        labels = " ".join(a.value for a in CellAction if a in actions) or "-"
        mode = "GPS" if self.session.state.geolocation_mode else "manual"
        renderer.root_console.print(
            1, hud_y + 1,
            f"({tx},{ty}) value {self.session.cell_value(tx, ty)}   actions: {labels}   mode: {mode}",
            fg=HUD_FG,
        )
        gps_hint = "  [g] GPS" if self.session.can_sense else ""
        renderer.root_console.print(
            1, hud_y + 2,
            f"[Arrows] Move  [WASD] Select  [p]oke [c]raft p[l]ace{gps_hint}  [R] Reset  [ESC] Menu",
            fg=HUD_FG,
        )

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym in MOVE_KEYS:
            self.session.move_player(*MOVE_KEYS[event.sym])
        elif event.sym in CURSOR_KEYS:
            dx, dy = CURSOR_KEYS[event.sym]
            radius = self.session.config.player.interaction_radius
            cx = max(-radius, min(radius, self.cursor[0] + dx))
            cy = max(-radius, min(radius, self.cursor[1] + dy))
            self.cursor = (cx, cy)
        elif event.sym in ACTION_KEYS:
            self.session.act(ACTION_KEYS[event.sym], *self.target)
        elif event.sym == tcod.event.KeySym.G and self.session.can_sense:
            self.session.set_geolocation_mode(not self.session.state.geolocation_mode)
        elif event.sym == tcod.event.KeySym.R and event.mod & tcod.event.Modifier.SHIFT:
            self.session.reset()
            self.cursor = (0, 0)
        elif event.sym == tcod.event.KeySym.ESCAPE:
            self.layer.detach()
            self.engine.change_state(MainMenuState(self.engine, self.session))

    def on_tick(self) -> None:
        self.session.poll()
