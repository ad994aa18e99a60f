"""
GridCache — engine/tokens.py
Token/Interaction State Machine: poke, craft and place between a cell and
the player's single held-token slot.
=========================================================================
Version:     0.1
Stack:       Python 3.11+
Status:      Canonical.

Player states:  Empty (held is None)   | Holding(v)
Cell states:    Depleted (value == 0)  | Stocked(v > 0)

Transitions
-----------
  POKE   Empty      + Stocked(v)        -> Holding(v), cell = 0
  CRAFT  Holding(v) + Stocked(v)        -> Empty,      cell = 2v
  PLACE  Holding(v) + Depleted          -> Empty,      cell = v

Any other combination is a no-op: the action is unavailable, not an error.
Proximity gating and write-through persistence are the controller's job
(engine.loop.GameSession); functions here only touch GameState.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional

from engine.game_state import GameState


class CellAction(str, Enum):
    POKE = "poke"
    CRAFT = "craft"
    PLACE = "place"


def can_poke(held: Optional[int], cell_value: int) -> bool:
    return held is None and cell_value > 0


def can_craft(held: Optional[int], cell_value: int) -> bool:
    return held is not None and cell_value > 0 and held == cell_value


def can_place(held: Optional[int], cell_value: int) -> bool:
    return held is not None and cell_value == 0


def available_actions(held: Optional[int], cell_value: int) -> FrozenSet[CellAction]:
    """Legal actions for this held/cell combination. Drives control enablement."""
    actions = set()
    if can_poke(held, cell_value):
        actions.add(CellAction.POKE)
    if can_craft(held, cell_value):
        actions.add(CellAction.CRAFT)
    if can_place(held, cell_value):
        actions.add(CellAction.PLACE)
    return frozenset(actions)


def is_winning(held: Optional[int], threshold: int) -> bool:
    """Display condition only; play continues after a win."""
    return held is not None and held >= threshold


def poke(state: GameState, x: int, y: int) -> bool:
    value = state.cells.get_value(x, y)
    if not can_poke(state.held_token, value):
        return False
    state.held_token = value
    state.cells.set_override(x, y, 0)
    return True


def craft(state: GameState, x: int, y: int) -> bool:
    value = state.cells.get_value(x, y)
    if not can_craft(state.held_token, value):
        return False
    state.cells.set_override(x, y, value * 2)
    state.held_token = None
    return True


def place(state: GameState, x: int, y: int) -> bool:
    value = state.cells.get_value(x, y)
    if not can_place(state.held_token, value):
        return False
    state.cells.set_override(x, y, state.held_token)
    state.held_token = None
    return True


TRANSITIONS = {
    CellAction.POKE: poke,
    CellAction.CRAFT: craft,
    CellAction.PLACE: place,
}


def apply_action(state: GameState, action: CellAction, x: int, y: int) -> bool:
    """Dispatches an action. Returns True iff the transition happened."""
    return TRANSITIONS[action](state, x, y)
