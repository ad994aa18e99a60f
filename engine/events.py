"""
GridCache — engine/events.py
Event envelope and pub-sub bus for render and state-change signals.
===================================================================
Version:     0.1
Stack:       Python 3.11+ | Pydantic v2 | bespoke pub-sub

Architecture notes
------------------
- The core never calls the rendering collaborator directly. It emits
  GridEvents; renderers subscribe by key (or "*" for everything).
- Event data carries cell keys ("x,y"), never cell values. Subscribers
  re-read values from the Cell Store by key.
- Handler errors are logged and swallowed so emission always continues.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from pydantic import BaseModel

logger = logging.getLogger("gridcache.events")

# ============================================================
# CANONICAL EVENT KEYS
# Never use raw strings. Add new keys here only.
# ============================================================

EVT_CELL_CREATED         = "cell.created"         # data: key, in_range
EVT_CELL_DESTROYED       = "cell.destroyed"       # data: key
EVT_CELL_RECLASSIFIED    = "cell.reclassified"    # data: key, in_range
EVT_CELL_VALUE_CHANGED   = "cell.value_changed"   # data: key
EVT_TOKEN_CHANGED        = "token.changed"        # data: held
EVT_PLAYER_MOVED         = "player.moved"         # data: lat, lng, cell
EVT_PLAYER_WON           = "player.won"           # data: held
EVT_STATE_RESET          = "state.reset"

WILDCARD = "*"


class GridEvent(BaseModel):
    """Base envelope. data must stay flat and JSON-serializable."""
    event_key: str
    source: str
    data: Dict[str, Any] = {}


HandlerFn = Callable[[GridEvent], None]


class EventBus:
    """
    Bespoke pub-sub. Pass instance at construction, no global singleton.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[HandlerFn]] = {}

    def subscribe(self, event_key: str, handler: HandlerFn) -> None:
        self._subscribers.setdefault(event_key, []).append(handler)

    def unsubscribe(self, event_key: str, handler: HandlerFn) -> None:
        if event_key in self._subscribers:
            self._subscribers[event_key] = [
                # == so that bound methods match
                h for h in self._subscribers[event_key] if h != handler
            ]

    def emit(self, event: GridEvent) -> None:
        targets = (
            self._subscribers.get(event.event_key, [])
            + self._subscribers.get(WILDCARD, [])
        )
        for handler in targets:
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Handler error on '%s'", event.event_key)
