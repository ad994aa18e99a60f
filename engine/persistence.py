"""
GridCache — engine/persistence.py
Persistence Codec: GameState <-> flat session record, plus JSON file storage.
=============================================================================
Version:     0.1
Stack:       Python 3.11+ | Pydantic v2 | stdlib json
Status:      Canonical.

Record shape (one per session)
------------------------------
  playerLat        float
  playerLng        float
  heldTokenValue   int | null
  geolocationMode  bool
  cellOverrides    [{key: "x,y", value: int >= 0, modified: bool}, ...]

Loading never raises. An absent record gives the default state silently;
a malformed one (bad JSON, schema violation) gives the default state and a
warning on the "gridcache.persistence" logger. A failed write or clear is
logged the same way and never raises.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from engine.config import GameConfig
from engine.game_state import GameState, default_state, new_cell_store
from world.coords import CellCoord

logger = logging.getLogger("gridcache.persistence")

# ================================================================================
# SCHEMAS
# ================================================================================

class CellOverrideRecord(BaseModel):
    model_config = ConfigDict(frozen=True)
    key: str
    value: int = Field(ge=0)
    modified: bool = True

    @field_validator("key")
    @classmethod
    def _key_is_coordinate(cls, key: str) -> str:
        CellCoord.from_key(key)
        return key

class PersistedState(BaseModel):
    model_config = ConfigDict(frozen=True)
    playerLat: float = Field(allow_inf_nan=False)
    playerLng: float = Field(allow_inf_nan=False)
    heldTokenValue: Optional[int] = Field(default=None, ge=0)
    geolocationMode: bool = False
    cellOverrides: List[CellOverrideRecord] = Field(default_factory=list)

# ================================================================================
# CODEC
# ================================================================================

def serialize(state: GameState) -> Dict[str, Any]:
    """Builds the flat session record for a GameState."""
    record = PersistedState(
        playerLat=state.player_lat,
        playerLng=state.player_lng,
        heldTokenValue=state.held_token,
        geolocationMode=state.geolocation_mode,
        cellOverrides=[
            CellOverrideRecord(key=coord.key, value=rec.value, modified=rec.overridden)
            for coord, rec in state.cells.records()
        ],
    )
    return record.model_dump()


def deserialize(record: Union[Mapping[str, Any], str, bytes, None], config: GameConfig) -> GameState:
    """
    Rebuilds a GameState from a record (mapping, or raw JSON text or bytes).
    Falls back to the default state on absence or corruption.
    """
    if record is None:
        return default_state(config)

    if isinstance(record, bytes):
        try:
            record = record.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Discarding malformed saved state (not UTF-8): %s", exc)
            return default_state(config)

    try:
        if isinstance(record, str):
            parsed = PersistedState.model_validate_json(record)
        else:
            parsed = PersistedState.model_validate(record)
    except ValidationError as exc:
        logger.warning("Discarding malformed saved state (%d errors): %s", exc.error_count(), exc)
        return default_state(config)

    cells = new_cell_store(config)
    for entry in parsed.cellOverrides:
        coord = CellCoord.from_key(entry.key)
        cells.set_override(coord.x, coord.y, entry.value, overridden=entry.modified)

    return GameState(
        player_lat=parsed.playerLat,
        player_lng=parsed.playerLng,
        held_token=parsed.heldTokenValue,
        geolocation_mode=parsed.geolocationMode,
        cells=cells,
    )

# ================================================================================
# STORAGE
# ================================================================================

class SaveStore:
    """One JSON session record on disk. Writes replace the file atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[bytes]:
        """Raw record bytes, or None when nothing has been saved."""
        if not self.path.exists():
            return None
        try:
            return self.path.read_bytes()
        except OSError as exc:
            logger.warning("Could not read saved state at %s: %s", self.path, exc)
            return None

    def write(self, record: Dict[str, Any]) -> bool:
        """
        Replaces the record on disk. A failed write is logged and leaves the
        previous file in place; the in-memory state is unaffected.
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(record, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            return True
        except OSError as exc:
            logger.warning("Could not write saved state to %s: %s", self.path, exc)
            if tmp_path.is_file():
                tmp_path.unlink()
            return False

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not clear saved state at %s: %s", self.path, exc)

    def load_state(self, config: GameConfig) -> GameState:
        return deserialize(self.load(), config)

    def save_state(self, state: GameState) -> bool:
        return self.write(serialize(state))


def reset(store: SaveStore, config: GameConfig) -> GameState:
    """Clears all persisted state and returns the defaults."""
    store.clear()
    return default_state(config)
