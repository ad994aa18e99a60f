"""
GridCache — engine/config.py
Game configuration loaded from TOML and validated by Pydantic.
=============================================================
Version:     0.1
Stack:       Python 3.11+ | Pydantic v2 | tomllib
Status:      Core configuration layer.
"""

import tomllib
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ================================================================================
# SCHEMAS
# ================================================================================

class WorldDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    start_lat: float = 36.997936938057016
    start_lng: float = -122.05703507501151
    tile_degrees: float = Field(default=1e-4, gt=0)
    spawn_probability: float = Field(default=0.2, ge=0.0, le=1.0)
    value_palette: List[int] = Field(default_factory=lambda: [0, 2, 4, 8], min_length=1)

    @field_validator("value_palette")
    @classmethod
    def _palette_non_negative(cls, palette: List[int]) -> List[int]:
        if any(v < 0 for v in palette):
            raise ValueError("value_palette entries must be >= 0")
        return palette

class PlayerDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    interaction_radius: int = Field(default=5, ge=0)
    tier: str = "classic"

class SessionDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    save_path: str = "sessions/gridcache.json"
    position_poll_seconds: float = Field(default=5.0, gt=0)

class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    world: WorldDef = Field(default_factory=WorldDef)
    player: PlayerDef = Field(default_factory=PlayerDef)
    tiers: Dict[str, int] = Field(default_factory=lambda: {"classic": 16, "extended": 128})
    session: SessionDef = Field(default_factory=SessionDef)

    @property
    def win_threshold(self) -> int:
        """Winning held-token value for the selected tier."""
        try:
            return self.tiers[self.player.tier]
        except KeyError:
            raise ValueError(f"Unknown win tier: {self.player.tier!r}") from None

# ================================================================================
# LOADER & CACHE
# ================================================================================

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CONFIG_PATH = DATA_DIR / "game.toml"

_CONFIG_CACHE: Dict[Path, GameConfig] = {}

def load_game_config(path: Optional[Path] = None, tier: Optional[str] = None) -> GameConfig:
    """
    Loads and validates the game configuration. Cached per path.
    A missing file yields the built-in defaults. `tier` overrides player.tier.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    config = _CONFIG_CACHE.get(path)
    if config is None:
        if path.exists():
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = GameConfig(**data)
        else:
            config = GameConfig()
        _CONFIG_CACHE[path] = config

    if tier is not None:
        config = config.model_copy(update={"player": config.player.model_copy(update={"tier": tier})})

    if config.player.tier not in config.tiers:
        raise ValueError(f"Unknown win tier: {config.player.tier!r}")
    return config
