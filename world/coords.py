"""
GridCache — world/coords.py
Coordinate Mapper: continuous (lat, lng) <-> discrete cell indices.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import NamedTuple, Tuple


_INDEX = r"(?:0|-?[1-9][0-9]*)"
_KEY_RE = re.compile(_INDEX + "," + _INDEX)


def _dec(value: float) -> Decimal:
    # repr() is the shortest round-tripping form, so 1e-4 becomes exactly 0.0001
    return Decimal(repr(float(value)))


class CellCoord(NamedTuple):
    """A tile on the unbounded grid. x follows latitude, y follows longitude."""
    x: int
    y: int

    @property
    def key(self) -> str:
        return f"{self.x},{self.y}"

    @classmethod
    def from_key(cls, key: str) -> "CellCoord":
        """Parses an "x,y" key. Raises ValueError on anything else."""
        if not _KEY_RE.fullmatch(key):
            raise ValueError(f"Malformed cell key: {key!r}")
        x, y = key.split(",")
        return cls(int(x), int(y))


def to_cell_index(value: float, tile_size: float) -> int:
    """Floor division of a continuous coordinate by the tile size, computed exactly."""
    return math.floor(_dec(value) / _dec(tile_size))


def player_cell(lat: float, lng: float, tile_size: float) -> CellCoord:
    """
    The cell containing the player. Floors like every other cell index, not
    truncation toward zero or rounding, so the result is always the cell whose
    cell_bounds contain (lat, lng), including at negative coordinates.
    """
    return CellCoord(to_cell_index(lat, tile_size), to_cell_index(lng, tile_size))


def cell_bounds(x: int, y: int, tile_size: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Returns ((south, west), (north, east)) of cell (x, y)."""
    tile = _dec(tile_size)
    return (
        (float(x * tile), float(y * tile)),
        (float((x + 1) * tile), float((y + 1) * tile)),
    )


def offset_position(value: float, cells: int, tile_size: float) -> float:
    """Moves a continuous coordinate by a whole number of tiles without float drift."""
    return float(_dec(value) + cells * _dec(tile_size))
