"""
GridCache — engine/ecs/components.py
ECS Component Definitions for python-tcod-ecs.
==============================================
Materialized cells live in the UI registry as entities. Components hold the
cell handle (its key) and the interactivity flag, never the cell value.
"""

from __future__ import annotations
from dataclasses import dataclass

@dataclass
class Position:
    x: int
    y: int

@dataclass
class CellMarker:
    key: str                                # "x,y" handle into the Cell Store
    interactive: bool = False               # in interaction range of the player
