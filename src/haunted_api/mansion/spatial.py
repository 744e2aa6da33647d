"""Pure spatial queries over a generated mansion.

These queries floor real-valued coordinates to the containing cell and never
raise for coordinates outside the grid.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from ..models import Room
from .layout import MansionLayout
from .tiles import CellKind


def _floor_cell(x: float, y: float) -> Tuple[int, int]:
    return math.floor(x), math.floor(y)


def cell_kind_at(layout: MansionLayout, x: float, y: float) -> Optional[CellKind]:
    """Kind of the cell containing (x, y), or None when outside the grid."""
    return layout.safe_get(*_floor_cell(x, y))


def is_wall(layout: MansionLayout, x: float, y: float) -> bool:
    """True if the cell containing (x, y) is a WALL or lies outside the grid."""
    kind = cell_kind_at(layout, x, y)
    return kind is None or kind is CellKind.WALL


def get_room_at(rooms: Iterable[Room], cell: Tuple[float, float]) -> Optional[Room]:
    """Return the room whose position equals the floored cell, if any."""
    target = _floor_cell(*cell)
    for room in rooms:
        if room.position == target:
            return room
    return None
