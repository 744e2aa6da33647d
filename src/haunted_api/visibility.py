"""Flashlight visibility policy consumed by drawing code.

With the flashlight on the whole mansion is visible at full strength. In the
dark only cells within vision_radius of the player show, fading linearly
with distance. The player is always visible.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from .config import DEFAULT_CONFIG, EngineConfig
from .mansion.layout import Cell
from .mansion.tiles import CellKind
from .models import GameState, Monster, Position


@dataclass(frozen=True)
class VisibleCell:
    cell: Cell
    kind: CellKind
    alpha: float


def fade(distance: float, radius: float) -> float:
    """Opacity at distance in the dark: 1 at the player, 0 at the edge of vision."""
    if distance > radius:
        return 0.0
    return max(0.0, 1.0 - distance / radius)


def visible_cells(state: GameState, config: EngineConfig = DEFAULT_CONFIG) -> List[VisibleCell]:
    layout = state.layout
    player = state.player.position
    if state.player.flashlight_on:
        return [
            VisibleCell((x, y), layout.cells[y][x], 1.0)
            for y in range(layout.height)
            for x in range(layout.width)
        ]

    radius = config.vision_radius
    out: List[VisibleCell] = []
    # Only scan the bounding box of the vision circle
    x0 = max(0, math.floor(player.x - radius))
    x1 = min(layout.width - 1, math.ceil(player.x + radius))
    y0 = max(0, math.floor(player.y - radius))
    y1 = min(layout.height - 1, math.ceil(player.y + radius))
    for y in range(y0, y1 + 1):
        for x in range(x0, x1 + 1):
            d = player.distance_to(Position(x, y))
            if d <= radius:
                out.append(VisibleCell((x, y), layout.cells[y][x], fade(d, radius)))
    return out


def visible_monsters(state: GameState, config: EngineConfig = DEFAULT_CONFIG) -> List[Tuple[Monster, float]]:
    """Active monsters the player can see, each with its draw opacity."""
    player = state.player.position
    out: List[Tuple[Monster, float]] = []
    for monster in state.active_monsters():
        if state.player.flashlight_on:
            out.append((monster, 1.0))
            continue
        d = player.distance_to(monster.position)
        if d <= config.vision_radius:
            out.append((monster, fade(d, config.vision_radius)))
    return out
