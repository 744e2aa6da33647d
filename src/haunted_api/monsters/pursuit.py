"""Per-tick steering of active monsters toward the player.

This is steering, not pathfinding: by default monsters drift straight
through walls. EngineConfig.monsters_blocked_by_walls applies the player's
wall rule instead.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..mansion.layout import MansionLayout
from ..mansion.spatial import is_wall
from ..models import Monster, Position, Room

logger = logging.getLogger(__name__)


def step_monster(
    monster: Monster,
    target: Position,
    config: EngineConfig = DEFAULT_CONFIG,
    layout: Optional[MansionLayout] = None,
) -> Monster:
    """Advance one monster a single tick toward target.

    Inactive monsters are returned unchanged. Active ones age by one tick;
    they hold position within stop_epsilon of the target. The step never
    carries a monster past the target.
    """
    if not monster.active:
        return monster
    aged = replace(monster, age=monster.age + 1)
    dx = target.x - monster.position.x
    dy = target.y - monster.position.y
    distance = monster.position.distance_to(target)
    if distance <= config.stop_epsilon:
        return aged

    step = min(monster.speed * config.monster_step_factor, distance)
    new_pos = monster.position.offset(dx / distance * step, dy / distance * step)
    if config.monsters_blocked_by_walls and layout is not None and is_wall(layout, new_pos.x, new_pos.y):
        logger.debug("Monster %s blocked by wall at (%.2f, %.2f)", monster.archetype.value, new_pos.x, new_pos.y)
        return aged
    return replace(aged, position=new_pos)


def pursue(
    rooms: Iterable[Room],
    target: Position,
    layout: Optional[MansionLayout] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Tuple[Room, ...]:
    """Step every room's active monster; rooms without one pass through untouched."""
    out = []
    for room in rooms:
        if room.monster is None or not room.monster.active:
            out.append(room)
            continue
        out.append(replace(room, monster=step_monster(room.monster, target, config, layout)))
    return tuple(out)


def nearest_monster_distance(rooms: Iterable[Room], target: Position, min_age: int = 0) -> Optional[float]:
    """Distance from target to the closest active monster at least min_age ticks old.

    Returns None if there is no such monster.
    """
    distances = [
        room.monster.position.distance_to(target)
        for room in rooms
        if room.monster is not None and room.monster.active and room.monster.age >= min_age
    ]
    return min(distances) if distances else None
