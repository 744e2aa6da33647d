"""
Headless auto-explorer: walks the player through every room.

It is an external driver like a keyboard adapter: it only calls the
session's actions, one move per tick, and waits for each room's request to
resolve before walking on.
"""
from __future__ import annotations

import asyncio
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from .engine.session import GameSession
from .mansion.layout import Cell, MansionLayout
from .models import GamePhase

logger = logging.getLogger(__name__)


def plan_route(layout: MansionLayout, start: Cell, goal: Cell) -> Optional[List[Cell]]:
    """Breadth-first shortest path over walkable cells, 4-directional.

    Returns the cells after start up to and including goal ([] when
    start == goal), or None when goal is unreachable.
    """
    if not layout.is_walkable(*start) or not layout.is_walkable(*goal):
        return None
    came_from: Dict[Cell, Optional[Cell]] = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        if cur == goal:
            break
        for n in layout.neighbors4(*cur):
            if n not in came_from and layout.is_walkable(*n):
                came_from[n] = cur
                q.append(n)
    if goal not in came_from:
        return None
    path: List[Cell] = []
    node: Optional[Cell] = goal
    while node is not None and node != start:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


@dataclass(frozen=True)
class ExplorationReport:
    phase: GamePhase
    rooms_visited: int
    total_rooms: int
    collected: int
    monsters: int
    moves: int


class AutoExplorer:
    """Drive a GameSession through all rooms in endpoint order."""

    def __init__(self, session: GameSession, tick_monsters: bool = True, tick_delay: float = 0.0) -> None:
        self.session = session
        self.tick_monsters = tick_monsters
        self.tick_delay = tick_delay
        self._moves = 0
        # Enough steps to reach the next cell center from anywhere in the current cell
        self._max_steps_per_cell = math.ceil(2.0 / session.config.move_step) + 2

    async def run(self) -> ExplorationReport:
        session = self.session
        session.start()
        await session.settle()
        for room in session.state.rooms:
            if session.state.is_terminal:
                break
            current = session.state.room_by_id(room.id)
            if current is None or current.visited:
                continue
            route = plan_route(session.state.layout, session.state.player.position.cell(), room.position)
            if route is None:
                logger.error("Room %s is unreachable from %s", room.id, session.state.player.position.cell())
                continue
            logger.debug("Walking %d cells to room %s", len(route), room.id)
            for cell in route:
                if not await self._step_into(cell):
                    break
            await session.settle()
        return self.report()

    async def _step_into(self, cell: Cell) -> bool:
        """Walk to the center of an adjacent cell, one axis per move.

        Aiming at cell centers keeps the player clear of cell boundaries, so
        floating point drift never lands it in the wrong cell.
        """
        session = self.session
        step = session.config.move_step
        tx, ty = cell[0] + 0.5, cell[1] + 0.5
        for _ in range(self._max_steps_per_cell):
            if session.state.is_terminal:
                return False
            pos = session.state.player.position
            ox, oy = tx - pos.x, ty - pos.y
            if abs(ox) <= step / 2 and abs(oy) <= step / 2:
                return True
            if abs(ox) >= abs(oy):
                dx, dy = math.copysign(1.0, ox), 0.0
            else:
                dx, dy = 0.0, math.copysign(1.0, oy)
            if not session.move(dx, dy):
                logger.warning("Move toward %s rejected at %s", cell, pos)
                return False
            self._moves += 1
            if self.tick_monsters:
                session.tick()
            await asyncio.sleep(self.tick_delay)
        return session.state.player.position.cell() == cell

    def report(self) -> ExplorationReport:
        state = self.session.state
        return ExplorationReport(
            phase=state.phase,
            rooms_visited=sum(1 for r in state.rooms if r.visited),
            total_rooms=state.total_rooms,
            collected=state.player.collected_pieces,
            monsters=len(state.active_monsters()),
            moves=self._moves,
        )
