from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Optional

from .mansion.spatial import get_room_at
from .models import GameState, Room

UNVISITED_HINT = "Stand in the room to make the API request"


@dataclass(frozen=True)
class RoomReport:
    """What the flashlight inspection panel shows for the room under the player."""

    room_id: str
    name: str
    method: str
    url: str
    description: Optional[str]
    visited: bool
    response_line: Optional[str] = None
    response_body: Optional[str] = None
    monster_line: Optional[str] = None
    error_detail: Optional[str] = None
    hint: Optional[str] = None

    def to_lines(self) -> List[str]:
        lines = [f"{self.name} [{self.method}] {self.url}"]
        if self.description:
            lines.append(self.description)
        if self.response_line:
            lines.append(f"Last response: {self.response_line}")
        if self.response_body:
            lines.append(self.response_body)
        if self.monster_line:
            lines.append(f"Monster detected: {self.monster_line}")
        if self.error_detail:
            lines.append(self.error_detail)
        if self.hint:
            lines.append(self.hint)
        return lines


def current_room(state: GameState) -> Optional[Room]:
    return get_room_at(state.rooms, (state.player.position.x, state.player.position.y))


def inspect_room(state: GameState) -> Optional[RoomReport]:
    """Report on the room the player stands in, or None in a corridor.

    The last response/error are session-wide snapshots, so they are shown
    for a visited room only.
    """
    room = current_room(state)
    if room is None:
        return None
    endpoint = room.endpoint
    response_line = response_body = monster_line = error_detail = hint = None
    if room.visited and room.monster is None and state.last_response is not None:
        resp = state.last_response
        parts = [str(resp.status), resp.status_text, f"({resp.duration_ms:.0f}ms)"]
        response_line = " ".join(p for p in parts if p)
        if isinstance(resp.body, str):
            response_body = resp.body
        elif resp.body is not None:
            response_body = json.dumps(resp.body, indent=2, default=str)
    if room.monster is not None:
        monster_line = f"{room.monster.archetype.value.upper()} - Error {room.monster.signal}"
        if state.last_error is not None:
            error_detail = state.last_error.message
    if not room.visited:
        hint = UNVISITED_HINT
    return RoomReport(
        room_id=room.id,
        name=endpoint.name,
        method=endpoint.method,
        url=endpoint.url,
        description=endpoint.description,
        visited=room.visited,
        response_line=response_line,
        response_body=response_body,
        monster_line=monster_line,
        error_detail=error_detail,
        hint=hint,
    )


def render_ascii(state: GameState) -> List[str]:
    """Map lines: '#' wall, '.' floor, 'R'/'r' unvisited/visited room, 'M' monster, '@' player."""
    grid = [list(line) for line in state.layout.to_lines()]
    for room in state.rooms:
        x, y = room.position
        grid[y][x] = 'r' if room.visited else 'R'
    for monster in state.active_monsters():
        mx, my = monster.position.cell()
        if state.layout.in_bounds(mx, my):
            grid[my][mx] = 'M'
    px, py = state.player.position.cell()
    if state.layout.in_bounds(px, py):
        grid[py][px] = '@'
    return [''.join(row) for row in grid]
