"""
Value types for the game-state engine.

Every snapshot type is a frozen dataclass; the engine never mutates one in
place and instead builds a new value with ``dataclasses.replace``. Optional
ownership (a room's monster, the state's pending request) is a plain
``Optional`` field.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

from .mansion.layout import Cell, MansionLayout

TIMEOUT: Literal["timeout"] = "timeout"

# A failure signal is an HTTP status code or the timeout marker.
FailureSignal = Union[int, Literal["timeout"]]

SCORE_PER_PIECE = 100


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def cell(self) -> Cell:
        """The integer cell holding this position (coordinates floored)."""
        return math.floor(self.x), math.floor(self.y)

    def distance_to(self, other: "Position") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)

    @classmethod
    def of_cell(cls, cell: Cell) -> "Position":
        return cls(float(cell[0]), float(cell[1]))


# ---- Session inputs -------------------------------------------------------
@dataclass(frozen=True)
class Endpoint:
    """One API endpoint the mansion turns into a room."""

    id: str
    name: str
    method: str
    url: str
    description: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Any] = None


@dataclass(frozen=True)
class AuthConfig:
    """Session-scoped credentials injected into every request.

    type is one of none, bearer, basic or apikey. API keys go into a header
    unless location is "query".
    """

    type: str = "none"
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    location: str = "header"


@dataclass(frozen=True)
class EndpointCollection:
    name: str
    endpoints: Tuple[Endpoint, ...]
    auth: AuthConfig = field(default_factory=AuthConfig)
    variables: Mapping[str, str] = field(default_factory=dict)


# ---- Request outcomes -----------------------------------------------------
@dataclass(frozen=True)
class ApiResponse:
    status: int
    status_text: str
    duration_ms: float
    body: Any = None


@dataclass(frozen=True)
class ApiError:
    message: str
    status: Optional[int] = None
    is_timeout: bool = False
    duration_ms: float = 0.0


@dataclass(frozen=True)
class RequestOutcome:
    """Exactly one terminal result of an issued request."""

    response: Optional[ApiResponse] = None
    error: Optional[ApiError] = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("RequestOutcome needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.response is not None

    @classmethod
    def success(cls, response: ApiResponse) -> "RequestOutcome":
        return cls(response=response)

    @classmethod
    def failure(cls, error: ApiError) -> "RequestOutcome":
        return cls(error=error)


# ---- World entities -------------------------------------------------------
class MonsterArchetype(str, Enum):
    GHOST = "ghost"
    DEMON = "demon"
    ZOMBIE = "zombie"
    VAMPIRE = "vampire"
    WRAITH = "wraith"


@dataclass(frozen=True)
class Monster:
    archetype: MonsterArchetype
    position: Position
    signal: FailureSignal
    active: bool = True
    speed: float = 1.0
    age: int = 0


@dataclass(frozen=True)
class Room:
    id: str
    position: Cell
    endpoint: Endpoint
    visited: bool = False
    has_collectible: bool = True
    monster: Optional[Monster] = None

    @property
    def origin(self) -> Position:
        """Top-left corner of the room's cell, where the player and monsters spawn."""
        return Position.of_cell(self.position)


@dataclass(frozen=True)
class Player:
    position: Position
    velocity: Position = Position(0.0, 0.0)
    current_room: Optional[str] = None
    collected_pieces: int = 0
    flashlight_on: bool = False


@dataclass(frozen=True)
class PendingRequest:
    room_id: str
    endpoint_id: str


class GamePhase(Enum):
    EXPLORING = auto()
    REQUEST_PENDING = auto()
    VICTORY = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class GameState:
    """Authoritative snapshot of one session.

    Terminal once game_over or victory is set; every action then returns the
    state it was given.
    """

    player: Player
    rooms: Tuple[Room, ...]
    layout: MansionLayout
    pending_request: Optional[PendingRequest] = None
    last_response: Optional[ApiResponse] = None
    last_error: Optional[ApiError] = None
    score: int = 0
    game_over: bool = False
    victory: bool = False

    @property
    def total_rooms(self) -> int:
        return len(self.rooms)

    @property
    def is_terminal(self) -> bool:
        return self.game_over or self.victory

    @property
    def phase(self) -> GamePhase:
        if self.game_over:
            return GamePhase.GAME_OVER
        if self.victory:
            return GamePhase.VICTORY
        if self.pending_request is not None:
            return GamePhase.REQUEST_PENDING
        return GamePhase.EXPLORING

    def room_by_id(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def active_monsters(self) -> Tuple[Monster, ...]:
        return tuple(r.monster for r in self.rooms if r.monster is not None and r.monster.active)

    def summary(self) -> Dict[str, Any]:
        """Small dict view for logs and the CLI."""
        return {
            "phase": self.phase.name,
            "collected": self.player.collected_pieces,
            "total": self.total_rooms,
            "visited": sum(1 for r in self.rooms if r.visited),
            "monsters": len(self.active_monsters()),
            "score": self.score,
        }
