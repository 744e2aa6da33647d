from enum import Enum, auto


class GameEvent(Enum):
    """Events emitted by GameSession to notify drawing code or other systems."""

    PLAYER_MOVED = auto()
    FLASHLIGHT_TOGGLED = auto()
    ROOM_ENTERED = auto()
    REQUEST_SUCCEEDED = auto()
    MONSTER_SPAWNED = auto()
    VICTORY = auto()
    GAME_OVER = auto()
