from .events import GameEvent
from .state_machine import (
    begin_visit,
    cancel_visit,
    move_player,
    new_game,
    resolve_visit,
    tick_monsters,
    toggle_flashlight,
)

__all__ = [
    "GameEvent",
    "begin_visit",
    "cancel_visit",
    "move_player",
    "new_game",
    "resolve_visit",
    "tick_monsters",
    "toggle_flashlight",
]
