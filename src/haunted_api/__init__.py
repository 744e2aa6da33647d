"""
Haunted API House package root.

The game-state engine lives here: mansion generation, spatial queries, the
room-triggered request state machine and monster pursuit. Drawing and input
handling stay outside of these modules; they read ``GameState`` snapshots and
call the engine's actions.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
