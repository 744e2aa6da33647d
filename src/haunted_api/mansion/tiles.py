from enum import IntEnum


class CellKind(IntEnum):
    """Mansion cell kinds.

    - EMPTY: Walkable corridor or hall
    - WALL: Impassable
    - ROOM: Walkable cell bound to exactly one endpoint room
    """

    EMPTY = 0
    WALL = 1
    ROOM = 2

    @property
    def is_walkable(self) -> bool:
        return self is not CellKind.WALL

    @property
    def glyph(self) -> str:
        """A single-character visualization useful for logs/debug."""
        return {CellKind.EMPTY: '.', CellKind.WALL: '#', CellKind.ROOM: 'R'}[self]
