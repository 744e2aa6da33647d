from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .tiles import CellKind

Cell = Tuple[int, int]


@dataclass(frozen=True)
class MansionLayout:
    """Immutable width x height grid of cell kinds.

    Coordinates are (x, y) with (0,0) at top-left; x grows to the right, y grows down.
    cells[y][x] holds the kind of each cell.
    """

    width: int
    height: int
    cells: Tuple[Tuple[CellKind, ...], ...]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("MansionLayout dimensions must be positive")
        if len(self.cells) != self.height or any(len(row) != self.width for row in self.cells):
            raise ValueError(f"cells must be {self.height} rows of {self.width} cells")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "MansionLayout":
        """Build a layout from nested integer rows (0 empty, 1 wall, 2 room)."""
        if not rows or not rows[0]:
            raise ValueError("rows must not be empty")
        cells = tuple(tuple(CellKind(v) for v in row) for row in rows)
        return cls(len(rows[0]), len(rows), cells)

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "MansionLayout":
        """Create a layout from an ASCII representation ('#', '.', 'R')."""
        mapping = {'.': CellKind.EMPTY, '#': CellKind.WALL, 'R': CellKind.ROOM}
        try:
            rows = [[mapping[ch] for ch in line] for line in lines]
        except KeyError as e:
            raise ValueError(f"Unknown layout glyph: {e.args[0]!r}") from e
        return cls.from_rows(rows)

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellKind:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell out of bounds: ({x},{y}) not in [0,{self.width})x[0,{self.height})")
        return self.cells[y][x]

    def safe_get(self, x: int, y: int) -> Optional[CellKind]:
        if not self.in_bounds(x, y):
            return None
        return self.cells[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        kind = self.safe_get(x, y)
        return kind is not None and kind.is_walkable

    def neighbors4(self, x: int, y: int) -> Iterator[Cell]:
        # Ordered for deterministic traversal
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def cells_of(self, kind: CellKind) -> Iterable[Cell]:
        for y, row in enumerate(self.cells):
            for x, k in enumerate(row):
                if k is kind:
                    yield x, y

    # ---- Search ----------------------------------------------------------
    def reachable_from(self, start: Cell) -> Set[Cell]:
        """Return every walkable cell connected to start (4-neighbourhood)."""
        if not self.is_walkable(*start):
            return set()
        seen: Set[Cell] = {start}
        q = deque([start])
        while q:
            cx, cy = q.popleft()
            for n in self.neighbors4(cx, cy):
                if n not in seen and self.is_walkable(*n):
                    seen.add(n)
                    q.append(n)
        return seen

    def is_connected(self) -> bool:
        """True when all walkable cells form a single region."""
        walkable = list(self.cells_of(CellKind.EMPTY)) + list(self.cells_of(CellKind.ROOM))
        if not walkable:
            return True
        return len(self.reachable_from(walkable[0])) == len(walkable)

    # ---- Export / Compare -----------------------------------------------
    def as_rows(self) -> List[List[int]]:
        """Nested integer rows, the format drawing code consumes."""
        return [[int(k) for k in row] for row in self.cells]

    def to_lines(self) -> List[str]:
        return [''.join(k.glyph for k in row) for row in self.cells]

    def snapshot(self) -> Tuple[Tuple[int, ...], ...]:
        """Deterministic, hashable snapshot of the cells for equality tests."""
        return tuple(tuple(int(k) for k in row) for row in self.cells)
