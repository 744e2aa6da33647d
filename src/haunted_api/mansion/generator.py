"""
Mansion generation: one room per endpoint on a connected grid.

Rooms are dropped onto a lattice whose size grows with ceil(sqrt(N)); each
room gets its own slot with a random offset inside it. Rooms are then linked
in serpentine slot order with L-shaped corridors, which is a spanning path
over all rooms, so connectivity holds by construction. A few extra corridors
between vertically adjacent slots add loops.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..exceptions import ConfigurationError
from ..models import Endpoint, Room
from .layout import Cell, MansionLayout
from .tiles import CellKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mansion:
    layout: MansionLayout
    rooms: Tuple[Room, ...]
    start: Cell


class _Canvas:
    """Mutable grid used while carving; frozen into a MansionLayout at the end."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells: List[List[CellKind]] = [[CellKind.WALL for _ in range(width)] for _ in range(height)]

    def in_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def set_cell(self, x: int, y: int, kind: CellKind) -> None:
        if not self.in_interior(x, y):
            # Corridors stay inside the lattice; this protects the outer wall against regressions.
            logger.error("Attempt to carve outside the mansion interior at (%d,%d)", x, y)
            return
        self._cells[y][x] = kind

    def carve(self, x: int, y: int) -> None:
        # Never overwrite a room cell with corridor
        if self._cells[y][x] is CellKind.WALL:
            self.set_cell(x, y, CellKind.EMPTY)

    def carve_h_corridor(self, x1: int, x2: int, y: int) -> None:
        if x2 < x1:
            x1, x2 = x2, x1
        for xx in range(x1, x2 + 1):
            self.carve(xx, y)

    def carve_v_corridor(self, y1: int, y2: int, x: int) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for yy in range(y1, y2 + 1):
            self.carve(x, yy)

    def connect(self, a: Cell, b: Cell, rng: random.Random) -> None:
        if rng.random() < 0.5:
            # horizontal then vertical
            self.carve_h_corridor(a[0], b[0], a[1])
            self.carve_v_corridor(a[1], b[1], b[0])
        else:
            # vertical then horizontal
            self.carve_v_corridor(a[1], b[1], a[0])
            self.carve_h_corridor(a[0], b[0], b[1])

    def freeze(self) -> MansionLayout:
        return MansionLayout(self.width, self.height, tuple(tuple(row) for row in self._cells))


class MansionGenerator:
    """Builds a Mansion from an ordered collection of endpoints.

    Guarantees:
    - Exactly one room per endpoint, on distinct ROOM cells, in endpoint order
    - Every room reachable from every other through non-WALL cells
    - One-cell wall border so nothing walks off the grid
    - Deterministic layout given the same seed and endpoints
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def dimensions_for(self, count: int) -> Tuple[int, int, int, int]:
        """Return (cols, rows, width, height) of the lattice for count rooms."""
        cols = math.ceil(math.sqrt(count))
        rows = math.ceil(count / cols)
        spacing = self.config.room_spacing
        margin = self.config.margin
        return cols, rows, cols * spacing + 2 * margin, rows * spacing + 2 * margin

    def generate(self, endpoints: Sequence[Endpoint], seed: Optional[int] = None) -> Mansion:
        if not endpoints:
            raise ConfigurationError("Cannot build a mansion without endpoints")
        ids = [e.id for e in endpoints]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate endpoint ids: {', '.join(duplicates)}")

        rng = random.Random(seed)
        count = len(endpoints)
        cols, rows, width, height = self.dimensions_for(count)
        logger.debug("Generating mansion: seed=%s rooms=%d lattice=%dx%d size=%dx%d", seed, count, cols, rows, width, height)

        canvas = _Canvas(width, height)
        slots = self._serpentine_slots(cols, rows)[:count]
        positions = [self._place_in_slot(slot, rng) for slot in slots]
        for x, y in positions:
            canvas.set_cell(x, y, CellKind.ROOM)

        # Spanning path over all rooms in slot order
        for a, b in zip(positions, positions[1:]):
            canvas.connect(a, b, rng)

        # Loops between vertically adjacent slots
        by_slot = dict(zip(slots, positions))
        extra = 0
        for (col, row), pos in by_slot.items():
            below = by_slot.get((col, row + 1))
            if below is not None and rng.random() < self.config.extra_corridor_chance:
                canvas.connect(pos, below, rng)
                extra += 1

        rooms = tuple(
            Room(id=endpoint.id, position=pos, endpoint=endpoint, visited=False, has_collectible=True)
            for endpoint, pos in zip(endpoints, positions)
        )
        layout = canvas.freeze()
        logger.info("Generated mansion %dx%d with %d rooms (%d extra corridors)", width, height, count, extra)
        return Mansion(layout=layout, rooms=rooms, start=rooms[0].position)

    @staticmethod
    def _serpentine_slots(cols: int, rows: int) -> List[Cell]:
        slots: List[Cell] = []
        for row in range(rows):
            order = range(cols) if row % 2 == 0 else range(cols - 1, -1, -1)
            slots.extend((col, row) for col in order)
        return slots

    def _place_in_slot(self, slot: Cell, rng: random.Random) -> Cell:
        spacing = self.config.room_spacing
        margin = self.config.margin
        col, row = slot
        # Jitter keeps one cell of the slot free so neighbouring rooms never touch
        return (
            margin + col * spacing + rng.randint(0, spacing - 2),
            margin + row * spacing + rng.randint(0, spacing - 2),
        )


def generate_mansion(
    endpoints: Sequence[Endpoint],
    seed: Optional[int] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> Mansion:
    """Convenience wrapper around MansionGenerator.generate."""
    return MansionGenerator(config).generate(endpoints, seed=seed)
