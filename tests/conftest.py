import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from haunted_api.mansion.generator import Mansion  # noqa: E402
from haunted_api.mansion.layout import MansionLayout  # noqa: E402
from haunted_api.mansion.tiles import CellKind  # noqa: E402
from haunted_api.models import (  # noqa: E402
    ApiError,
    ApiResponse,
    Endpoint,
    EndpointCollection,
    RequestOutcome,
    Room,
)


def make_endpoints(n: int) -> List[Endpoint]:
    return [
        Endpoint(id=f"ep{i}", name=f"Endpoint {i}", method="GET", url=f"https://api.test/items/{i}")
        for i in range(1, n + 1)
    ]


def ok(status: int = 200, body=None) -> RequestOutcome:
    return RequestOutcome.success(ApiResponse(status=status, status_text="OK", duration_ms=12.0, body=body))


def fail(status: Optional[int] = 500, timeout: bool = False, message: str = "boom") -> RequestOutcome:
    return RequestOutcome.failure(ApiError(message=message, status=status, is_timeout=timeout))


def mansion_from_lines(lines: Sequence[str], endpoints: Optional[Sequence[Endpoint]] = None) -> Mansion:
    """Hand-built mansion; rooms are the 'R' cells in reading order."""
    layout = MansionLayout.from_lines(lines)
    cells = list(layout.cells_of(CellKind.ROOM))
    cells.sort(key=lambda c: (c[1], c[0]))
    endpoints = list(endpoints) if endpoints is not None else make_endpoints(len(cells))
    rooms = tuple(Room(id=e.id, position=c, endpoint=e) for e, c in zip(endpoints, cells))
    return Mansion(layout=layout, rooms=rooms, start=rooms[0].position)


class ScriptedExecutor:
    """Request executor returning canned outcomes per endpoint id.

    When a gate is given, every request waits for it before answering.
    """

    def __init__(
        self,
        outcomes: Optional[Dict[str, RequestOutcome]] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.gate = gate
        self.calls: List[str] = []

    async def execute(self, endpoint, auth, variables) -> RequestOutcome:
        self.calls.append(endpoint.id)
        if self.gate is not None:
            await self.gate.wait()
        return self.outcomes.get(endpoint.id, ok())


@pytest.fixture
def corridor_mansion() -> Mansion:
    # Three rooms along one corridor, 4 cells apart
    return mansion_from_lines(
        [
            "###########",
            "#R...R...R#",
            "###########",
        ]
    )


@pytest.fixture
def collection_for():
    def _build(mansion: Mansion) -> EndpointCollection:
        return EndpointCollection(name="test", endpoints=tuple(r.endpoint for r in mansion.rooms))

    return _build
