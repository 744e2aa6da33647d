from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from ..config import DEFAULT_CONFIG, EngineConfig
from ..http.executor import RequestExecutor
from ..mansion.generator import Mansion, MansionGenerator
from ..models import ApiError, EndpointCollection, GameState, RequestOutcome, Room
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

logger = logging.getLogger(__name__)


class GameSession:
    """Runs one game on a single asyncio event loop.

    Holds the current GameState and applies the pure transforms from
    state_machine to it. After every position change the visitation watcher
    runs; when it asks for a request, the request is started as a task on the
    running loop and its outcome is folded back into state on that same loop.
    The pending-request field set by the watcher keeps at most one request in
    flight.

    Methods that can move the player must be called from inside the running
    event loop.
    """

    def __init__(
        self,
        collection: EndpointCollection,
        executor: RequestExecutor,
        config: EngineConfig = DEFAULT_CONFIG,
        seed: Optional[int] = None,
        mansion: Optional[Mansion] = None,
    ) -> None:
        self.collection = collection
        self.config = config
        self._executor = executor
        if mansion is None:
            mansion = MansionGenerator(config).generate(collection.endpoints, seed=seed)
        self._state: GameState = new_game(mansion)
        self._listeners: List[Callable[[GameEvent, "GameSession"], None]] = []
        self._inflight: Optional[asyncio.Task] = None
        logger.info("Initialized session '%s' with %d rooms", collection.name, self._state.total_rooms)

    @property
    def state(self) -> GameState:
        """Read-only snapshot of the current state."""
        return self._state

    @property
    def request_in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def add_listener(self, listener: Callable[[GameEvent, "GameSession"], None]) -> None:
        """Subscribe to game events (movement, requests, terminal transitions)."""
        self._listeners.append(listener)

    def _emit(self, event: GameEvent) -> None:
        for l in list(self._listeners):
            try:
                l(event, self)
            except Exception as ex:  # pragma: no cover - listeners shouldn't crash engine
                logger.exception("Listener errored on %s: %s", event, ex)

    # ---- Actions ---------------------------------------------------------
    def start(self) -> None:
        """Run the visitation watcher for the starting cell.

        The player spawns inside the first room, so this issues its request.
        """
        self._watch()

    def move(self, dx: float, dy: float) -> bool:
        """Attempt to move the player by (dx, dy) steps.

        Returns True if the move happened. Runs the visitation watcher after
        an accepted move.
        """
        moved = move_player(self._state, dx, dy, self.config)
        if moved is self._state:
            return False
        self._state = moved
        self._emit(GameEvent.PLAYER_MOVED)
        self._watch()
        return True

    def toggle_flashlight(self) -> bool:
        toggled = toggle_flashlight(self._state)
        if toggled is self._state:
            return False
        self._state = toggled
        self._emit(GameEvent.FLASHLIGHT_TOGGLED)
        return True

    def tick(self) -> None:
        """Advance monster pursuit by one fixed step."""
        was_over = self._state.game_over
        self._state = tick_monsters(self._state, self.config)
        if self._state.game_over and not was_over:
            self._emit(GameEvent.GAME_OVER)

    async def settle(self) -> None:
        """Wait until no request is in flight, including follow-up requests."""
        while self._inflight is not None and not self._inflight.done():
            await self._inflight

    async def close(self) -> None:
        """Cancel an in-flight request; its outcome is never folded in.

        The pending request is cleared, so the room stays unvisited and the
        session goes back to exploring.
        """
        task = self._inflight
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug("Cancelled in-flight request on close")
        pending = self._state.pending_request
        if pending is not None:
            self._state = cancel_visit(self._state, pending.room_id)

    # ---- Visitation watcher ---------------------------------------------
    def _watch(self) -> None:
        state, room = begin_visit(self._state)
        if room is None:
            self._state = state
            return
        # Outside a running loop this raises before the request is marked pending
        loop = asyncio.get_running_loop()
        self._state = state
        self._emit(GameEvent.ROOM_ENTERED)
        self._inflight = loop.create_task(self._run_request(room), name=f"request:{room.id}")

    async def _run_request(self, room: Room) -> None:
        try:
            outcome = await self._executor.execute(
                room.endpoint, self.collection.auth, self.collection.variables
            )
        except asyncio.CancelledError:
            raise
        except Exception as ex:
            # Executors report failures as outcomes; anything escaping still counts as one failure
            logger.exception("Executor raised for room %s", room.id)
            outcome = RequestOutcome.failure(ApiError(message=str(ex) or type(ex).__name__))
        self._resolve(room.id, outcome)

    def _resolve(self, room_id: str, outcome: RequestOutcome) -> None:
        before = self._state
        self._state = resolve_visit(before, room_id, outcome)
        if self._state is before:
            return
        if outcome.ok:
            self._emit(GameEvent.REQUEST_SUCCEEDED)
        else:
            self._emit(GameEvent.MONSTER_SPAWNED)
        if self._state.victory and not before.victory:
            self._emit(GameEvent.VICTORY)
            return
        # The player may already stand in another unvisited room
        self._watch()
