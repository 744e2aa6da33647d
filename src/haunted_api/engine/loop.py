from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Configuration for the fixed-tick game loop.

    Attributes:
        tick_rate: Target updates per second for the loop. If 0 or None, updates as fast as possible.
        max_steps: If provided and > 0, the loop will automatically stop after this many updates.
    """

    tick_rate: float = 30.0
    max_steps: Optional[int] = None


class GameLoop:
    """Headless fixed-tick driver for a GameSession.

    Without an explicit LoopConfig the tick rate comes from the session's
    EngineConfig.

    Each update advances monster pursuit once and then calls the optional
    on_tick hook, where an input adapter moves the player and a drawing
    adapter reads the snapshot. Sleeping between ticks yields to the event
    loop, which is where request tasks complete.
    """

    def __init__(
        self,
        session: GameSession,
        config: Optional[LoopConfig] = None,
        on_tick: Optional[Callable[[GameSession], None]] = None,
    ) -> None:
        self.session = session
        self.config = config or LoopConfig(tick_rate=session.config.tick_rate)
        self.on_tick = on_tick
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the loop state.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        if self._running:
            logger.debug("GameLoop.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("GameLoop started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        """Stop the loop gracefully."""
        if not self._running:
            return
        self._running = False
        logger.info("GameLoop stopped at step=%s", self._step)

    def update(self, dt: float) -> None:
        """Perform a single update tick.

        Args:
            dt: Delta time in seconds since last update.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        self._step += 1
        logger.debug("Tick #%d (dt=%.4f)", self._step, dt)
        self.session.tick()
        if self.on_tick is not None:
            self.on_tick(self.session)

        if self.session.state.is_terminal:
            logger.info("Session reached %s", self.session.state.phase.name)
            self.stop()
        elif self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    async def run(self) -> None:
        """Run until stopped, the game ends or max_steps is reached.

        Throttles to tick_rate if configured; otherwise still yields to the
        event loop once per tick.
        """
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            if self._last_time is None:
                dt = 0.0
            else:
                dt = now - self._last_time
            self._last_time = now

            self.update(dt)

            remaining = 0.0
            if target_dt > 0:
                elapsed = time.perf_counter() - now
                remaining = max(0.0, target_dt - elapsed)
            await asyncio.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
