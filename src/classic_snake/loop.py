"""Cancellable periodic tick loop driving a :class:`GameEngine`."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from classic_snake.engine import GameEngine

logger = logging.getLogger(__name__)

TickCallback = Callable[[dict], Awaitable[None]]


class GameLoop:
    """Runs ``engine.step()`` once per tick interval on the event loop.

    The stop flag is checked before and after every sleep, and the sleep
    itself wakes as soon as the flag is set, so a stop request is honoured
    within one interval and no step runs after it has been observed.
    """

    def __init__(
        self,
        engine: GameEngine,
        tick_interval: float | None = None,
        on_tick: TickCallback | None = None,
        lock: asyncio.Lock | None = None,
    ) -> None:
        interval = (
            tick_interval if tick_interval is not None
            else engine.config.tick_interval
        )
        if interval <= 0:
            raise ValueError("tick_interval must be positive.")
        self.engine = engine
        self.tick_interval = interval
        self.on_tick = on_tick
        self.lock = lock if lock is not None else asyncio.Lock()
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self.running:
            raise RuntimeError("Game loop is already running.")
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._run())
        return self._task

    def request_stop(self) -> None:
        """Ask the loop to exit at its next check."""
        self._stop.set()

    async def stop(self) -> None:
        """Request a stop and wait for the loop to finish."""
        self.request_stop()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def wait(self) -> None:
        """Wait until the loop exits on its own."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self.tick_interval)
        except asyncio.TimeoutError:
            pass

    async def _run(self) -> None:
        try:
            while not self._stop.is_set():
                await self._sleep()
                if self._stop.is_set():
                    break
                async with self.lock:
                    if self._stop.is_set():
                        break
                    state = self.engine.step()
                if self.on_tick is not None:
                    await self.on_tick(state)
                if not self.engine.is_started:
                    break
        except asyncio.CancelledError:
            logger.info("Game loop cancelled.")
        except Exception:
            logger.exception(
                "Game loop failed at tick %d in state %s.",
                self.engine.tick, self.engine.state.value,
            )
        else:
            logger.debug(
                "Game loop exited in state %s.", self.engine.state.value,
            )
