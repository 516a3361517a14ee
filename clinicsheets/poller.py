from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


class Poller:
    """
    Runs an async callback every `interval` seconds.

    At most one timer task exists: start() replaces a running one and
    stop() returns to idle. Both must be called from a running event loop.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval: float):
        self._callback = callback
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> PollerState:
        if self._task is None:
            return PollerState.IDLE
        return PollerState.POLLING

    def start(self) -> None:
        if self._task is not None:
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Polling started: fetching data every %s seconds.", self.interval)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.info("Polling stopped.")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._callback()
            except Exception:
                logger.exception("Polling callback failed")
