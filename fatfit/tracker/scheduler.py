"""Recurring daily reset of accumulated calorie totals.

Owned by the application lifespan: started on startup, cancelled on
shutdown. A failed run is logged and waits for the next day.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Awaitable, Callable
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


class DailyReset:
    def __init__(
        self,
        action: Callable[[], Awaitable[int]],
        *,
        hour: int = 0,
        minute: int = 1,
        tz_name: str = "UTC",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._action = action
        self._at = time(hour, minute)
        self._tz = ZoneInfo(tz_name)
        self._clock = clock
        self._task: asyncio.Task | None = None

    def next_run(self, now: datetime) -> datetime:
        """Next wall-clock occurrence of the reset time strictly after `now`."""
        local_now = now.astimezone(self._tz)
        candidate = datetime.combine(local_now.date(), self._at, tzinfo=self._tz)
        if candidate <= local_now:
            candidate = datetime.combine(local_now.date() + timedelta(days=1), self._at, tzinfo=self._tz)
        return candidate

    async def run_once(self) -> int | None:
        try:
            deleted = await self._action()
        except Exception:
            logger.exception("Daily reset failed")
            return None
        logger.info("Daily reset cleared %d calorie total(s)", deleted)
        return deleted

    async def _loop(self) -> None:
        while True:
            now = self._clock()
            delay = (self.next_run(now) - now).total_seconds()
            await asyncio.sleep(max(delay, 0.0))
            await self.run_once()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        logger.info("Daily reset scheduled at %s %s", self._at.strftime("%H:%M"), self._tz.key)
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Daily reset stopped")
        self._task = None
