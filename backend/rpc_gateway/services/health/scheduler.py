from __future__ import annotations

import asyncio
import logging
from typing import Optional

from rpc_gateway.config import settings

from .monitor import CycleReport, HealthMonitor

logger = logging.getLogger(__name__)


class HealthCheckScheduler:
    """
    Periodic trigger for the health monitor inside a long-running process.

    Cycles never overlap: a manual ``run_once`` issued while a scheduled cycle is
    in flight waits for it to finish.
    """

    def __init__(self, monitor: HealthMonitor, interval: Optional[float] = None) -> None:
        self.monitor = monitor
        self.interval = interval if interval is not None else settings.health_check_interval
        self.last_report: Optional[CycleReport] = None
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> CycleReport:
        async with self._lock:
            report = await self.monitor.run_cycle()
            self.last_report = report
            return report

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Health cycle crashed: %s", exc, exc_info=True)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting health checks every %ss", self.interval)
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
