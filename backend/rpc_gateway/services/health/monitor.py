from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from rpc_gateway.config import settings
from rpc_gateway.errors import StoreUnavailable
from rpc_gateway.services.registry import EndpointRegistry

from .probe import LivenessProber, ProbeResult

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    STARTED = "started"
    UNIVERSE_LOADED = "universe_loaded"
    PROBING_ENDPOINTS = "probing_endpoints"
    PUBLISHED_HEALTHY_SET = "published_healthy_set"
    UNIVERSE_UNAVAILABLE = "universe_unavailable"
    PUBLISH_FAILED = "publish_failed"


@dataclass
class CycleReport:
    state: CycleState = CycleState.STARTED
    universe: List[str] = field(default_factory=list)
    healthy: List[str] = field(default_factory=list)
    results: List[ProbeResult] = field(default_factory=list)
    started_at: float = field(default_factory=time.time)
    duration: float = 0.0
    error: Optional[str] = None

    @property
    def published(self) -> bool:
        return self.state == CycleState.PUBLISHED_HEALTHY_SET

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "universe": list(self.universe),
            "healthy": list(self.healthy),
            "results": [result.to_dict() for result in self.results],
            "started_at": self.started_at,
            "duration": round(self.duration, 4),
            "error": self.error,
        }


class HealthMonitor:
    """
    Probes every endpoint of the universe and republishes the healthy subset.

    One call to ``run_cycle`` is one complete cycle. Scheduling belongs to the
    caller. Probes fan out with bounded concurrency, and the healthy set is
    published once, after every probe has finished.
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        client: Optional[httpx.AsyncClient] = None,
        probe_timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        self._registry = registry
        timeout = probe_timeout if probe_timeout is not None else settings.probe_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._prober = LivenessProber(self._client, timeout=timeout)
        self._max_concurrency = max(1, max_concurrency or settings.probe_max_concurrency)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _probe_all(self, universe: List[str]) -> List[ProbeResult]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(endpoint: str) -> ProbeResult:
            async with semaphore:
                try:
                    return await self._prober.probe(endpoint)
                except Exception as exc:
                    logger.warning("Probe for %s raised unexpectedly: %s", endpoint, exc)
                    return ProbeResult(endpoint=endpoint, healthy=False, latency=0.0, error=repr(exc))

        return list(await asyncio.gather(*(_bounded(endpoint) for endpoint in universe)))

    async def run_cycle(self) -> CycleReport:
        report = CycleReport()
        started = time.perf_counter()
        try:
            try:
                universe = await self._registry.get_universe()
            except StoreUnavailable as exc:
                report.state = CycleState.UNIVERSE_UNAVAILABLE
                report.error = str(exc)
                logger.error("Skipping health cycle, endpoint universe unavailable: %s", exc)
                return report

            if not universe:
                report.state = CycleState.UNIVERSE_UNAVAILABLE
                report.error = "endpoint universe is empty"
                logger.warning("Skipping health cycle, endpoint universe is empty")
                return report

            report.universe = list(universe)
            report.state = CycleState.UNIVERSE_LOADED
            logger.debug("Probing %d endpoints", len(report.universe))

            report.state = CycleState.PROBING_ENDPOINTS
            report.results = await self._probe_all(report.universe)
            # gather keeps input order, so the healthy list follows universe order
            report.healthy = [result.endpoint for result in report.results if result.healthy]

            try:
                await self._registry.put_healthy(report.healthy)
            except StoreUnavailable as exc:
                report.state = CycleState.PUBLISH_FAILED
                report.error = str(exc)
                logger.error("Failed to publish healthy set: %s", exc)
                return report

            report.state = CycleState.PUBLISHED_HEALTHY_SET
            logger.info(
                "Published healthy set: %d/%d endpoints healthy",
                len(report.healthy),
                len(report.universe),
            )
            return report
        finally:
            report.duration = time.perf_counter() - started
