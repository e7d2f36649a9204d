from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from rpc_gateway.config import settings
from rpc_gateway.errors import ProbeFailed

logger = logging.getLogger(__name__)

LIVENESS_REQUEST: Dict[str, Any] = {"jsonrpc": "2.0", "id": 1, "method": "getHealth"}
LIVENESS_HEADERS = {"Content-Type": "application/json"}


@dataclass
class ProbeResult:
    endpoint: str
    healthy: bool
    latency: float
    status_code: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "healthy": self.healthy,
            "latency": round(self.latency, 4),
            "status_code": self.status_code,
            "error": self.error,
        }


class LivenessProber:
    """
    Issues the getHealth liveness request against an endpoint and classifies
    the outcome. Classification is fail-closed: the endpoint is healthy only if
    the response is a 2xx whose JSON body carries ``"result": "ok"``.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: Optional[float] = None) -> None:
        self._client = client
        self._timeout = timeout if timeout is not None else settings.probe_timeout

    async def _check(self, endpoint: str) -> int:
        try:
            response = await asyncio.wait_for(
                self._client.post(endpoint, json=LIVENESS_REQUEST, headers=LIVENESS_HEADERS, timeout=self._timeout),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise ProbeFailed(endpoint, f"timed out after {self._timeout:.2f}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProbeFailed(endpoint, f"transport error: {exc!r}") from exc

        if not response.is_success:
            raise ProbeFailed(endpoint, f"HTTP {response.status_code}", response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProbeFailed(endpoint, "malformed JSON body", response.status_code) from exc

        result = payload.get("result") if isinstance(payload, dict) else None
        if result != "ok":
            raise ProbeFailed(endpoint, f"liveness result {result!r}", response.status_code)
        return response.status_code

    async def probe(self, endpoint: str) -> ProbeResult:
        started = time.perf_counter()
        try:
            status_code = await self._check(endpoint)
        except ProbeFailed as exc:
            latency = time.perf_counter() - started
            logger.warning("Probe failed for %s: %s", endpoint, exc.reason)
            return ProbeResult(
                endpoint=endpoint,
                healthy=False,
                latency=latency,
                status_code=exc.status_code,
                error=exc.reason,
            )

        latency = time.perf_counter() - started
        logger.debug("✅ %s healthy in %.3fs", endpoint, latency)
        return ProbeResult(endpoint=endpoint, healthy=True, latency=latency, status_code=status_code)
