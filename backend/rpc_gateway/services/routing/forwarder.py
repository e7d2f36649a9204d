from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import httpx

from rpc_gateway.config import settings
from rpc_gateway.errors import UpstreamUnreachable

logger = logging.getLogger(__name__)

# Recomputed by the transport on each hop
_REQUEST_HOP_HEADERS = {
    "host",
    "content-length",
    "transfer-encoding",
    "connection",
    "keep-alive",
    "proxy-connection",
    "upgrade",
    "te",
}
# httpx hands back a decoded body, so length and encoding no longer apply
_RESPONSE_HOP_HEADERS = {
    "content-encoding",
    "content-length",
    "transfer-encoding",
    "connection",
    "keep-alive",
}


@dataclass
class ProxyRequest:
    method: str
    path: str = "/"
    query: str = ""
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


@dataclass
class ProxyResponse:
    status_code: int
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: bytes = b""
    endpoint: Optional[str] = None


class UpstreamForwarder:
    """
    Sends a client request to one endpoint and captures the upstream reply.
    Transport failures raise UpstreamUnreachable; any HTTP status is a reply.
    """

    def __init__(self, client: httpx.AsyncClient, forward_path: Optional[bool] = None) -> None:
        self._client = client
        self._forward_path = settings.forward_request_path if forward_path is None else forward_path

    def target_url(self, endpoint: str, request: ProxyRequest) -> str:
        if not self._forward_path:
            return endpoint
        url = endpoint.rstrip("/") + "/" + request.path.lstrip("/")
        if request.query:
            url = f"{url}?{request.query}"
        return url

    async def forward(self, endpoint: str, request: ProxyRequest) -> ProxyResponse:
        url = self.target_url(endpoint, request)
        headers = [(name, value) for name, value in request.headers if name.lower() not in _REQUEST_HOP_HEADERS]
        try:
            response = await self._client.request(request.method, url, content=request.body or None, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Failed to forward %s request to %s: %s", request.method, endpoint, exc)
            raise UpstreamUnreachable(endpoint, repr(exc)) from exc

        resp_headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _RESPONSE_HOP_HEADERS
        ]
        return ProxyResponse(
            status_code=response.status_code,
            headers=resp_headers,
            content=response.content,
            endpoint=endpoint,
        )
