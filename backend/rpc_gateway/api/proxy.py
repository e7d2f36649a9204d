"""Catch-all JSON-RPC proxy endpoint"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from rpc_gateway.api.admin import ADMIN_PREFIX
from rpc_gateway.api.admin import router as admin_router
from rpc_gateway.config import settings
from rpc_gateway.cors import ALLOW_ORIGIN
from rpc_gateway.errors import NoHealthyEndpoints, StoreUnavailable, UpstreamUnreachable
from rpc_gateway.services.gateway import get_gateway
from rpc_gateway.services.routing import ProxyRequest, ProxyResponse

logger = logging.getLogger(__name__)

router = APIRouter()

NO_HEALTHY_MESSAGE = "No healthy RPC endpoints available"
UPSTREAM_UNREACHABLE_MESSAGE = "Upstream RPC endpoint unreachable"


def _error_response(status_code: int, message: str, headers=None) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code, headers={ALLOW_ORIGIN: "*", **(headers or {})})


def _to_response(proxied: ProxyResponse) -> Response:
    response = Response(content=proxied.content, status_code=proxied.status_code)
    for name, value in proxied.headers:
        response.headers.append(name, value)
    return response


def _reserved_response(path: str):
    """
    Answer a /_gateway request that no admin route matched. Known admin paths
    get 405 with their allowed methods, anything else 404.
    """

    allowed = set()
    for route in admin_router.routes:
        if f"{ADMIN_PREFIX}{route.path}" == path:
            allowed.update(route.methods or [])
    if allowed:
        return _error_response(405, "Method Not Allowed", headers={"Allow": ", ".join(sorted(allowed))})
    return _error_response(404, "Not Found")


def _is_reserved(path: str) -> bool:
    return settings.admin_enabled and (path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/"))


async def proxy_rpc(request: Request):
    """
    Forward a request of any method to one healthy RPC endpoint.

    OPTIONS requests are answered locally with the CORS preflight headers.
    """

    path = "/" + request.path_params.get("path", "")
    if request.method != "OPTIONS" and _is_reserved(path):
        logger.warning("Not forwarding %s %s: reserved admin path", request.method, path)
        return _reserved_response(path)

    gateway = get_gateway()
    proxy_request = ProxyRequest(
        method=request.method,
        path=path,
        query=request.url.query,
        headers=list(request.headers.items()),
        body=b"" if request.method == "OPTIONS" else await request.body(),
    )

    try:
        proxied = await gateway.router.route(proxy_request)
    except NoHealthyEndpoints:
        logger.warning("Rejecting %s %s: no healthy endpoints", request.method, path)
        return _error_response(503, NO_HEALTHY_MESSAGE)
    except StoreUnavailable as exc:
        logger.error("Rejecting %s %s: registry unavailable: %s", request.method, path, exc)
        return _error_response(503, NO_HEALTHY_MESSAGE)
    except UpstreamUnreachable as exc:
        logger.error("Upstream %s unreachable: %s", exc.endpoint, exc.reason)
        return _error_response(502, UPSTREAM_UNREACHABLE_MESSAGE)

    return _to_response(proxied)


# A plain Starlette route with no method list accepts every method, extension
# methods included
router.add_route("/{path:path}", proxy_rpc, include_in_schema=False)
