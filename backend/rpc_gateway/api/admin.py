"""Gateway administration endpoints (never forwarded upstream)."""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import APIKeyHeader

from rpc_gateway.config import settings
from rpc_gateway.errors import StoreUnavailable
from rpc_gateway.models.api import CycleReportResponse, EndpointListResponse, EndpointUpdateRequest
from rpc_gateway.services.gateway import get_gateway
from rpc_gateway.services.registry import normalize_endpoints

logger = logging.getLogger(__name__)

ADMIN_PREFIX = "/_gateway"
ADMIN_TOKEN_HEADER = "X-Admin-Token"

admin_token_header = APIKeyHeader(name=ADMIN_TOKEN_HEADER, auto_error=False)


async def require_admin_token(token: Optional[str] = Security(admin_token_header)) -> None:
    """Reject admin calls unless they carry the configured admin token."""

    if not settings.admin_token:
        logger.warning("Refusing admin request: no admin token configured")
        raise HTTPException(status_code=403, detail="Admin token not configured")
    if token is None or not secrets.compare_digest(token, settings.admin_token):
        raise HTTPException(status_code=401, detail="Invalid or missing admin token")


router = APIRouter()
guarded = [Depends(require_admin_token)]


@router.get("/health")
async def gateway_health():
    """Liveness of the gateway process itself"""
    return {"status": "healthy"}


@router.get("/endpoints", response_model=EndpointListResponse, dependencies=guarded)
async def list_endpoints():
    """Return the configured universe and the last published healthy set."""

    registry = get_gateway().registry
    try:
        universe = await registry.get_universe()
        healthy = await registry.get_healthy()
    except StoreUnavailable as exc:
        logger.error("Error reading endpoint registry: %s", exc)
        raise HTTPException(status_code=503, detail="Endpoint registry unavailable") from exc
    return EndpointListResponse(universe=universe, healthy=healthy)


@router.put("/endpoints", response_model=EndpointListResponse, dependencies=guarded)
async def replace_endpoints(request: EndpointUpdateRequest):
    """
    Replace the endpoint universe. The healthy set is left alone until the
    next health cycle republishes it.
    """

    registry = get_gateway().registry
    universe = normalize_endpoints(request.urls)
    try:
        await registry.put_universe(universe)
        healthy = await registry.get_healthy()
    except StoreUnavailable as exc:
        logger.error("Error writing endpoint registry: %s", exc)
        raise HTTPException(status_code=503, detail="Endpoint registry unavailable") from exc
    logger.info("Endpoint universe replaced with %d URLs", len(universe))
    return EndpointListResponse(universe=universe, healthy=healthy)


@router.post("/health-check", response_model=CycleReportResponse, dependencies=guarded)
async def run_health_check():
    """Run one health monitor cycle now and return its report."""

    report = await get_gateway().scheduler.run_once()
    return CycleReportResponse.from_report(report)


@router.get("/metrics", response_model=CycleReportResponse, dependencies=guarded)
async def last_health_check():
    """Return the report of the most recent health cycle run in this process."""

    report = get_gateway().scheduler.last_report
    if report is None:
        raise HTTPException(status_code=404, detail="No health cycle has run yet")
    return CycleReportResponse.from_report(report)
