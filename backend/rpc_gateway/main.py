"""FastAPI application for the RPC gateway"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from rpc_gateway.config import settings
from rpc_gateway.errors import StoreUnavailable
from rpc_gateway.services.gateway import get_gateway, set_gateway
from rpc_gateway.services.registry import close_registry, seed_universe
from rpc_gateway.api import admin, proxy

# Configure logging
log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# Align key loggers with configured level
logging.getLogger("rpc_gateway").setLevel(log_level)
logging.getLogger("uvicorn").setLevel(log_level)
logging.getLogger("uvicorn.access").setLevel(log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for startup/shutdown"""
    # Startup
    logger.info("Starting RPC gateway...")
    gateway = get_gateway()
    try:
        await seed_universe(gateway.registry, settings.rpc_urls)
    except StoreUnavailable as exc:
        logger.warning(f"Could not seed endpoint universe: {exc}")
    if settings.health_check_enabled:
        gateway.scheduler.start()
    if settings.admin_enabled and not settings.admin_token:
        logger.warning("ADMIN_TOKEN is not set: /_gateway admin routes other than /health will answer 403")
    logger.info("Gateway initialized")

    yield

    # Shutdown
    logger.info("Shutting down RPC gateway...")
    await gateway.close()
    await close_registry()
    set_gateway(None)


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Health-aware JSON-RPC load balancer",
    lifespan=lifespan,
)

# Admin routes first: the proxy route below matches every other path
if settings.admin_enabled:
    app.include_router(admin.router, prefix=admin.ADMIN_PREFIX, tags=["Admin"])
app.include_router(proxy.router, tags=["Proxy"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
