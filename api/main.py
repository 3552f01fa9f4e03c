"""
OrderLine FastAPI Application

Serves the LINE webhook plus a small admin surface for stock and orders.
Run with: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.config import Settings, get_settings
from api.dependencies import get_dispatcher
from api.middleware.errors import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import health, inventory, orders, webhook
from orderline.storage import init_database

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# (router module, prefix, tag)
ROUTES = [
    (health, "", "Health"),
    (webhook, "", "Webhook"),
    (inventory, "/api/v1/inventory", "Inventory"),
    (orders, "/api/v1/orders", "Orders"),
]

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; on shutdown wait for in-flight replies."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    if not settings.line_channel_access_token:
        logger.warning("LINE_CHANNEL_ACCESS_TOKEN is not set; replies will fail")
    init_database(settings.database_path)

    yield

    dispatcher = get_dispatcher()
    logger.info(f"Shutting down, {dispatcher.pending} event task(s) still running")
    await dispatcher.drain(timeout=settings.reply_deadline_seconds)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="LINE order-intake bot: text and voice orders against a live inventory",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    setup_exception_handlers(app)

    for module, prefix, tag in ROUTES:
        app.include_router(module.router, prefix=prefix, tags=[tag])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("api.main:app", host=settings.host, port=settings.port, reload=settings.debug)
