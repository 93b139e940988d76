"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from ddtrace import patch_all
from fastapi import FastAPI

from chat_session.dependencies import get_config, get_registry, get_storage
from chat_session.logging import setup_logging
from chat_session.routes import conversations_router

patch_all()

logger = setup_logging(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepares storage on startup and closes open conversations on shutdown."""
    await asyncio.to_thread(get_storage().ensure_bucket_exists)
    yield
    await get_registry().close_all()


app = FastAPI(title="Conversation Session Service", lifespan=lifespan)
app.include_router(conversations_router)


def main():
    """Starts the HTTP server."""
    config = get_config()
    logger.info(
        "Starting conversation service",
        extra={"host": config.server.host, "port": config.server.port},
    )
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
