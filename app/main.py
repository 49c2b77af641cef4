from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional, Sequence

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.api import router
from logging_config import configure_logging
from services.telemetry import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # Building the service creates the storage directory if it is missing.
    service = build_default_service()
    logger.info("Sensor data directory ready", extra={"path": service.store.root_path})
    try:
        yield
    finally:
        build_default_service.cache_clear()


def create_app(allowed_origins: Optional[Sequence[str]] = None) -> FastAPI:
    configure_logging()
    origins = list(allowed_origins if allowed_origins is not None else get_settings().allowed_origins)
    allow_all = "*" in origins

    app = FastAPI(
        title="Sensor Telemetry Backend",
        description="Stores sensor readings as flat JSON files and serves the latest one.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Registered before CORSMiddleware so it sits inside it: preflights are
    # answered by CORSMiddleware, everything else from a foreign origin stops here.
    @app.middleware("http")
    async def reject_disallowed_origins(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        origin = request.headers.get("origin")
        if origin is None or allow_all or origin in origins:
            return await call_next(request)
        logger.warning("Rejected cross-origin request", extra={"reason": f"origin {origin}"})
        return PlainTextResponse(
            f"CORS not allowed for origin: {origin}",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    logger.debug("CORS configured", extra={"origin_count": len(origins)})
    app.include_router(router)
    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    configure_logging()
    logger.info(
        f"Server is running on http://localhost:{settings.port}",
        extra={"host": settings.host, "port": settings.port},
    )
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


app = create_app()


if __name__ == "__main__":
    run()
