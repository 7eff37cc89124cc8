"""ASGI entrypoint wiring the gateway panel components together."""
from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router
from .services.dependencies import (
    get_service,
    service,
    shutdown_service,
    startup_service,
)
from .services.panel_service import GatewayPanelService


@asynccontextmanager
async def _lifespan(_: FastAPI):
    await startup_service()
    try:
        yield
    finally:
        await shutdown_service()


app = FastAPI(title="Gateway Panel Service", version="0.1.0", lifespan=_lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=service.settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


def run() -> None:  # pragma: no cover - manual execution helper
    """Launch the FastAPI app using uvicorn."""

    import uvicorn  # type: ignore

    host = os.getenv("GATEWAY_PANEL_HOST", "0.0.0.0")
    port = int(os.getenv("GATEWAY_PANEL_PORT", "8000"))
    uvicorn.run("backend.gateway_panel.server:app", host=host, port=port, reload=False)


__all__ = [
    "GatewayPanelService",
    "app",
    "get_service",
    "run",
    "service",
]


if __name__ == "__main__":  # pragma: no cover - manual execution path
    run()
