"""Dependency helpers for wiring GatewayPanelService into FastAPI."""
from __future__ import annotations

from .panel_service import GatewayPanelService


service = GatewayPanelService()


async def startup_service() -> None:
    await service.start()


async def shutdown_service() -> None:
    await service.stop()


def get_service() -> GatewayPanelService:
    return service


__all__ = [
    "get_service",
    "service",
    "shutdown_service",
    "startup_service",
]
