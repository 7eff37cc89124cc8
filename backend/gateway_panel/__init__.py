"""Gateway panel backend: authenticated actions against a messaging gateway."""

from .server import app, service  # noqa: F401
from .services.panel_service import GatewayPanelService  # noqa: F401

__all__ = ["GatewayPanelService", "app", "service"]
