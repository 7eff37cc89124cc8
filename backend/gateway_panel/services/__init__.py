"""Service layer for the gateway panel backend."""

from .dependencies import get_service, service, shutdown_service, startup_service
from .orchestrator import ActionResult, LoadingRegistry, RequestOrchestrator
from .panel_service import GatewayPanelService
from .settings import PanelSettings, load_settings

__all__ = [
	"ActionResult",
	"GatewayPanelService",
	"LoadingRegistry",
	"PanelSettings",
	"RequestOrchestrator",
	"get_service",
	"load_settings",
	"service",
	"shutdown_service",
	"startup_service",
]
