"""Session-owning facade the HTTP layer talks to."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set

import httpx

from ..actions import (
    ACTION_CONNECT,
    ACTION_DISCONNECT,
    ACTION_QRCODE,
    ACTION_STATUS,
    ACTIONS,
    QR_ACTIONS,
    get_action,
)
from ..history import HistoryEntry, HistoryLog
from ..request_builder import Credentials
from ..session import SessionState
from .orchestrator import ActionResult, RequestOrchestrator
from .settings import PanelSettings, load_settings

logger = logging.getLogger("gateway_panel.service")

HISTORY_CLIENT_QUEUE_SIZE = 200


class GatewayPanelService:
    """Holds the panel session and funnels every action through the orchestrator."""

    def __init__(
        self,
        settings: Optional[PanelSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        history: Optional[HistoryLog] = None,
    ) -> None:
        self._settings = settings if settings is not None else load_settings()
        self._session = SessionState(
            api_base_url=self._settings.api_base_url,
            instance_name=self._settings.instance_name,
        )
        self._history = history if history is not None else HistoryLog()
        self._owns_client = client is None
        self._client = client
        self._orchestrator = RequestOrchestrator(
            self._history,
            client=client,
            timeout=self._settings.http_timeout,
        )
        self._history_clients: Set[asyncio.Queue[dict[str, Any]]] = set()
        self._history.add_listener(self._broadcast_entry)

    @property
    def settings(self) -> PanelSettings:
        return self._settings

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def history(self) -> HistoryLog:
        return self._history

    @property
    def orchestrator(self) -> RequestOrchestrator:
        return self._orchestrator

    async def start(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(timeout=self._settings.http_timeout)
        self._owns_client = True
        self._orchestrator.attach_client(self._client)

    async def stop(self) -> None:
        client = self._client
        if client is None or not self._owns_client:
            return
        self._client = None
        self._orchestrator.attach_client(None)
        await client.aclose()

    def update_session(
        self,
        *,
        api_base_url: Optional[str] = None,
        instance_name: Optional[str] = None,
    ) -> SessionState:
        changes: Dict[str, Any] = {}
        if api_base_url is not None:
            changes["api_base_url"] = api_base_url.strip()
        if instance_name is not None:
            changes["instance_name"] = instance_name.strip()
        if changes:
            self._session = replace(self._session, **changes)
        return self._session

    async def run_action(
        self,
        name: str,
        credentials: Credentials,
        *,
        api_base_url: Optional[str] = None,
        instance_name: Optional[str] = None,
    ) -> ActionResult:
        spec = get_action(name)
        self.update_session(api_base_url=api_base_url, instance_name=instance_name)
        if spec.clears_qr_before_call:
            self._session = replace(self._session, qr_payload=None)

        result = await self._orchestrator.run(spec, self._session, credentials)
        # Applied to the state current at completion; last completion wins.
        self._session = result.update.apply(self._session)
        return result

    async def get_status(self, credentials: Credentials) -> ActionResult:
        return await self.run_action(ACTION_STATUS, credentials)

    async def connect(self, credentials: Credentials) -> ActionResult:
        return await self.run_action(ACTION_CONNECT, credentials)

    async def disconnect(self, credentials: Credentials) -> ActionResult:
        return await self.run_action(ACTION_DISCONNECT, credentials)

    async def refresh_qr(self, credentials: Credentials) -> ActionResult:
        return await self.run_action(ACTION_QRCODE, credentials)

    def loading_state(self) -> Dict[str, bool]:
        snapshot = self._orchestrator.loading.snapshot()
        return {name: snapshot.get(name, False) for name in ACTIONS}

    def qr_busy(self) -> bool:
        return any(self._orchestrator.loading.is_loading(name) for name in QR_ACTIONS)

    def describe(self) -> dict[str, Any]:
        payload = self._session.as_dict()
        payload["loading"] = self.loading_state()
        payload["qr_busy"] = self.qr_busy()
        return payload

    def get_history(self, limit: Optional[int] = None) -> List[dict[str, Any]]:
        if limit is None:
            limit = self._settings.history_limit
        return [entry.as_dict() for entry in self._history.entries(limit)]

    async def register_history_client(self) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=HISTORY_CLIENT_QUEUE_SIZE)
        self._history_clients.add(queue)
        return queue

    async def unregister_history_client(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        self._history_clients.discard(queue)

    def _broadcast_entry(self, entry: HistoryEntry) -> None:
        if not self._history_clients:
            return
        message = {"type": "entry", "entry": entry.as_dict()}
        for queue in list(self._history_clients):
            while True:
                try:
                    queue.put_nowait(message)
                    break
                except asyncio.QueueFull:
                    try:
                        queue.get_nowait()
                    except asyncio.QueueEmpty:
                        break


__all__ = ["GatewayPanelService", "HISTORY_CLIENT_QUEUE_SIZE"]
