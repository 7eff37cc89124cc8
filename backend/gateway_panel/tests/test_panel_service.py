"""Tests for the session-owning panel service."""
from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Dict, List

import httpx
import pytest

from backend.gateway_panel.actions import UnknownActionError
from backend.gateway_panel.history import HistoryLog
from backend.gateway_panel.request_builder import Credentials
from backend.gateway_panel.services.panel_service import GatewayPanelService
from backend.gateway_panel.services.settings import PanelSettings

CREDS = Credentials(username="admin", password="pw")


class FakeGateway:
    """Scripted gateway keyed by request path."""

    def __init__(self, replies: Dict[str, httpx.Response]) -> None:
        self.replies = replies
        self.paths: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.paths.append(request.url.path)
        return self.replies[request.url.path]


def _service(gateway: FakeGateway, history: HistoryLog, **settings) -> GatewayPanelService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(gateway))
    config = PanelSettings(api_base_url="http://gw.test", instance_name="sales", **settings)
    return GatewayPanelService(config, client=client, history=history)


@pytest.mark.asyncio
async def test_status_updates_session(history: HistoryLog) -> None:
    gateway = FakeGateway({"/info": httpx.Response(200, json={"connected": True})})
    svc = _service(gateway, history)

    result = await svc.get_status(CREDS)

    assert result.ok is True
    assert svc.session.status_text == "Status da instância: Instância está CONECTADO."
    assert svc.describe()["loading"] == {
        "status": False,
        "connect": False,
        "disconnect": False,
        "qrcode": False,
    }


@pytest.mark.asyncio
async def test_connect_then_disconnect_clears_qr(history: HistoryLog) -> None:
    gateway = FakeGateway(
        {
            "/login": httpx.Response(200, json={"qr": "data:image/png;base64,AAA"}),
            "/logout": httpx.Response(200, text="bye"),
        }
    )
    svc = _service(gateway, history)

    await svc.connect(CREDS)
    assert svc.session.qr_payload == "data:image/png;base64,AAA"
    assert svc.session.status_text == "AGUARDANDO LEITURA DO QR CODE"

    await svc.disconnect(CREDS)
    assert svc.session.qr_payload is None
    assert svc.session.status_text == "DESCONECTADO"
    assert history.lines()[-1].endswith("SUCESSO [Desconectar]: Sessão encerrada com sucesso.")


@pytest.mark.asyncio
async def test_connect_keeps_previous_qr_until_reply(history: HistoryLog) -> None:
    release = asyncio.Event()

    async def _slow(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(200, json={"message": "connected"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(_slow))
    svc = GatewayPanelService(
        PanelSettings(api_base_url="http://gw.test", instance_name="sales"),
        client=client,
        history=history,
    )
    svc._session = replace(svc.session, qr_payload="old-qr")

    task = asyncio.create_task(svc.connect(CREDS))
    await asyncio.sleep(0.01)
    assert svc.session.qr_payload == "old-qr"
    assert svc.qr_busy() is True

    release.set()
    await task
    assert svc.session.qr_payload == "old-qr"
    assert svc.session.status_text == "CONNECTED"
    assert svc.qr_busy() is False


@pytest.mark.asyncio
async def test_refresh_qr_clears_previous_qr_before_request(history: HistoryLog) -> None:
    gateway = FakeGateway({"/login": httpx.Response(500)})
    svc = _service(gateway, history)
    svc._session = replace(svc.session, qr_payload="old-qr")

    result = await svc.refresh_qr(CREDS)

    assert result.ok is False
    assert result.entry.message == "HTTP error! status: 500"
    assert svc.session.qr_payload is None


@pytest.mark.asyncio
async def test_refresh_qr_clears_even_when_validation_fails(history: HistoryLog) -> None:
    gateway = FakeGateway({})
    svc = _service(gateway, history)
    svc._session = replace(svc.session, qr_payload="old-qr")

    result = await svc.run_action("qrcode", CREDS, instance_name="")

    assert result.validation_error is True
    assert gateway.paths == []
    assert svc.session.qr_payload is None


@pytest.mark.asyncio
async def test_run_action_applies_overrides(history: HistoryLog) -> None:
    gateway = FakeGateway({"/info": httpx.Response(200, json={"connected": False})})
    svc = _service(gateway, history)

    await svc.run_action("status", CREDS, api_base_url=" http://other.test/ ", instance_name=" ops ")

    assert svc.session.api_base_url == "http://other.test/"
    assert svc.session.instance_name == "ops"


@pytest.mark.asyncio
async def test_unknown_action_raises(history: HistoryLog) -> None:
    svc = _service(FakeGateway({}), history)

    with pytest.raises(UnknownActionError):
        await svc.run_action("reboot", CREDS)
    assert len(history) == 0


@pytest.mark.asyncio
async def test_history_clients_receive_new_entries(history: HistoryLog) -> None:
    gateway = FakeGateway({"/info": httpx.Response(200, json={"connected": True})})
    svc = _service(gateway, history)
    queue = await svc.register_history_client()

    await svc.get_status(CREDS)
    message = queue.get_nowait()

    assert message["type"] == "entry"
    assert message["entry"]["kind"] == "success"
    await svc.unregister_history_client(queue)
    await svc.get_status(CREDS)
    assert queue.empty()


@pytest.mark.asyncio
async def test_get_history_respects_configured_limit(history: HistoryLog) -> None:
    svc = _service(FakeGateway({}), history, history_limit=2)
    for index in range(3):
        history.success(f"entry {index}")

    assert [item["message"] for item in svc.get_history()] == ["entry 1", "entry 2"]


@pytest.mark.asyncio
async def test_start_and_stop_manage_owned_client(history: HistoryLog) -> None:
    svc = GatewayPanelService(PanelSettings(), history=history)

    await svc.start()
    client = svc._client
    assert isinstance(client, httpx.AsyncClient)

    await svc.stop()
    assert client.is_closed
    assert svc._client is None


@pytest.mark.asyncio
async def test_service_records_into_the_log_it_was_given(history: HistoryLog) -> None:
    gateway = FakeGateway({"/info": httpx.Response(200, json={"connected": True})})
    svc = _service(gateway, history)

    assert svc.history is history
    await svc.get_status(CREDS)
    assert len(history) == 1
