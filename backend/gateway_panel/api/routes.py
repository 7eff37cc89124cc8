"""FastAPI routing layer for the gateway panel backend."""
from __future__ import annotations

import json
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from ..actions import ACTIONS, UnknownActionError
from ..models.api import (
    ActionDescriptor,
    ActionRequest,
    ActionResponse,
    HistoryEntryModel,
    HistoryResponse,
    SessionStateResponse,
    SessionUpdateRequest,
)
from ..request_builder import Credentials
from ..services.dependencies import get_service
from ..services.panel_service import GatewayPanelService
from ..services.settings import MAX_HISTORY_LIMIT

router = APIRouter()


@router.get("/api/session", response_model=SessionStateResponse)
async def api_session(svc: GatewayPanelService = Depends(get_service)) -> SessionStateResponse:
    return SessionStateResponse(**svc.describe())


@router.put("/api/session", response_model=SessionStateResponse)
async def api_session_update(
    request: SessionUpdateRequest,
    svc: GatewayPanelService = Depends(get_service),
) -> SessionStateResponse:
    if request.api_base_url is None and request.instance_name is None:
        raise HTTPException(status_code=400, detail="No parameters provided")
    svc.update_session(
        api_base_url=request.api_base_url,
        instance_name=request.instance_name,
    )
    return SessionStateResponse(**svc.describe())


@router.get("/api/actions", response_model=List[ActionDescriptor])
async def api_actions() -> List[ActionDescriptor]:
    return [ActionDescriptor(**spec.describe()) for spec in ACTIONS.values()]


@router.post("/api/actions/{name}", response_model=ActionResponse)
async def api_run_action(
    name: str,
    request: ActionRequest,
    svc: GatewayPanelService = Depends(get_service),
) -> ActionResponse:
    credentials = Credentials(username=request.username, password=request.password)
    try:
        result = await svc.run_action(
            name,
            credentials,
            api_base_url=request.api_base_url,
            instance_name=request.instance_name,
        )
    except UnknownActionError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ActionResponse(
        action=result.action,
        ok=result.ok,
        validation_error=result.validation_error,
        entry=HistoryEntryModel(**result.entry.as_dict()),
        session=SessionStateResponse(**svc.describe()),
    )


@router.get("/api/history", response_model=HistoryResponse)
async def api_history(
    limit: Optional[int] = None,
    svc: GatewayPanelService = Depends(get_service),
) -> HistoryResponse:
    if limit is not None:
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
    return HistoryResponse(
        entries=[HistoryEntryModel(**item) for item in svc.get_history(limit)]
    )


@router.get("/api/loading")
async def api_loading(svc: GatewayPanelService = Depends(get_service)) -> dict[str, bool]:
    return svc.loading_state()


@router.websocket("/ws/history")
async def history_ws(
    websocket: WebSocket,
    svc: GatewayPanelService = Depends(get_service),
) -> None:
    await websocket.accept()
    queue = await svc.register_history_client()
    try:
        await websocket.send_text(
            json.dumps(
                {
                    "type": "snapshot",
                    "entries": svc.get_history(),
                }
            )
        )
        while True:
            message = await queue.get()
            await websocket.send_text(json.dumps(message))
    except WebSocketDisconnect:  # pragma: no cover - network event
        pass
    finally:
        await svc.unregister_history_client(queue)


__all__ = ["router"]
