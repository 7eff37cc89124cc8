"""Pydantic schemas shared across API routes."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class ActionRequest(BaseModel):
    username: str = ""
    password: str = ""
    api_base_url: Optional[str] = None
    instance_name: Optional[str] = None


class SessionUpdateRequest(BaseModel):
    api_base_url: Optional[str] = None
    instance_name: Optional[str] = None


class HistoryEntryModel(BaseModel):
    timestamp: str
    kind: str
    action: Optional[str] = None
    message: str
    text: str


class SessionStateResponse(BaseModel):
    api_base_url: str
    instance_name: str
    status_text: Optional[str] = None
    qr_payload: Optional[str] = None
    loading: Dict[str, bool]
    qr_busy: bool


class ActionResponse(BaseModel):
    action: str
    ok: bool
    validation_error: bool = False
    entry: HistoryEntryModel
    session: SessionStateResponse


class ActionDescriptor(BaseModel):
    name: str
    label: str
    endpoint: str
    method: str
    clears_qr_before_call: bool = False


class HistoryResponse(BaseModel):
    entries: List[HistoryEntryModel]


__all__ = [
    "ActionDescriptor",
    "ActionRequest",
    "ActionResponse",
    "HistoryEntryModel",
    "HistoryResponse",
    "SessionStateResponse",
    "SessionUpdateRequest",
]
