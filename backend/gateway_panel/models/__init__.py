"""Pydantic models shared across the gateway panel backend."""

from .api import (
	ActionDescriptor,
	ActionRequest,
	ActionResponse,
	HistoryEntryModel,
	HistoryResponse,
	SessionStateResponse,
	SessionUpdateRequest,
)

__all__ = [
	"ActionDescriptor",
	"ActionRequest",
	"ActionResponse",
	"HistoryEntryModel",
	"HistoryResponse",
	"SessionStateResponse",
	"SessionUpdateRequest",
]
