"""Session state owned by the panel and the deltas actions produce for it."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .actions import UNSET, Interpretation


@dataclass(frozen=True)
class SessionState:
    api_base_url: str = ""
    instance_name: str = ""
    status_text: Optional[str] = None
    qr_payload: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "api_base_url": self.api_base_url,
            "instance_name": self.instance_name,
            "status_text": self.status_text,
            "qr_payload": self.qr_payload,
        }


@dataclass(frozen=True)
class SessionUpdate:
    """Changes to apply to a :class:`SessionState`; ``UNSET`` fields are kept."""

    status_text: Any = UNSET
    qr_payload: Any = UNSET

    @classmethod
    def from_interpretation(cls, interpretation: Interpretation) -> "SessionUpdate":
        return cls(
            status_text=interpretation.display_status,
            qr_payload=interpretation.qr_payload,
        )

    @property
    def is_empty(self) -> bool:
        return self.status_text is UNSET and self.qr_payload is UNSET

    def apply(self, state: SessionState) -> SessionState:
        changes: Dict[str, Any] = {}
        if self.status_text is not UNSET:
            changes["status_text"] = self.status_text
        if self.qr_payload is not UNSET:
            changes["qr_payload"] = self.qr_payload
        if not changes:
            return state
        return replace(state, **changes)


__all__ = ["SessionState", "SessionUpdate"]
