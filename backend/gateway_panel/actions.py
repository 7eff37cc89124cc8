"""Declarative specs for the four gateway actions exposed by the panel."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from .request_builder import METHOD_GET, METHOD_POST

UNSET: Any = object()

STATE_CONNECTED = "CONECTADO"
STATE_DISCONNECTED = "DESCONECTADO"
STATUS_AWAITING_QR = "AGUARDANDO LEITURA DO QR CODE"
MESSAGE_UNEXPECTED = "Resposta inesperada do servidor."
MESSAGE_SESSION_CLOSED = "Sessão encerrada com sucesso."

ACTION_STATUS = "status"
ACTION_CONNECT = "connect"
ACTION_DISCONNECT = "disconnect"
ACTION_QRCODE = "qrcode"


class UnknownActionError(LookupError):
    """Raised when an action name is not present in the registry."""


@dataclass(frozen=True)
class Interpretation:
    """What a successful payload means for the panel.

    ``display_status`` and ``qr_payload`` default to :data:`UNSET`, which
    leaves the current value untouched. ``qr_payload=None`` clears the QR.
    """

    history_message: str
    display_status: Any = UNSET
    qr_payload: Any = UNSET
    unexpected: bool = False


@dataclass(frozen=True)
class ActionSpec:
    name: str
    label: str
    endpoint: str
    method: str
    interpreter: Callable[[Any], Interpretation]
    body_builder: Optional[Callable[[str], Optional[Dict[str, Any]]]] = None
    clears_qr_before_call: bool = False

    def build_body(self, instance_id: str) -> Optional[Dict[str, Any]]:
        if self.body_builder is None:
            return None
        return self.body_builder(instance_id)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "endpoint": self.endpoint,
            "method": self.method,
            "clears_qr_before_call": self.clears_qr_before_call,
        }


def _instance_body(instance_id: str) -> Dict[str, Any]:
    return {"id": instance_id}


def _field(payload: Any, key: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(key)
    return None


def interpret_status(payload: Any) -> Interpretation:
    state = STATE_CONNECTED if _field(payload, "connected") is True else STATE_DISCONNECTED
    message = f"Instância está {state}."
    return Interpretation(
        history_message=message,
        display_status=f"Status da instância: {message}",
    )


def interpret_login(payload: Any) -> Interpretation:
    qr = _field(payload, "qr")
    if qr:
        return Interpretation(
            history_message="QR Code gerado. Faça a leitura com seu WhatsApp para conectar.",
            display_status=STATUS_AWAITING_QR,
            qr_payload=str(qr),
        )
    message = _field(payload, "message")
    if message:
        text = str(message)
        return Interpretation(history_message=text, display_status=text.upper())
    return Interpretation(history_message=MESSAGE_UNEXPECTED, unexpected=True)


def interpret_logout(_payload: Any) -> Interpretation:
    return Interpretation(
        history_message=MESSAGE_SESSION_CLOSED,
        display_status=STATE_DISCONNECTED,
        qr_payload=None,
    )


STATUS = ActionSpec(
    name=ACTION_STATUS,
    label="Status",
    endpoint="/info",
    method=METHOD_GET,
    interpreter=interpret_status,
)

CONNECT = ActionSpec(
    name=ACTION_CONNECT,
    label="Conectar",
    endpoint="/login",
    method=METHOD_POST,
    interpreter=interpret_login,
    body_builder=_instance_body,
)

DISCONNECT = ActionSpec(
    name=ACTION_DISCONNECT,
    label="Desconectar",
    endpoint="/logout",
    method=METHOD_POST,
    interpreter=interpret_logout,
    body_builder=_instance_body,
)

REFRESH_QR = ActionSpec(
    name=ACTION_QRCODE,
    label="QRCode",
    endpoint="/login",
    method=METHOD_POST,
    interpreter=interpret_login,
    body_builder=_instance_body,
    clears_qr_before_call=True,
)

ACTIONS: Dict[str, ActionSpec] = {
    spec.name: spec for spec in (STATUS, CONNECT, DISCONNECT, REFRESH_QR)
}

QR_ACTIONS = frozenset({ACTION_CONNECT, ACTION_QRCODE})


def get_action(name: str) -> ActionSpec:
    key = (name or "").strip().lower()
    try:
        return ACTIONS[key]
    except KeyError:
        raise UnknownActionError(f"Unknown action: {name}") from None


def action_names() -> List[str]:
    return list(ACTIONS)


__all__ = [
    "ACTIONS",
    "ACTION_CONNECT",
    "ACTION_DISCONNECT",
    "ACTION_QRCODE",
    "ACTION_STATUS",
    "CONNECT",
    "DISCONNECT",
    "ActionSpec",
    "Interpretation",
    "MESSAGE_SESSION_CLOSED",
    "MESSAGE_UNEXPECTED",
    "QR_ACTIONS",
    "REFRESH_QR",
    "STATE_CONNECTED",
    "STATE_DISCONNECTED",
    "STATUS",
    "STATUS_AWAITING_QR",
    "UNSET",
    "UnknownActionError",
    "action_names",
    "get_action",
    "interpret_login",
    "interpret_logout",
    "interpret_status",
]
