"""Turn panel inputs into an authenticated gateway request descriptor.

The builder is a pure function of its inputs: it validates the operator's
preconditions, derives the Basic auth header and lays out the URL, query and
body. Executing the request is the orchestrator's job.
"""
from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

METHOD_GET = "GET"
METHOD_POST = "POST"
SUPPORTED_METHODS = frozenset({METHOD_GET, METHOD_POST})

# The status endpoint may be queried without naming an instance.
INSTANCE_OPTIONAL_ENDPOINTS = frozenset({"/info"})

MISSING_BASE_URL = "Endereço da API é obrigatório."
MISSING_CREDENTIALS = "Usuário e Senha são obrigatórios."
MISSING_INSTANCE = "Nome da instância é obrigatório."


class RequestValidationError(ValueError):
    """Raised when panel inputs are incomplete; no network I/O happens."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"

    def basic_token(self) -> str:
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return base64.b64encode(raw).decode("ascii")


@dataclass(frozen=True)
class GatewayRequest:
    """Fully formed request, ready to hand to an httpx client."""

    method: str
    url: str
    headers: Dict[str, str]
    params: Dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None

    def to_httpx(self, client: httpx.AsyncClient) -> httpx.Request:
        return client.build_request(
            self.method,
            self.url,
            headers=self.headers,
            params=self.params or None,
            content=self.content,
        )


def compose_url(base_url: str, endpoint: str) -> str:
    base = base_url[:-1] if base_url.endswith("/") else base_url
    return f"{base}{endpoint}"


def validate_inputs(
    base_url: str,
    endpoint: str,
    instance_id: str,
    credentials: Credentials,
) -> None:
    """Raise :class:`RequestValidationError` for the first missing input."""

    if not base_url:
        raise RequestValidationError(MISSING_BASE_URL)
    if not credentials.username or not credentials.password:
        raise RequestValidationError(MISSING_CREDENTIALS)
    if not instance_id and endpoint not in INSTANCE_OPTIONAL_ENDPOINTS:
        raise RequestValidationError(MISSING_INSTANCE)


def build_request(
    base_url: str,
    endpoint: str,
    method: str,
    instance_id: str,
    credentials: Credentials,
    body: Optional[Mapping[str, Any]] = None,
) -> GatewayRequest:
    validate_inputs(base_url, endpoint, instance_id, credentials)

    method_upper = method.upper()
    if method_upper not in SUPPORTED_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    headers = {"Authorization": f"Basic {credentials.basic_token()}"}
    url = compose_url(base_url, endpoint)

    if method_upper == METHOD_GET:
        return GatewayRequest(
            method=method_upper,
            url=url,
            headers=headers,
            params={"id": instance_id},
        )

    headers["Content-Type"] = "application/json"
    content = json.dumps(dict(body)).encode("utf-8") if body is not None else None
    return GatewayRequest(method=method_upper, url=url, headers=headers, content=content)


__all__ = [
    "Credentials",
    "GatewayRequest",
    "INSTANCE_OPTIONAL_ENDPOINTS",
    "METHOD_GET",
    "METHOD_POST",
    "MISSING_BASE_URL",
    "MISSING_CREDENTIALS",
    "MISSING_INSTANCE",
    "RequestValidationError",
    "build_request",
    "compose_url",
    "validate_inputs",
]
