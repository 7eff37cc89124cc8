"""Classify raw gateway responses into success or failure outcomes."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx


@dataclass(frozen=True)
class Outcome:
    ok: bool
    payload: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, payload: Any, status_code: Optional[int] = None) -> "Outcome":
        return cls(ok=True, payload=payload, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "Outcome":
        return cls(ok=False, error=error, status_code=status_code)


def is_json_content(content_type: Optional[str]) -> bool:
    return bool(content_type) and "application/json" in content_type.lower()


def extract_error_message(payload: Any, text: str, status_code: int) -> str:
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if message:
            return str(message)
    if text:
        return text
    return f"HTTP error! status: {status_code}"


def normalize_response(response: httpx.Response) -> Outcome:
    status_code = response.status_code
    text = response.text

    if is_json_content(response.headers.get("content-type")):
        try:
            payload: Any = json.loads(text)
        except ValueError as exc:
            return Outcome.failure(f"Invalid JSON response: {exc}", status_code)
    else:
        payload = text

    if not response.is_success:
        return Outcome.failure(extract_error_message(payload, text, status_code), status_code)
    return Outcome.success(payload, status_code)


__all__ = [
    "Outcome",
    "extract_error_message",
    "is_json_content",
    "normalize_response",
]
