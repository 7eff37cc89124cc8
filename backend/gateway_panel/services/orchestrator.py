"""Generic request orchestration shared by every panel action."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from ..actions import ActionSpec
from ..history import HistoryEntry, HistoryLog
from ..request_builder import (
    Credentials,
    GatewayRequest,
    RequestValidationError,
    build_request,
)
from ..response_normalizer import Outcome, normalize_response
from ..session import SessionState, SessionUpdate

logger = logging.getLogger("gateway_panel.orchestrator")

DEFAULT_HTTP_TIMEOUT = 15.0


@dataclass(frozen=True)
class ActionResult:
    action: str
    ok: bool
    entry: HistoryEntry
    update: SessionUpdate = field(default_factory=SessionUpdate)
    validation_error: bool = False


class LoadingRegistry:
    """Per-action in-flight flags.

    Overlapping invocations of one action are allowed; the flag reads true
    while at least one of them is in flight. Each flag is backed by a
    counter rather than a plain boolean so one completion cannot clear it
    for a call that is still pending.
    """

    def __init__(self) -> None:
        self._in_flight: Dict[str, int] = {}

    def begin(self, action: str) -> None:
        self._in_flight[action] = self._in_flight.get(action, 0) + 1

    def end(self, action: str) -> None:
        self._in_flight[action] = max(0, self._in_flight.get(action, 0) - 1)

    def is_loading(self, action: str) -> bool:
        return self._in_flight.get(action, 0) > 0

    def snapshot(self) -> Dict[str, bool]:
        return {name: count > 0 for name, count in self._in_flight.items()}


def describe_transport_error(exc: Exception) -> str:
    text = str(exc).strip()
    return text or exc.__class__.__name__


class RequestOrchestrator:
    """Validate, execute and record gateway actions.

    The orchestrator never holds session state: it reads a snapshot and
    returns a :class:`SessionUpdate` for the caller to apply.
    """

    def __init__(
        self,
        history: HistoryLog,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        loading: Optional[LoadingRegistry] = None,
    ) -> None:
        self._history = history
        self._client = client
        self._timeout = timeout
        self.loading = loading if loading is not None else LoadingRegistry()

    @property
    def history(self) -> HistoryLog:
        return self._history

    def attach_client(self, client: Optional[httpx.AsyncClient]) -> None:
        self._client = client

    async def run(
        self,
        spec: ActionSpec,
        session: SessionState,
        credentials: Credentials,
    ) -> ActionResult:
        instance_id = session.instance_name
        try:
            request = build_request(
                session.api_base_url,
                spec.endpoint,
                spec.method,
                instance_id,
                credentials,
                body=spec.build_body(instance_id),
            )
        except RequestValidationError as exc:
            logger.info("Action %s rejected before dispatch: %s", spec.name, exc.message)
            entry = self._history.error(exc.message)
            return ActionResult(action=spec.name, ok=False, entry=entry, validation_error=True)

        self.loading.begin(spec.name)
        logger.info("Starting action %s for instance '%s'", spec.label, instance_id)
        try:
            outcome = await self._execute(request)
            if not outcome.ok:
                logger.warning("Action %s failed: %s", spec.name, outcome.error)
                entry = self._history.error(outcome.error or "", action=spec.label)
                return ActionResult(action=spec.name, ok=False, entry=entry)

            try:
                interpretation = spec.interpreter(outcome.payload)
            except Exception as exc:
                logger.exception("Interpreter for %s failed", spec.name)
                entry = self._history.error(str(exc) or exc.__class__.__name__, action=spec.label)
                return ActionResult(action=spec.name, ok=False, entry=entry)

            if interpretation.unexpected:
                logger.warning("Unexpected payload for %s: %r", spec.name, outcome.payload)
            entry = self._history.success(interpretation.history_message, action=spec.label)
            return ActionResult(
                action=spec.name,
                ok=True,
                entry=entry,
                update=SessionUpdate.from_interpretation(interpretation),
            )
        finally:
            self.loading.end(spec.name)

    async def _execute(self, request: GatewayRequest) -> Outcome:
        try:
            if self._client is not None:
                response = await self._client.send(request.to_httpx(self._client))
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.send(request.to_httpx(client))
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            return Outcome.failure(describe_transport_error(exc))
        return normalize_response(response)


__all__ = [
    "ActionResult",
    "DEFAULT_HTTP_TIMEOUT",
    "LoadingRegistry",
    "RequestOrchestrator",
    "describe_transport_error",
]
