"""Append-only audit trail of panel actions.

Every completed action invocation lands here as a single timestamped entry.
Entries are rendered the way the operator sees them in the panel, e.g.::

    [14:03:27] SUCESSO [Status]: Instância está CONECTADO.
    [14:03:31] ERRO [Conectar]: invalid credentials
    [14:03:40] ERRO: Endereço da API é obrigatório.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

KIND_SUCCESS = "success"
KIND_ERROR = "error"

_KIND_PREFIX = {
    KIND_SUCCESS: "SUCESSO",
    KIND_ERROR: "ERRO",
}

HistoryListener = Callable[["HistoryEntry"], None]


@dataclass(frozen=True)
class HistoryEntry:
    """One audit line recording the outcome of one action invocation."""

    timestamp: datetime
    kind: str
    message: str
    action: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.kind == KIND_ERROR

    def render(self) -> str:
        prefix = _KIND_PREFIX.get(self.kind, self.kind.upper())
        if self.action:
            prefix = f"{prefix} [{self.action}]"
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {prefix}: {self.message}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "kind": self.kind,
            "action": self.action,
            "message": self.message,
            "text": self.render(),
        }


class HistoryLog:
    """Ordered, append-only sequence of :class:`HistoryEntry` objects."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._entries: List[HistoryEntry] = []
        self._listeners: List[HistoryListener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def append(self, kind: str, message: str, *, action: Optional[str] = None) -> HistoryEntry:
        if kind not in _KIND_PREFIX:
            raise ValueError(f"Unsupported history entry kind: {kind}")
        entry = HistoryEntry(
            timestamp=self._clock().replace(microsecond=0),
            kind=kind,
            message=message,
            action=action,
        )
        self._entries.append(entry)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception:  # pragma: no cover - listener bug must not break the log
                logger.exception("History listener failed for entry %r", entry.render())
        return entry

    def success(self, message: str, *, action: Optional[str] = None) -> HistoryEntry:
        return self.append(KIND_SUCCESS, message, action=action)

    def error(self, message: str, *, action: Optional[str] = None) -> HistoryEntry:
        return self.append(KIND_ERROR, message, action=action)

    def entries(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        if limit is None:
            return list(self._entries)
        if limit <= 0:
            return []
        return self._entries[-limit:]

    def lines(self, limit: Optional[int] = None) -> List[str]:
        return [entry.render() for entry in self.entries(limit)]

    def add_listener(self, listener: HistoryListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: HistoryListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            return


__all__ = [
    "HistoryEntry",
    "HistoryListener",
    "HistoryLog",
    "KIND_ERROR",
    "KIND_SUCCESS",
]
