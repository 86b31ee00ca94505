"""
Structured ticker events and a minimal subscriber registry.

Tickers publish events after a state change has been committed, so a
subscriber reading ``ticker.get_state()`` always sees the state the event
describes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class EventKind(str, Enum):
    """Kinds of events a ticker emits."""
    SAMPLE_ACCEPTED = "sample_accepted"
    SAMPLE_REJECTED = "sample_rejected"
    SIGNAL_CHANGED = "signal_changed"
    LEVEL_ADDED = "level_added"
    BOS_DETECTED = "bos_detected"
    COC_DETECTED = "coc_detected"
    HISTORY_LOADED = "history_loaded"


@dataclass(frozen=True)
class TickerEvent:
    """A single structured event."""
    kind: EventKind
    symbol: str
    timestamp: Optional[datetime]
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "symbol": self.symbol,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "data": dict(self.data),
        }


EventHandler = Callable[[TickerEvent], None]


class EventEmitter:
    """Fan-out of ticker events to subscribed handlers."""

    def __init__(self):
        self._handlers: list[tuple[Optional[frozenset[EventKind]], EventHandler]] = []

    def subscribe(self, handler: EventHandler, kinds: Optional[set[EventKind]] = None) -> None:
        """
        Register ``handler`` for ``kinds`` (all kinds when None).
        """
        self._handlers.append((frozenset(kinds) if kinds else None, handler))

    def unsubscribe(self, handler: EventHandler) -> None:
        self._handlers = [(kinds, h) for kinds, h in self._handlers if h is not handler]

    def emit(self, event: TickerEvent) -> None:
        """
        Deliver ``event`` to every matching handler.

        A failing handler is logged and skipped; it never affects the ticker
        or the other handlers.
        """
        for kinds, handler in list(self._handlers):
            if kinds is not None and event.kind not in kinds:
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    event_kind=event.kind.value,
                    symbol=event.symbol,
                    handler=getattr(handler, "__name__", repr(handler)),
                    error=str(e),
                    error_type=type(e).__name__
                )

    def __len__(self) -> int:
        return len(self._handlers)
