"""Notification hooks fired by the sync orchestrator."""
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

UPDATE = "update"
CREATE = "create"
DELETE = "delete"
FINISH = "finish"

EVENT_KINDS = (UPDATE, CREATE, DELETE, FINISH)

Handler = Callable[[Any], None]


class SyncEvents:
    """
    Per-orchestrator registry of notification subscribers.

    Delivery is synchronous and best-effort: a handler that raises is logged
    and skipped, the sync and the remaining handlers carry on.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {kind: [] for kind in EVENT_KINDS}

    def subscribe(self, kind: str, handler: Handler) -> Handler:
        """
        Register a handler for an event kind.

        Args:
            kind: One of 'update', 'create', 'delete', 'finish'
            handler: Callable receiving the event payload

        Returns:
            The registered handler
        """
        self._check_kind(kind)
        self._handlers[kind].append(handler)
        return handler

    def unsubscribe(self, kind: str, handler: Handler) -> None:
        """Remove a previously registered handler (no-op if unknown)."""
        self._check_kind(kind)
        if handler in self._handlers[kind]:
            self._handlers[kind].remove(handler)

    def on(self, kind: str) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`subscribe`."""
        def decorator(handler: Handler) -> Handler:
            return self.subscribe(kind, handler)
        return decorator

    def handlers(self, kind: str) -> List[Handler]:
        self._check_kind(kind)
        return list(self._handlers[kind])

    def fire(self, kind: str, payload: Any) -> int:
        """
        Deliver a payload to every handler of a kind.

        Returns:
            Number of handlers that completed without raising
        """
        self._check_kind(kind)
        delivered = 0

        for handler in list(self._handlers[kind]):
            try:
                handler(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Error firing {kind} handler {handler!r}: {e}", exc_info=True)

        return delivered

    def _check_kind(self, kind: str) -> None:
        if kind not in self._handlers:
            raise ValueError(f"Unknown event kind '{kind}', expected one of {EVENT_KINDS}")
