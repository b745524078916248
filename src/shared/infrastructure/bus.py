"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple, Type
from uuid import UUID

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

Subscription = Tuple[Optional[UUID], IEventHandler]


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously in subscription order.  A failing handler
    is logged and does not prevent delivery to the remaining ones.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Subscription]] = {}

    def subscribe(
        self,
        event_class: Type[DomainEvent],
        handler: IEventHandler,
        aggregate_id: Optional[UUID] = None,
    ) -> Callable[[], None]:
        subscriptions = self._handlers.setdefault(event_class, [])
        subscription = (aggregate_id, handler)
        if subscription not in subscriptions:
            subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in subscriptions:
                subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, event: DomainEvent) -> None:
        for aggregate_id, handler in list(self._handlers.get(type(event), [])):
            if aggregate_id is not None and aggregate_id != event.aggregate_id:
                continue
            try:
                handler.handle(event)
            except Exception:
                logger.exception(
                    "event_bus.handler_failed",
                    handler=type(handler).__name__,
                    **event.log_context(),
                )

    def clear(self) -> None:
        self._handlers.clear()


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
