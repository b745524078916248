"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Callable, Generic, Optional, Protocol, Type, TypeVar
from uuid import UUID

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Handler interface for domain events."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Event bus interface.

    ``subscribe`` returns a callable that removes the subscription.
    Passing ``aggregate_id`` restricts delivery to events of that aggregate.
    """

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(
        self,
        event_class: Type[E],
        handler: IEventHandler[E],
        aggregate_id: Optional[UUID] = None,
    ) -> Callable[[], None]: ...
