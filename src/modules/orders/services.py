"""Order lifecycle service layer (Use Cases).

Wraps the pure lifecycle functions for callers that want one object to
talk to: it resolves transitions against its catalog, runs the
executors, and publishes exactly one ``OrderChanged`` event per
successful transition.  Failed transitions publish nothing.

The service holds no per-order state.  Callers must serialise
"resolve, validate, execute" per order identity themselves and persist
the returned order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import structlog
from django.conf import settings

from modules.orders import availability, executors, validation
from modules.orders.catalog import DEFAULT_CATALOG, Transition, TransitionCatalog
from modules.orders.constants import PAYMENT_INPUT_KINDS, OrderStatus
from modules.orders.dtos import Order, TransitionPayload
from modules.orders.events import BACKWARD, FORWARD, OrderChanged
from modules.orders.exceptions import IllegalTransition

if TYPE_CHECKING:
    from modules.orders.executors import Clock
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def requires_invoice(transition: Transition) -> bool:
    return not transition.is_backward and transition.required_input in PAYMENT_INPUT_KINDS


@dataclass(frozen=True)
class LifecycleOptions:
    """What the caller may do next with an order."""

    effective_status: OrderStatus
    is_partially_paid: bool
    forward: Tuple[Transition, ...]
    backward: Tuple[Transition, ...]
    auto_advance: Optional[Transition]
    suggested: Optional[Transition]


class OrderLifecycleService:
    """Application service for order lifecycle use-cases.

    Receives the catalog, the event bus and the clock via constructor
    injection so tests can substitute any of them.
    """

    def __init__(
        self,
        catalog: TransitionCatalog = DEFAULT_CATALOG,
        event_bus: Optional[IEventBus] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        if event_bus is None:
            from shared.infrastructure.bus import event_bus as default_bus

            event_bus = default_bus
        self._catalog = catalog
        self._event_bus = event_bus
        self._clock = clock

    @property
    def catalog(self) -> TransitionCatalog:
        return self._catalog

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def effective_status(self, order: Order) -> OrderStatus:
        return availability.effective_status(order)

    def available_transitions(self, order: Order) -> Tuple[Transition, ...]:
        return availability.available_transitions(order, self._catalog)

    def available_backward_transitions(self, order: Order) -> Tuple[Transition, ...]:
        return availability.available_backward_transitions(order, self._catalog)

    def validate(self, transition: Transition, payload: TransitionPayload) -> bool:
        return validation.validate(transition, payload)

    def options(self, order: Order) -> LifecycleOptions:
        return LifecycleOptions(
            effective_status=availability.effective_status(order),
            is_partially_paid=availability.is_partially_paid(order),
            forward=availability.available_transitions(order, self._catalog),
            backward=availability.available_backward_transitions(order, self._catalog),
            auto_advance=availability.auto_advance_transition(order, self._catalog),
            suggested=availability.suggested_transition(order, self._catalog),
        )

    def resolve(
        self,
        from_status: str,
        to_status: str,
        required_input: Optional[str] = None,
        *,
        backward: bool = False,
    ) -> Transition:
        """Look a transition up by identity.

        Raises:
            IllegalTransition: no single catalog entry matches.
        """
        transition = self._catalog.find(
            from_status, to_status, required_input, backward=backward
        )
        if transition is None:
            logger.warning(
                "order.transition_unknown",
                from_status=from_status,
                to_status=to_status,
                required_input=required_input,
                backward=backward,
            )
            raise IllegalTransition(
                f"No {'backward' if backward else 'forward'} transition "
                f"{from_status} -> {to_status}"
                + (f" [{required_input}]" if required_input else "")
                + " in catalog."
            )
        return transition

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def advance(
        self,
        order: Order,
        transition: Transition,
        payload: Optional[TransitionPayload] = None,
    ) -> Order:
        """Apply a forward transition and publish the change.

        Raises:
            IllegalTransition: transition not available for the order.
            InvalidTransitionInput: payload incomplete for the transition.
            InvariantViolation: payment total would decrease.
        """
        updated = executors.execute_forward(
            order, transition, payload, catalog=self._catalog, now=self._clock
        )
        self._publish(order, updated, transition, FORWARD)
        return updated

    def revert(self, order: Order, transition: Transition) -> Order:
        """Apply a backward transition and publish the change.

        Raises:
            IllegalTransition: transition not available for the order.
        """
        updated = executors.execute_backward(
            order, transition, catalog=self._catalog, now=self._clock
        )
        self._publish(order, updated, transition, BACKWARD)
        return updated

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def _publish(
        self, previous: Order, updated: Order, transition: Transition, direction: str
    ) -> None:
        if not settings.ORDER_LIFECYCLE["PUBLISH_EVENTS"]:
            return
        event = OrderChanged(
            aggregate_id=updated.id,
            order=updated,
            previous_status=previous.status,
            transition=transition,
            direction=direction,
            invoice_requested=requires_invoice(transition),
            document_kind=availability.invoice_document_kind(updated),
        )
        self._event_bus.publish(event)
        logger.info(
            "order.event.changed",
            **event.log_context(),
            direction=direction,
            old_status=str(previous.status),
            new_status=str(updated.status),
            invoice_requested=event.invoice_requested,
        )

