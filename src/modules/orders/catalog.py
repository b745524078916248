"""Transition catalog.

The catalog is a declarative table of ``Transition`` records keyed by
``(from_status, required_input)``.  Several forward entries may share
the same ``from_status``; choosing between them is the job of the
contextual filters in ``availability``, not of the table.

``DEFAULT_CATALOG`` is built once at import time and never mutated.
Callers that need a different table build their own ``TransitionCatalog``
and pass it explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from modules.orders.constants import InputKind, OrderStatus


@dataclass(frozen=True)
class Transition:
    from_status: OrderStatus
    to_status: OrderStatus
    label: str
    description: str = ""
    required_input: InputKind = InputKind.NONE
    is_backward: bool = False

    @property
    def key(self) -> Tuple[str, str, str, bool]:
        return (
            str(self.from_status),
            str(self.to_status),
            str(self.required_input),
            self.is_backward,
        )

    @property
    def requires_input(self) -> bool:
        return self.required_input != InputKind.NONE

    def __str__(self) -> str:
        arrow = "<-" if self.is_backward else "->"
        return f"{self.from_status} {arrow} {self.to_status} [{self.required_input}]"


class TransitionCatalog:
    """Immutable set of forward and backward transitions."""

    def __init__(
        self,
        forward: Iterable[Transition],
        backward: Iterable[Transition],
    ) -> None:
        self._forward: Tuple[Transition, ...] = tuple(forward)
        self._backward: Tuple[Transition, ...] = tuple(backward)

        if any(t.is_backward for t in self._forward):
            raise ValueError("Forward table contains a backward transition.")
        if not all(t.is_backward for t in self._backward):
            raise ValueError("Backward table contains a forward transition.")

        keys = [(t.from_status, t.to_status, t.required_input) for t in self._forward]
        if len(keys) != len(set(keys)):
            raise ValueError("Duplicate forward transition in catalog.")

    @property
    def forward(self) -> Tuple[Transition, ...]:
        return self._forward

    @property
    def backward(self) -> Tuple[Transition, ...]:
        return self._backward

    def forward_from(self, status: OrderStatus) -> Tuple[Transition, ...]:
        return tuple(t for t in self._forward if t.from_status == status)

    def backward_from(self, status: OrderStatus) -> Tuple[Transition, ...]:
        return tuple(t for t in self._backward if t.from_status == status)

    def lookup(
        self, from_status: OrderStatus, required_input: InputKind
    ) -> Tuple[Transition, ...]:
        return tuple(
            t
            for t in self._forward
            if t.from_status == from_status and t.required_input == required_input
        )

    def find(
        self,
        from_status: str,
        to_status: str,
        required_input: Optional[str] = None,
        *,
        backward: bool = False,
    ) -> Optional[Transition]:
        """Return the entry matching the given identity, if any.

        ``required_input`` may be omitted for backward transitions and for
        forward ones where the ``(from, to)`` pair is unambiguous.
        """
        table = self._backward if backward else self._forward
        matches = [
            t
            for t in table
            if t.from_status == from_status
            and t.to_status == to_status
            and (required_input is None or t.required_input == required_input)
        ]
        if len(matches) != 1:
            return None
        return matches[0]

    def __contains__(self, transition: object) -> bool:
        if not isinstance(transition, Transition):
            return False
        table = self._backward if transition.is_backward else self._forward
        return any(t.key == transition.key for t in table)

    def __len__(self) -> int:
        return len(self._forward) + len(self._backward)


FORWARD_TRANSITIONS: Tuple[Transition, ...] = (
    Transition(
        from_status=OrderStatus.NEW,
        to_status=OrderStatus.PAID,
        label="Confirm payment and start processing",
        description="Record the payment received from the customer.",
        required_input=InputKind.PAYMENT_CONFIRMATION,
    ),
    Transition(
        from_status=OrderStatus.PARTIALLY_PAID,
        to_status=OrderStatus.PAID,
        label="Complete the remaining payment",
        description="Record the remaining payment to settle the order.",
        required_input=InputKind.PAYMENT_CONFIRMATION,
    ),
    Transition(
        from_status=OrderStatus.PARTIALLY_PAID,
        to_status=OrderStatus.ORDERED,
        label="Proceed to ordering (partial payment)",
        description="Enter the international shipping number while the "
        "order still carries a partial payment.",
        required_input=InputKind.INTERNATIONAL_SHIPPING,
    ),
    Transition(
        from_status=OrderStatus.PAID,
        to_status=OrderStatus.ORDERED,
        label="Enter international shipping number",
        description="Shipping number issued by the store or the carrier.",
        required_input=InputKind.INTERNATIONAL_SHIPPING,
    ),
    Transition(
        from_status=OrderStatus.ORDERED,
        to_status=OrderStatus.SHIPPED,
        label="Add international tracking number",
        description="Tracking number of the international shipment.",
        required_input=InputKind.TRACKING,
    ),
    Transition(
        from_status=OrderStatus.SHIPPED,
        to_status=OrderStatus.LINKED,
        label="Mark as on the way",
        description="The order is travelling with a linked shipment.",
    ),
    Transition(
        from_status=OrderStatus.LINKED,
        to_status=OrderStatus.ARRIVED,
        label="Arrived at warehouse and weighed",
        description="Record the measured weight and the storage location.",
        required_input=InputKind.WEIGHT_STORAGE,
    ),
    Transition(
        from_status=OrderStatus.ARRIVED,
        to_status=OrderStatus.WEIGHT_PAID,
        label="Confirm weight fee payment",
        description="The customer paid the additional weight fee.",
    ),
    Transition(
        from_status=OrderStatus.ARRIVED,
        to_status=OrderStatus.WEIGHT_PAID,
        label="Pay the remainder with the weight fee",
        description="Collect the outstanding balance together with the "
        "weight fee.",
        required_input=InputKind.REMAINING_PAYMENT_WITH_WEIGHT,
    ),
    Transition(
        from_status=OrderStatus.WEIGHT_PAID,
        to_status=OrderStatus.IN_DELIVERY,
        label="Start delivery",
        description="Choose home delivery or showroom pickup.",
        required_input=InputKind.DELIVERY_CHOICE,
    ),
    Transition(
        from_status=OrderStatus.IN_DELIVERY,
        to_status=OrderStatus.DELIVERED,
        label="Collect the remainder and complete delivery",
        description="Collect the outstanding balance on handover.",
        required_input=InputKind.PAYMENT_CONFIRMATION,
    ),
    Transition(
        from_status=OrderStatus.IN_DELIVERY,
        to_status=OrderStatus.DELIVERED,
        label="Confirm delivery",
        description="The customer received the order; close the file.",
    ),
)


BACKWARD_TRANSITIONS: Tuple[Transition, ...] = tuple(
    Transition(
        from_status=from_status,
        to_status=to_status,
        label=label,
        description=description,
        is_backward=True,
    )
    for from_status, to_status, label, description in (
        (
            OrderStatus.PARTIALLY_PAID,
            OrderStatus.NEW,
            "Edit partial payment",
            "Return to new to correct or cancel the partial payment.",
        ),
        (
            OrderStatus.PAID,
            OrderStatus.NEW,
            "Edit payment",
            "Return to new to correct the payment details.",
        ),
        (
            OrderStatus.ORDERED,
            OrderStatus.PAID,
            "Edit international shipping number",
            "Return to correct the international shipping number.",
        ),
        (
            OrderStatus.SHIPPED,
            OrderStatus.ORDERED,
            "Edit tracking number",
            "Return to correct the international tracking number.",
        ),
        (
            OrderStatus.LINKED,
            OrderStatus.SHIPPED,
            "Edit shipping status",
            "Return to correct the shipping status or tracking numbers.",
        ),
        (
            OrderStatus.ARRIVED,
            OrderStatus.LINKED,
            "Edit arrival data",
            "Return to correct the weight or the storage location.",
        ),
        (
            OrderStatus.WEIGHT_PAID,
            OrderStatus.ARRIVED,
            "Edit weight fee",
            "Return to correct the weight fee data.",
        ),
        (
            OrderStatus.IN_DELIVERY,
            OrderStatus.WEIGHT_PAID,
            "Edit delivery method",
            "Return to change the delivery method.",
        ),
        (
            OrderStatus.DELIVERED,
            OrderStatus.IN_DELIVERY,
            "Edit delivery status",
            "Return to correct the delivery status.",
        ),
    )
)


DEFAULT_CATALOG = TransitionCatalog(FORWARD_TRANSITIONS, BACKWARD_TRANSITIONS)
