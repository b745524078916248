"""Forward and backward transition executors.

Both executors are pure: they take an immutable ``Order`` and return a
new one, raising before anything is built when the request is illegal
or the payload incomplete.

Forward rules:
- Payment-bearing kinds add the payload amount to ``payment_amount``.
  The result lands on the transition's target when the order is now
  fully paid, and on ``partially_paid`` otherwise.
- Shipping and tracking numbers are appended, never replaced.
- Weight and storage location are captured (overwritten) at arrival.
- Note lines are appended as tagged ``NoteEntry`` records.

Backward rules: the reverted stage clears only the fields its own
forward step introduced (``ROLLBACKS``).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

import structlog
from django.conf import settings
from django.utils import timezone

from modules.orders.availability import is_available, is_partially_paid
from modules.orders.catalog import DEFAULT_CATALOG, Transition, TransitionCatalog
from modules.orders.constants import (
    DELIVERY_METHOD_NOTE,
    INTERNATIONAL_SHIPPING_NOTE,
    PARTIAL_PAYMENT_NOTE,
    PAYMENT_INPUT_KINDS,
    DeliveryChoice,
    InputKind,
    NoteTag,
    OrderStatus,
)
from modules.orders.dtos import NoteEntry, Order, TransitionPayload
from modules.orders.exceptions import (
    IllegalTransition,
    InvalidTransitionInput,
    InvariantViolation,
)
from modules.orders.validation import check_payload

logger = structlog.get_logger(__name__)

Changes = Dict[str, Any]
Clock = Callable[[], datetime]


def format_amount(amount: Decimal) -> str:
    currency = settings.ORDER_LIFECYCLE["CURRENCY"]
    return f"{currency} {amount:,.0f}"


# ---------------------------------------------------------------------------
# Forward
# ---------------------------------------------------------------------------


def _apply_payment(
    order: Order, transition: Transition, payload: TransitionPayload, now: datetime
) -> Changes:
    previous = order.payment_amount or Decimal("0")
    total = previous + payload.amount
    if total < previous:
        logger.error(
            "order.invariant_violated",
            order_id=str(order.id),
            invariant="monotonic_payment",
            previous=str(previous),
            total=str(total),
        )
        raise InvariantViolation(
            f"Payment for order {order.id} would decrease from {previous} to {total}."
        )

    if total >= order.final_price:
        status = transition.to_status
    else:
        status = OrderStatus.PARTIALLY_PAID

    changes: Changes = {
        "status": status,
        "payment_amount": total,
        "payment_method": payload.payment_method,
        "payment_date": now,
        "payment_notes": payload.payment_notes,
    }
    if payload.payment_receipt:
        changes["payment_receipt"] = payload.payment_receipt
    return changes


def _apply_weight_storage(payload: TransitionPayload) -> Changes:
    return {
        "weight": payload.weight,
        "storage_location": payload.storage_location,
    }


def _apply_international_shipping(order: Order, payload: TransitionPayload) -> Changes:
    entries = tuple(
        NoteEntry(
            tag=NoteTag.INTERNATIONAL_SHIPPING,
            text=INTERNATIONAL_SHIPPING_NOTE.format(number=number),
        )
        for number in payload.shipping_numbers
    )
    return {
        "international_shipping_numbers": order.international_shipping_numbers
        + payload.shipping_numbers,
        "note_entries": order.note_entries + entries,
    }


def _apply_tracking(order: Order, payload: TransitionPayload) -> Changes:
    numbers = order.tracking_numbers + payload.tracking_numbers
    return {"tracking_numbers": numbers, "tracking_number": numbers[0]}


def _apply_delivery_choice(order: Order, payload: TransitionPayload) -> Changes:
    method = DeliveryChoice(payload.delivery_choice).label
    if payload.delivery_notes:
        method = f"{method} - {payload.delivery_notes}"
    entry = NoteEntry(
        tag=NoteTag.DELIVERY_METHOD,
        text=DELIVERY_METHOD_NOTE.format(method=method),
    )
    return {"note_entries": order.note_entries + (entry,)}


def _partial_payment_entry(order: Order) -> NoteEntry:
    return NoteEntry(
        tag=NoteTag.PARTIAL_PAYMENT,
        text=PARTIAL_PAYMENT_NOTE.format(
            paid=format_amount(order.payment_amount or Decimal("0")),
            total=format_amount(order.final_price),
        ),
    )


def _forward_changes(
    order: Order, transition: Transition, payload: TransitionPayload, now: datetime
) -> Changes:
    kind = transition.required_input
    changes: Changes = {"status": transition.to_status, "updated_at": now}

    if kind in PAYMENT_INPUT_KINDS:
        changes.update(_apply_payment(order, transition, payload, now))
    if kind in (InputKind.WEIGHT_STORAGE, InputKind.REMAINING_PAYMENT_WITH_WEIGHT):
        changes.update(_apply_weight_storage(payload))
    if kind == InputKind.INTERNATIONAL_SHIPPING:
        changes.update(_apply_international_shipping(order, payload))
    if kind == InputKind.TRACKING:
        changes.update(_apply_tracking(order, payload))
    if kind == InputKind.DELIVERY_CHOICE:
        changes.update(_apply_delivery_choice(order, payload))

    # The order keeps owing money past this step: leave a trace of it.
    if (
        transition.from_status == OrderStatus.PARTIALLY_PAID
        and transition.to_status != OrderStatus.PAID
        and kind not in PAYMENT_INPUT_KINDS
        and is_partially_paid(order)
    ):
        entries = changes.get("note_entries", order.note_entries)
        changes["note_entries"] = entries + (_partial_payment_entry(order),)

    return changes


def execute_forward(
    order: Order,
    transition: Transition,
    payload: Optional[TransitionPayload] = None,
    *,
    catalog: TransitionCatalog = DEFAULT_CATALOG,
    now: Optional[Clock] = None,
) -> Order:
    """Apply a forward *transition* to *order* and return the new order.

    Raises:
        IllegalTransition: the transition is backward or not available
            for the order after contextual filtering.
        InvalidTransitionInput: the payload fails the transition's
            required-input predicate.
        InvariantViolation: the payment total would decrease.
    """
    payload = payload or TransitionPayload()
    log = logger.bind(
        order_id=str(order.id),
        from_status=str(order.status),
        to_status=str(transition.to_status),
        input_kind=str(transition.required_input),
    )

    if transition.is_backward or not is_available(order, transition, catalog):
        log.warning("order.transition_rejected", reason="not_available")
        raise IllegalTransition(
            f"Transition {transition} is not available for order {order.id} "
            f"in status {order.status}."
        )

    failed = check_payload(transition.required_input, payload)
    if failed:
        log.warning("order.transition_rejected", reason="invalid_input", fields=failed)
        raise InvalidTransitionInput(transition.required_input, failed)

    timestamp = (now or timezone.now)()
    updated = order.model_copy(
        update=_forward_changes(order, transition, payload, timestamp)
    )

    log.info(
        "order.transition_applied",
        direction="forward",
        new_status=str(updated.status),
        payment_amount=str(updated.payment_amount)
        if updated.payment_amount is not None
        else None,
    )
    return updated


# ---------------------------------------------------------------------------
# Backward
# ---------------------------------------------------------------------------


def _clear_payment(order: Order) -> Changes:
    return {
        "payment_amount": None,
        "payment_method": None,
        "payment_date": None,
        "payment_notes": None,
        "payment_receipt": None,
    }


def _clear_international_shipping(order: Order) -> Changes:
    return {
        "international_shipping_numbers": (),
        "note_entries": tuple(
            entry
            for entry in order.note_entries
            if entry.tag not in (NoteTag.INTERNATIONAL_SHIPPING, NoteTag.PARTIAL_PAYMENT)
        ),
    }


def _clear_tracking(order: Order) -> Changes:
    return {"tracking_number": None, "tracking_numbers": ()}


def _clear_weight_storage(order: Order) -> Changes:
    return {"weight": None, "storage_location": None}


def _clear_delivery_choice(order: Order) -> Changes:
    return {
        "note_entries": tuple(
            entry
            for entry in order.note_entries
            if entry.tag != NoteTag.DELIVERY_METHOD
        ),
    }


# Reverted stage -> fields its forward step introduced.  Stages missing
# here (linked, weight_paid, delivered) are structural only.
ROLLBACKS: Dict[str, Callable[[Order], Changes]] = {
    OrderStatus.PARTIALLY_PAID: _clear_payment,
    OrderStatus.PAID: _clear_payment,
    OrderStatus.ORDERED: _clear_international_shipping,
    OrderStatus.SHIPPED: _clear_tracking,
    OrderStatus.ARRIVED: _clear_weight_storage,
    OrderStatus.IN_DELIVERY: _clear_delivery_choice,
}


def execute_backward(
    order: Order,
    transition: Transition,
    *,
    catalog: TransitionCatalog = DEFAULT_CATALOG,
    now: Optional[Clock] = None,
) -> Order:
    """Revert *order* one stage along a backward *transition*.

    Raises:
        IllegalTransition: the transition is forward or its ``from`` is
            not the order's raw status.
    """
    log = logger.bind(
        order_id=str(order.id),
        from_status=str(order.status),
        to_status=str(transition.to_status),
    )

    if not transition.is_backward or not is_available(order, transition, catalog):
        log.warning("order.transition_rejected", reason="not_available")
        raise IllegalTransition(
            f"Backward transition {transition} is not available for order "
            f"{order.id} in status {order.status}."
        )

    changes: Changes = {
        "status": transition.to_status,
        "updated_at": (now or timezone.now)(),
    }
    rollback = ROLLBACKS.get(transition.from_status)
    if rollback is not None:
        changes.update(rollback(order))

    updated = order.model_copy(update=changes)
    if updated.status == OrderStatus.PAID and is_partially_paid(updated):
        updated = updated.model_copy(update={"status": OrderStatus.PARTIALLY_PAID})

    log.info(
        "order.transition_applied",
        direction="backward",
        new_status=str(updated.status),
    )
    return updated
