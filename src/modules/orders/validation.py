"""Per-input-kind payload validation.

Each input kind maps to a predicate over ``TransitionPayload`` that
returns the names of the fields it rejects; an empty tuple means the
payload is complete.  ``remaining_payment_with_weight`` is the
conjunction of the payment and weight predicates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Dict, Tuple

from modules.orders.catalog import Transition
from modules.orders.constants import DeliveryChoice, InputKind, PaymentMethod
from modules.orders.dtos import TransitionPayload

Check = Callable[[TransitionPayload], Tuple[str, ...]]


def _positive(value) -> bool:
    return value is not None and value.is_finite() and value > Decimal("0")


def check_payment(payload: TransitionPayload) -> Tuple[str, ...]:
    failed = []
    if not _positive(payload.amount):
        failed.append("amount")
    if payload.payment_method not in PaymentMethod.values:
        failed.append("payment_method")
    return tuple(failed)


def check_international_shipping(payload: TransitionPayload) -> Tuple[str, ...]:
    return () if payload.shipping_numbers else ("shipping_numbers",)


def check_tracking(payload: TransitionPayload) -> Tuple[str, ...]:
    return () if payload.tracking_numbers else ("tracking_numbers",)


def check_weight_storage(payload: TransitionPayload) -> Tuple[str, ...]:
    failed = []
    if not _positive(payload.weight):
        failed.append("weight")
    if not payload.storage_location:
        failed.append("storage_location")
    return tuple(failed)


def check_delivery_choice(payload: TransitionPayload) -> Tuple[str, ...]:
    if payload.delivery_choice in DeliveryChoice.values:
        return ()
    return ("delivery_choice",)


def check_remaining_payment_with_weight(payload: TransitionPayload) -> Tuple[str, ...]:
    return check_payment(payload) + check_weight_storage(payload)


CHECKS: Dict[str, Check] = {
    InputKind.PAYMENT_CONFIRMATION: check_payment,
    InputKind.INTERNATIONAL_SHIPPING: check_international_shipping,
    InputKind.TRACKING: check_tracking,
    InputKind.WEIGHT_STORAGE: check_weight_storage,
    InputKind.DELIVERY_CHOICE: check_delivery_choice,
    InputKind.REMAINING_PAYMENT_WITH_WEIGHT: check_remaining_payment_with_weight,
    InputKind.NONE: lambda payload: (),
}


def check_payload(input_kind: InputKind, payload: TransitionPayload) -> Tuple[str, ...]:
    """Return the payload fields that fail *input_kind*'s predicate."""
    return CHECKS[input_kind](payload)


def validate(transition: Transition, payload: TransitionPayload) -> bool:
    return not check_payload(transition.required_input, payload)
