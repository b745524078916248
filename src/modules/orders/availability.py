"""Effective status resolution and transition availability.

``partially_paid`` is an overlay: an order can be at a later stage and
still owe money.  ``effective_status`` derives the overlay from the
payment fields, and ``available_transitions`` merges the payment
transitions into the order's own stage before applying the contextual
filters for ``arrived`` and ``in_delivery``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Tuple

from modules.orders.catalog import DEFAULT_CATALOG, Transition, TransitionCatalog
from modules.orders.constants import InputKind, InvoiceDocumentKind, OrderStatus
from modules.orders.dtos import Order


def is_partially_paid(order: Order) -> bool:
    amount = order.payment_amount
    return amount is not None and Decimal("0") < amount < order.final_price


def is_fully_paid(order: Order) -> bool:
    return (order.payment_amount or Decimal("0")) >= order.final_price


def effective_status(order: Order) -> OrderStatus:
    if is_partially_paid(order):
        return OrderStatus.PARTIALLY_PAID
    return order.status


def available_transitions(
    order: Order, catalog: TransitionCatalog = DEFAULT_CATALOG
) -> Tuple[Transition, ...]:
    """Forward transitions legal for *order*, in catalog order.

    Rules:
    1. Entries from the raw status, plus the ``partially_paid`` entries
       when the order is partially paid.
    2. At ``arrived`` only one of the two weight entries survives: the
       remaining-payment one when partially paid, the plain one otherwise.
    3. At ``in_delivery`` only one of the two delivery entries survives:
       the payment one when partially paid, the input-less one otherwise.
    """
    partially_paid = is_partially_paid(order)
    candidates = [
        t
        for t in catalog.forward
        if t.from_status == order.status
        or (partially_paid and t.from_status == OrderStatus.PARTIALLY_PAID)
    ]

    if order.status == OrderStatus.ARRIVED:
        if partially_paid:
            candidates = [
                t
                for t in candidates
                if t.required_input == InputKind.REMAINING_PAYMENT_WITH_WEIGHT
            ]
        else:
            candidates = [
                t
                for t in candidates
                if t.required_input != InputKind.REMAINING_PAYMENT_WITH_WEIGHT
            ]

    if order.status == OrderStatus.IN_DELIVERY:
        if partially_paid:
            candidates = [
                t
                for t in candidates
                if t.required_input == InputKind.PAYMENT_CONFIRMATION
            ]
        else:
            candidates = [t for t in candidates if t.required_input == InputKind.NONE]

    return tuple(candidates)


def available_backward_transitions(
    order: Order, catalog: TransitionCatalog = DEFAULT_CATALOG
) -> Tuple[Transition, ...]:
    # Raw status only: rollback ignores the partial-payment overlay.
    return catalog.backward_from(order.status)


def auto_advance_transition(
    order: Order, catalog: TransitionCatalog = DEFAULT_CATALOG
) -> Optional[Transition]:
    """The single input-less transition the caller may apply unprompted."""
    transitions = available_transitions(order, catalog)
    if (
        len(transitions) == 1
        and not transitions[0].requires_input
        and order.status != OrderStatus.PARTIALLY_PAID
    ):
        return transitions[0]
    return None


def suggested_transition(
    order: Order, catalog: TransitionCatalog = DEFAULT_CATALOG
) -> Optional[Transition]:
    """Default choice to preselect when presenting the options."""
    transitions = available_transitions(order, catalog)
    if order.status == OrderStatus.PARTIALLY_PAID:
        for transition in transitions:
            if transition.to_status == OrderStatus.PAID:
                return transition
        return transitions[0] if transitions else None
    if len(transitions) == 1:
        return transitions[0]
    return None


def is_available(
    order: Order, transition: Transition, catalog: TransitionCatalog = DEFAULT_CATALOG
) -> bool:
    if transition.is_backward:
        options = available_backward_transitions(order, catalog)
    else:
        options = available_transitions(order, catalog)
    return any(t.key == transition.key for t in options)


def invoice_document_kind(order: Order) -> InvoiceDocumentKind:
    """Which document the invoicing collaborator should produce."""
    if order.status == OrderStatus.NEW:
        return InvoiceDocumentKind.QUOTE
    if order.status == OrderStatus.PARTIALLY_PAID or is_partially_paid(order):
        return InvoiceDocumentKind.PARTIAL_INVOICE
    return InvoiceDocumentKind.INVOICE
