"""Domain events for the order lifecycle."""

from __future__ import annotations

from dataclasses import dataclass

from modules.orders.catalog import Transition
from modules.orders.constants import InvoiceDocumentKind, OrderStatus
from modules.orders.dtos import Order
from shared.domain.events import DomainEvent

FORWARD = "forward"
BACKWARD = "backward"


@dataclass(frozen=True, kw_only=True)
class OrderChanged(DomainEvent):
    """Raised once per successful forward or backward transition.

    Carries the complete new order so subscribers can mirror it without
    reading it back.  ``invoice_requested`` is set for payment-bearing
    forward transitions; ``document_kind`` tells the invoicing side which
    document fits the new state.
    """

    order: Order
    previous_status: OrderStatus
    transition: Transition
    direction: str = FORWARD
    invoice_requested: bool = False
    document_kind: InvoiceDocumentKind = InvoiceDocumentKind.INVOICE
