"""Event handlers for order lifecycle events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderChangedHandler(IEventHandler[OrderChanged]):
    def handle(self, event: OrderChanged) -> None:
        logger.info(
            f"Order {event.aggregate_id} moved from {event.previous_status} "
            f"to {event.order.status}",
            order_id=str(event.aggregate_id),
            direction=event.direction,
        )


class InvoiceRequestHandler(IEventHandler[OrderChanged]):
    """Hands payment-bearing transitions over to document generation."""

    def handle(self, event: OrderChanged) -> None:
        if not event.invoice_requested:
            return
        logger.info(
            f"Invoice requested for order {event.aggregate_id}",
            order_id=str(event.aggregate_id),
            document_kind=str(event.document_kind),
            payment_amount=str(event.order.payment_amount),
        )


order_changed_handler = OrderChangedHandler()
invoice_request_handler = InvoiceRequestHandler()
