"""Unit tests for ``OrderLifecycleService``.

Covers:
- Queries delegating to availability and validation.
- Transition resolution by identity.
- Exactly one ``OrderChanged`` per successful transition, none on failure.
- Event publication switched off through settings.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.constants import InputKind, InvoiceDocumentKind, OrderStatus
from modules.orders.dtos import TransitionPayload
from modules.orders.events import BACKWARD, FORWARD, OrderChanged
from modules.orders.exceptions import IllegalTransition, InvalidTransitionInput
from modules.orders.services import requires_invoice

pytestmark = pytest.mark.unit


class RecordingHandler:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


@pytest.fixture()
def recorder(bus):
    handler = RecordingHandler()
    bus.subscribe(OrderChanged, handler)
    return handler


class TestQueries:
    def test_options_for_partially_paid_order(self, service, make_order):
        order = make_order(
            status=OrderStatus.PARTIALLY_PAID, payment_amount=Decimal("30000")
        )
        options = service.options(order)

        assert options.effective_status == OrderStatus.PARTIALLY_PAID
        assert options.is_partially_paid
        assert [t.to_status for t in options.forward] == [
            OrderStatus.PAID,
            OrderStatus.ORDERED,
        ]
        assert [t.to_status for t in options.backward] == [OrderStatus.NEW]
        assert options.auto_advance is None
        assert options.suggested.to_status == OrderStatus.PAID

    def test_options_for_shipped_order(self, service, make_order):
        order = make_order(status=OrderStatus.SHIPPED, payment_amount=Decimal("65000"))
        options = service.options(order)
        assert options.auto_advance.to_status == OrderStatus.LINKED

    def test_effective_status(self, service, make_order):
        order = make_order(status=OrderStatus.LINKED, payment_amount=Decimal("1"))
        assert service.effective_status(order) == OrderStatus.PARTIALLY_PAID

    def test_validate(self, service):
        transition = service.resolve("new", "paid")
        payload = TransitionPayload(amount=Decimal("10"), payment_method="card")
        assert service.validate(transition, payload)
        assert not service.validate(transition, TransitionPayload())


class TestResolve:
    def test_resolves_forward(self, service):
        transition = service.resolve("in_delivery", "delivered", "none")
        assert transition.required_input == InputKind.NONE

    def test_resolves_backward(self, service):
        assert service.resolve("delivered", "in_delivery", backward=True).is_backward

    def test_ambiguous_pair_rejected(self, service):
        with pytest.raises(IllegalTransition, match="in_delivery -> delivered"):
            service.resolve("in_delivery", "delivered")

    def test_unknown_pair_rejected(self, service):
        with pytest.raises(IllegalTransition):
            service.resolve("new", "shipped")


class TestAdvance:
    def test_publishes_one_event(self, service, make_order, recorder, now):
        order = make_order()
        updated = service.advance(
            order,
            service.resolve("new", "paid"),
            TransitionPayload(amount=Decimal("30000"), payment_method="cash"),
        )

        assert updated.updated_at == now
        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert event.aggregate_id == order.id
        assert event.order == updated
        assert event.previous_status == OrderStatus.NEW
        assert event.direction == FORWARD
        assert event.invoice_requested
        assert event.document_kind == InvoiceDocumentKind.PARTIAL_INVOICE
        assert event.event_name == "OrderChanged"

    def test_input_less_transition_requests_no_invoice(
        self, service, make_order, recorder
    ):
        order = make_order(status=OrderStatus.SHIPPED, payment_amount=Decimal("65000"))
        service.advance(order, service.resolve("shipped", "linked"))
        assert not recorder.events[0].invoice_requested
        assert recorder.events[0].document_kind == InvoiceDocumentKind.INVOICE

    def test_failure_publishes_nothing(self, service, make_order, recorder):
        with pytest.raises(InvalidTransitionInput):
            service.advance(make_order(), service.resolve("new", "paid"))
        with pytest.raises(IllegalTransition):
            service.advance(make_order(), service.resolve("ordered", "shipped"))
        assert recorder.events == []

    def test_events_can_be_switched_off(self, service, make_order, recorder, settings):
        settings.ORDER_LIFECYCLE = {**settings.ORDER_LIFECYCLE, "PUBLISH_EVENTS": False}
        updated = service.advance(
            make_order(),
            service.resolve("new", "paid"),
            TransitionPayload(amount=Decimal("65000"), payment_method="cash"),
        )
        assert updated.status == OrderStatus.PAID
        assert recorder.events == []


class TestRevert:
    def test_publishes_backward_event(self, service, make_order, recorder):
        order = make_order(
            status=OrderStatus.SHIPPED,
            payment_amount=Decimal("65000"),
            tracking_numbers=("US123",),
            tracking_number="US123",
        )
        updated = service.revert(order, service.resolve("shipped", "ordered", backward=True))

        assert updated.status == OrderStatus.ORDERED
        (event,) = recorder.events
        assert event.direction == BACKWARD
        assert event.previous_status == OrderStatus.SHIPPED
        assert not event.invoice_requested

    def test_failure_publishes_nothing(self, service, make_order, recorder):
        with pytest.raises(IllegalTransition):
            service.revert(
                make_order(), service.resolve("paid", "new", backward=True)
            )
        assert recorder.events == []


class TestRequiresInvoice:
    @pytest.mark.parametrize(
        ("identity", "expected"),
        [
            (("new", "paid"), True),
            (("arrived", "weight_paid", "remaining_payment_with_weight"), True),
            (("in_delivery", "delivered", "payment_confirmation"), True),
            (("in_delivery", "delivered", "none"), False),
            (("linked", "arrived"), False),
        ],
    )
    def test_payment_bearing_transitions(self, service, identity, expected):
        assert requires_invoice(service.resolve(*identity)) is expected

    def test_backward_never_requests_invoice(self, service):
        assert not requires_invoice(service.resolve("paid", "new", backward=True))
