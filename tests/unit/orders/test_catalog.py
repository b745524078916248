"""Unit tests for the transition catalog.

Covers:
- Forward table contents (branching entries sharing a ``from``).
- Backward table: one entry per stage boundary, all tagged backward.
- Lookup by ``(from, required_input)`` and by identity.
- Catalog construction guards and substitution in tests.
"""

from __future__ import annotations

import pytest

from modules.orders.catalog import (
    BACKWARD_TRANSITIONS,
    DEFAULT_CATALOG,
    FORWARD_TRANSITIONS,
    Transition,
    TransitionCatalog,
)
from modules.orders.constants import TERMINAL_STATES, InputKind, OrderStatus

pytestmark = pytest.mark.unit


def _pairs(transitions):
    return {(t.from_status, t.to_status, t.required_input) for t in transitions}


class TestForwardTable:
    def test_contains_every_forward_transition(self):
        assert _pairs(DEFAULT_CATALOG.forward) == {
            (OrderStatus.NEW, OrderStatus.PAID, InputKind.PAYMENT_CONFIRMATION),
            (OrderStatus.PARTIALLY_PAID, OrderStatus.PAID, InputKind.PAYMENT_CONFIRMATION),
            (
                OrderStatus.PARTIALLY_PAID,
                OrderStatus.ORDERED,
                InputKind.INTERNATIONAL_SHIPPING,
            ),
            (OrderStatus.PAID, OrderStatus.ORDERED, InputKind.INTERNATIONAL_SHIPPING),
            (OrderStatus.ORDERED, OrderStatus.SHIPPED, InputKind.TRACKING),
            (OrderStatus.SHIPPED, OrderStatus.LINKED, InputKind.NONE),
            (OrderStatus.LINKED, OrderStatus.ARRIVED, InputKind.WEIGHT_STORAGE),
            (OrderStatus.ARRIVED, OrderStatus.WEIGHT_PAID, InputKind.NONE),
            (
                OrderStatus.ARRIVED,
                OrderStatus.WEIGHT_PAID,
                InputKind.REMAINING_PAYMENT_WITH_WEIGHT,
            ),
            (OrderStatus.WEIGHT_PAID, OrderStatus.IN_DELIVERY, InputKind.DELIVERY_CHOICE),
            (OrderStatus.IN_DELIVERY, OrderStatus.DELIVERED, InputKind.PAYMENT_CONFIRMATION),
            (OrderStatus.IN_DELIVERY, OrderStatus.DELIVERED, InputKind.NONE),
        }

    def test_no_forward_entry_is_backward(self):
        assert not any(t.is_backward for t in FORWARD_TRANSITIONS)

    def test_partially_paid_is_never_a_forward_target(self):
        assert all(t.to_status != OrderStatus.PARTIALLY_PAID for t in FORWARD_TRANSITIONS)

    def test_delivered_is_terminal(self):
        assert DEFAULT_CATALOG.forward_from(OrderStatus.DELIVERED) == ()
        assert OrderStatus.DELIVERED in TERMINAL_STATES

    def test_every_entry_has_a_label(self):
        assert all(t.label for t in DEFAULT_CATALOG.forward + DEFAULT_CATALOG.backward)

    def test_in_delivery_has_two_entries_to_the_same_target(self):
        entries = DEFAULT_CATALOG.forward_from(OrderStatus.IN_DELIVERY)
        assert len(entries) == 2
        assert {t.to_status for t in entries} == {OrderStatus.DELIVERED}


class TestBackwardTable:
    def test_one_entry_per_stage_boundary(self):
        pairs = {(t.from_status, t.to_status) for t in BACKWARD_TRANSITIONS}
        assert pairs == {
            (OrderStatus.PARTIALLY_PAID, OrderStatus.NEW),
            (OrderStatus.PAID, OrderStatus.NEW),
            (OrderStatus.ORDERED, OrderStatus.PAID),
            (OrderStatus.SHIPPED, OrderStatus.ORDERED),
            (OrderStatus.LINKED, OrderStatus.SHIPPED),
            (OrderStatus.ARRIVED, OrderStatus.LINKED),
            (OrderStatus.WEIGHT_PAID, OrderStatus.ARRIVED),
            (OrderStatus.IN_DELIVERY, OrderStatus.WEIGHT_PAID),
            (OrderStatus.DELIVERED, OrderStatus.IN_DELIVERY),
        }

    def test_all_tagged_backward_without_input(self):
        assert all(t.is_backward for t in BACKWARD_TRANSITIONS)
        assert all(t.required_input == InputKind.NONE for t in BACKWARD_TRANSITIONS)

    def test_new_has_no_backward_entry(self):
        assert DEFAULT_CATALOG.backward_from(OrderStatus.NEW) == ()


class TestLookup:
    def test_lookup_by_from_and_input_kind(self):
        (transition,) = DEFAULT_CATALOG.lookup(
            OrderStatus.ARRIVED, InputKind.REMAINING_PAYMENT_WITH_WEIGHT
        )
        assert transition.to_status == OrderStatus.WEIGHT_PAID

    def test_find_unambiguous_pair_without_input_kind(self):
        transition = DEFAULT_CATALOG.find("ordered", "shipped")
        assert transition is not None
        assert transition.required_input == InputKind.TRACKING

    def test_find_ambiguous_pair_requires_input_kind(self):
        assert DEFAULT_CATALOG.find("in_delivery", "delivered") is None
        transition = DEFAULT_CATALOG.find("in_delivery", "delivered", "none")
        assert transition is not None
        assert not transition.requires_input

    def test_find_backward(self):
        transition = DEFAULT_CATALOG.find("shipped", "ordered", backward=True)
        assert transition is not None
        assert transition.is_backward

    def test_find_unknown_returns_none(self):
        assert DEFAULT_CATALOG.find("new", "delivered") is None

    def test_contains_matches_by_identity(self):
        copy = Transition(
            from_status=OrderStatus.NEW,
            to_status=OrderStatus.PAID,
            label="Another label",
            required_input=InputKind.PAYMENT_CONFIRMATION,
        )
        assert copy in DEFAULT_CATALOG

    def test_len_counts_both_tables(self):
        assert len(DEFAULT_CATALOG) == 12 + 9


class TestCatalogConstruction:
    def test_rejects_backward_entry_in_forward_table(self):
        with pytest.raises(ValueError, match="Forward table"):
            TransitionCatalog(forward=BACKWARD_TRANSITIONS, backward=())

    def test_rejects_forward_entry_in_backward_table(self):
        with pytest.raises(ValueError, match="Backward table"):
            TransitionCatalog(forward=(), backward=FORWARD_TRANSITIONS)

    def test_rejects_duplicate_forward_entries(self):
        with pytest.raises(ValueError, match="Duplicate"):
            TransitionCatalog(
                forward=FORWARD_TRANSITIONS[:1] * 2,
                backward=(),
            )

    def test_transitions_are_immutable(self):
        transition = FORWARD_TRANSITIONS[0]
        with pytest.raises(AttributeError):
            transition.to_status = OrderStatus.DELIVERED  # type: ignore[misc]

    def test_str_shows_direction(self):
        assert str(BACKWARD_TRANSITIONS[0]) == "partially_paid <- new [none]"
