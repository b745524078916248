"""Order lifecycle DRF serializers for API input/output.

The serializers operate at the Interface layer (API Views).
Lifecycle logic lives in the service layer, which receives the
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import InputKind, NoteTag, OrderStatus
from modules.orders.dtos import Order, TransitionPayload

# ---------------------------------------------------------------------------
# Order (input and output)
# ---------------------------------------------------------------------------


class NoteEntrySerializer(serializers.Serializer):
    tag = serializers.ChoiceField(choices=NoteTag.choices)
    text = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    """Full order record, as received from and returned to the caller."""

    id = serializers.UUIDField(required=False)
    order_number = serializers.CharField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=OrderStatus.choices, default=OrderStatus.NEW)
    final_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)

    payment_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    payment_method = serializers.CharField(required=False, allow_null=True)
    payment_date = serializers.DateTimeField(required=False, allow_null=True)
    payment_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    payment_receipt = serializers.CharField(required=False, allow_null=True)

    international_shipping_numbers = serializers.ListField(
        child=serializers.CharField(), required=False
    )
    tracking_number = serializers.CharField(required=False, allow_null=True)
    tracking_numbers = serializers.ListField(
        child=serializers.CharField(), required=False
    )

    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, required=False, allow_null=True
    )
    storage_location = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )

    notes = serializers.CharField(required=False, allow_blank=True)
    note_entries = NoteEntrySerializer(many=True, required=False)
    rendered_notes = serializers.CharField(read_only=True)
    invoice_sent = serializers.BooleanField(required=False)

    created_at = serializers.DateTimeField(required=False, allow_null=True)
    updated_at = serializers.DateTimeField(required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


class TransitionSerializer(serializers.Serializer):
    """Read serializer for catalog transitions."""

    from_status = serializers.CharField(read_only=True)
    to_status = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    required_input = serializers.CharField(read_only=True)
    is_backward = serializers.BooleanField(read_only=True)


class TransitionRefSerializer(serializers.Serializer):
    """Identifies a catalog transition in a request."""

    from_status = serializers.ChoiceField(choices=OrderStatus.choices)
    to_status = serializers.ChoiceField(choices=OrderStatus.choices)
    required_input = serializers.ChoiceField(choices=InputKind.choices, required=False)


class TransitionPayloadSerializer(serializers.Serializer):
    """Shape of the transition input.

    Completeness is not checked here: the lifecycle validator decides
    which fields a given transition needs and reports the missing ones.
    """

    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    payment_method = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    payment_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    payment_receipt = serializers.CharField(required=False, allow_null=True)

    shipping_numbers = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False
    )
    tracking_numbers = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False
    )

    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, required=False, allow_null=True
    )
    storage_location = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )

    delivery_choice = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )
    delivery_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )


class LifecycleOptionsRequestSerializer(serializers.Serializer):
    order = OrderSerializer()


class AdvanceRequestSerializer(serializers.Serializer):
    order = OrderSerializer()
    transition = TransitionRefSerializer()
    payload = TransitionPayloadSerializer(required=False)


class RevertRequestSerializer(serializers.Serializer):
    order = OrderSerializer()
    transition = TransitionRefSerializer()


class LifecycleOptionsSerializer(serializers.Serializer):
    """Read serializer for ``LifecycleOptions``."""

    effective_status = serializers.CharField(read_only=True)
    is_partially_paid = serializers.BooleanField(read_only=True)
    forward = TransitionSerializer(many=True, read_only=True)
    backward = TransitionSerializer(many=True, read_only=True)
    auto_advance = TransitionSerializer(read_only=True, allow_null=True)
    suggested = TransitionSerializer(read_only=True, allow_null=True)


# ---------------------------------------------------------------------------
# DTO builders
# ---------------------------------------------------------------------------


def build_order(data) -> Order:
    """Build the ``Order`` DTO from validated ``OrderSerializer`` data."""
    return Order.model_validate(dict(data))


def build_payload(data) -> TransitionPayload:
    return TransitionPayload.model_validate(dict(data or {}))
