"""Order lifecycle constants.

Defines the status choices, the input kinds a transition may require,
and the value sets accepted by the per-transition input validator.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    NEW = "new", "New"
    PARTIALLY_PAID = "partially_paid", "Partially paid"
    PAID = "paid", "Fully paid"
    ORDERED = "ordered", "Ordered"
    SHIPPED = "shipped", "Shipped"
    LINKED = "linked", "Linked to shipment"
    ARRIVED = "arrived", "Arrived at warehouse"
    WEIGHT_PAID = "weight_paid", "Weight paid"
    IN_DELIVERY = "in_delivery", "In delivery"
    DELIVERED = "delivered", "Delivered"


class InputKind(models.TextChoices):
    PAYMENT_CONFIRMATION = "payment_confirmation", "Payment confirmation"
    INTERNATIONAL_SHIPPING = "international_shipping", "International shipping"
    TRACKING = "tracking", "Tracking"
    WEIGHT_STORAGE = "weight_storage", "Weight and storage"
    DELIVERY_CHOICE = "delivery_choice", "Delivery choice"
    REMAINING_PAYMENT_WITH_WEIGHT = (
        "remaining_payment_with_weight",
        "Remaining payment with weight",
    )
    NONE = "none", "No input"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "Cash"
    BANK_TRANSFER = "bank_transfer", "Bank transfer"
    MOBILE_MONEY = "mobile_money", "Mobile money"
    CARD = "card", "Card"
    OTHER = "other", "Other"


class DeliveryChoice(models.TextChoices):
    DELIVERY = "delivery", "Home delivery"
    PICKUP = "pickup", "Showroom pickup"


class NoteTag(models.TextChoices):
    """Origin stage of a transition-generated note line."""

    INTERNATIONAL_SHIPPING = "international_shipping", "International shipping"
    DELIVERY_METHOD = "delivery_method", "Delivery method"
    PARTIAL_PAYMENT = "partial_payment", "Partial payment"


class InvoiceDocumentKind(models.TextChoices):
    QUOTE = "quote", "Quote"
    PARTIAL_INVOICE = "partial_invoice", "Partially paid invoice"
    INVOICE = "invoice", "Invoice"


TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED}

# Kinds whose execution accumulates ``payment_amount``.
PAYMENT_INPUT_KINDS: set[str] = {
    InputKind.PAYMENT_CONFIRMATION,
    InputKind.REMAINING_PAYMENT_WITH_WEIGHT,
}

INTERNATIONAL_SHIPPING_NOTE = "International shipping number: {number}"
DELIVERY_METHOD_NOTE = "Delivery method: {method}"
PARTIAL_PAYMENT_NOTE = "Partial payment: {paid} of {total}"
