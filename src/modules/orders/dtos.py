"""Order lifecycle DTOs.

Framework-agnostic data transfer objects using Pydantic v2.
Every DTO is immutable (``frozen=True``): the lifecycle executors
never mutate an order, they return a new one.

- ``NoteEntry``: one transition-generated note line, tagged by stage.
- ``Order``: the record the state machine moves through its stages.
- ``TransitionPayload``: the input captured for a forward transition.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import NoteTag, OrderStatus


class NoteEntry(BaseModel):
    """A note line appended by a transition.

    ``tag`` names the stage that wrote the line so a rollback of that
    stage can drop it without parsing the text.
    """

    model_config = ConfigDict(frozen=True)

    tag: NoteTag
    text: str


class Order(BaseModel):
    """Immutable order record.

    ``status`` is the raw stored stage.  ``payment_amount`` is the
    cumulative amount received; ``final_price`` never changes once the
    order exists.  ``tracking_number`` mirrors ``tracking_numbers[0]``
    for older consumers.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    order_number: Optional[str] = None
    status: OrderStatus = OrderStatus.NEW
    final_price: Decimal

    payment_amount: Optional[Decimal] = None
    payment_method: Optional[str] = None
    payment_date: Optional[datetime] = None
    payment_notes: Optional[str] = None
    payment_receipt: Optional[str] = None

    international_shipping_numbers: Tuple[str, ...] = ()
    tracking_number: Optional[str] = None
    tracking_numbers: Tuple[str, ...] = ()

    weight: Optional[Decimal] = None
    storage_location: Optional[str] = None

    notes: str = ""
    note_entries: Tuple[NoteEntry, ...] = ()
    invoice_sent: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("final_price")
    @classmethod
    def final_price_must_not_be_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Final price cannot be negative.")
        return v

    @property
    def rendered_notes(self) -> str:
        """Free-text notes followed by the transition-generated lines."""
        lines = [self.notes] if self.notes else []
        lines.extend(entry.text for entry in self.note_entries)
        return "\n".join(lines)

    @property
    def remaining_amount(self) -> Decimal:
        paid = self.payment_amount or Decimal("0")
        return max(self.final_price - paid, Decimal("0"))


class TransitionPayload(BaseModel):
    """Input captured for a forward transition.

    Construction never rejects incomplete input: whether the payload
    satisfies a transition is decided by ``validation.check_payload``.
    ``payment_receipt`` is an already-resolved reference (URI or data
    URL), never raw bytes.
    """

    model_config = ConfigDict(frozen=True)

    amount: Optional[Decimal] = None
    payment_method: Optional[str] = None
    payment_notes: Optional[str] = None
    payment_receipt: Optional[str] = None

    shipping_numbers: Tuple[str, ...] = ()
    tracking_numbers: Tuple[str, ...] = ()

    weight: Optional[Decimal] = None
    storage_location: Optional[str] = None

    delivery_choice: Optional[str] = None
    delivery_notes: Optional[str] = None

    @field_validator("shipping_numbers", "tracking_numbers", mode="before")
    @classmethod
    def drop_blank_numbers(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(str(item).strip() for item in v if item and str(item).strip())

    @field_validator(
        "payment_method",
        "payment_notes",
        "storage_location",
        "delivery_choice",
        "delivery_notes",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v
