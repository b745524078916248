"""Order lifecycle exceptions.

Raised by the lifecycle executors before any new order is produced,
so a failed call never leaves a partially updated record behind.
The API layer (Views) catches the first two and translates them into
HTTP responses; ``InvariantViolation`` is left to propagate.
"""

from __future__ import annotations

from typing import Iterable


class OrderLifecycleError(Exception):
    """Base class for lifecycle failures."""


class InvalidTransitionInput(OrderLifecycleError):
    """The payload does not satisfy the transition's required input.

    ``fields`` names every payload field whose predicate failed so the
    caller can re-prompt for exactly those.
    """

    def __init__(self, input_kind: str, fields: Iterable[str]) -> None:
        self.input_kind = input_kind
        self.fields = tuple(fields)
        super().__init__(
            f"Invalid input for {input_kind}: {', '.join(self.fields)}."
        )


class IllegalTransition(OrderLifecycleError):
    """The transition is not available for the order in its current state."""


class InvariantViolation(OrderLifecycleError):
    """A lifecycle invariant would be broken (e.g. payment decreasing)."""
