"""Order lifecycle API views.

Exposes ``OrderLifecycleService`` over HTTP.  The endpoints are
stateless: the caller sends the complete order and receives the new
one back, persisting it on its side.

Domain exceptions are caught and translated into HTTP status codes;
``InvariantViolation`` is not caught.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.orders.availability import invoice_document_kind
from modules.orders.exceptions import IllegalTransition, InvalidTransitionInput
from modules.orders.serializers import (
    AdvanceRequestSerializer,
    LifecycleOptionsRequestSerializer,
    LifecycleOptionsSerializer,
    OrderSerializer,
    RevertRequestSerializer,
    build_order,
    build_payload,
)
from modules.orders.services import OrderLifecycleService, requires_invoice


class LifecycleView(APIView):
    """Base view holding the lifecycle service."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderLifecycleService()

    @staticmethod
    def _illegal(exc: IllegalTransition) -> Response:
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)


class LifecycleOptionsView(LifecycleView):
    def post(self, request: Request) -> Response:
        """POST /api/v1/orders/lifecycle/options/"""
        serializer = LifecycleOptionsRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = build_order(serializer.validated_data["order"])
        options = self._service.options(order)
        return Response(LifecycleOptionsSerializer(options).data)


class AdvanceView(LifecycleView):
    def post(self, request: Request) -> Response:
        """POST /api/v1/orders/lifecycle/advance/

        Returns 400 with the failing ``fields`` when the payload is
        incomplete and 409 when the transition is not available.
        """
        serializer = AdvanceRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        order = build_order(data["order"])
        payload = build_payload(data.get("payload"))
        ref = data["transition"]

        try:
            transition = self._service.resolve(
                ref["from_status"], ref["to_status"], ref.get("required_input")
            )
            updated = self._service.advance(order, transition, payload)
        except IllegalTransition as exc:
            return self._illegal(exc)
        except InvalidTransitionInput as exc:
            return Response(
                {
                    "detail": str(exc),
                    "input_kind": str(exc.input_kind),
                    "fields": list(exc.fields),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            {
                "order": OrderSerializer(updated).data,
                "invoice_requested": requires_invoice(transition),
                "document_kind": str(invoice_document_kind(updated)),
            }
        )


class RevertView(LifecycleView):
    def post(self, request: Request) -> Response:
        """POST /api/v1/orders/lifecycle/revert/"""
        serializer = RevertRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        order = build_order(data["order"])
        ref = data["transition"]

        try:
            transition = self._service.resolve(
                ref["from_status"], ref["to_status"], backward=True
            )
            updated = self._service.revert(order, transition)
        except IllegalTransition as exc:
            return self._illegal(exc)

        return Response({"order": OrderSerializer(updated).data})
