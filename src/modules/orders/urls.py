"""Order lifecycle URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import AdvanceView, LifecycleOptionsView, RevertView

urlpatterns = [
    path(
        "orders/lifecycle/options/",
        LifecycleOptionsView.as_view(),
        name="order-lifecycle-options",
    ),
    path(
        "orders/lifecycle/advance/",
        AdvanceView.as_view(),
        name="order-lifecycle-advance",
    ),
    path(
        "orders/lifecycle/revert/",
        RevertView.as_view(),
        name="order-lifecycle-revert",
    ),
]
