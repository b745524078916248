from django.apps import AppConfig


class OrdersConfig(AppConfig):
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import OrderChanged
        from modules.orders.handlers import (
            invoice_request_handler,
            order_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderChanged, order_changed_handler)
        event_bus.subscribe(OrderChanged, invoice_request_handler)
