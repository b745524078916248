from django.urls import include, path

urlpatterns = [
    # Domain modules, versioned API
    path("api/v1/", include("modules.orders.urls")),
]
