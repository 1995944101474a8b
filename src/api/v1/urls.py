from django.urls import include, path

app_name = "url_router"

urlpatterns = [
    path("auth/", include("api.v1.core.urls.auth", namespace="auth")),
    path("bikes/", include("api.v1.bike.urls", namespace="bike")),
    path("maintenance/", include("api.v1.maintenance.urls", namespace="maintenance")),
    path("bookings/", include("api.v1.booking.urls", namespace="booking")),
    path("fleet/", include("api.v1.fleet.urls", namespace="fleet")),
    path("misc/", include("api.v1.core.urls.misc", namespace="health")),
]
