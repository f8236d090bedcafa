"""URL routing for hall bookings."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BookingFormViewSet, HallBookingViewSet

router = DefaultRouter()
# "form" must be registered before the booking detail route.
router.register(r"form", BookingFormViewSet, basename="hall-booking-form")
router.register(r"", HallBookingViewSet, basename="hall-booking")

urlpatterns = [
    path("", include(router.urls)),
]
