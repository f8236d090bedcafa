"""Admin registration for hall bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import HallBooking


@admin.register(HallBooking)
class HallBookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "applicant_full_name",
        "event_date",
        "event_type",
        "total_guests",
        "status",
        "payment_status",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "event_type", "event_date")
    search_fields = ("booking_reference", "applicant_name", "applicant_surname", "applicant_email", "user__email")
    readonly_fields = (
        "revision",
        "booking_reference",
        "checkout_id",
        "payment_reference",
        "payment_date",
        "confirmed_at",
        "rental_fee",
        "deposit_amount",
        "total_amount",
        "created_at",
        "updated_at",
    )
