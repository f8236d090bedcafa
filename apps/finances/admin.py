"""Admin registrations for payments."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Payment, PaymentTransaction


class PaymentTransactionInline(admin.TabularInline):
    model = PaymentTransaction
    extra = 0
    readonly_fields = ("event", "status", "payload", "created_at")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("checkout_id", "booking", "status", "amount", "currency", "paid_at", "created_at")
    list_filter = ("status", "provider")
    search_fields = ("checkout_id", "payment_reference", "booking__booking_reference")
    readonly_fields = ("created_at", "updated_at")
    inlines = [PaymentTransactionInline]
