"""Serializers for payment records."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_reference = serializers.CharField(source="booking.booking_reference", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "booking_reference",
            "provider",
            "checkout_id",
            "status",
            "amount",
            "currency",
            "payment_reference",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields
