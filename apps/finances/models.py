"""Payment records for hall bookings."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """One checkout attempt for a hall booking."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Created, awaiting payment")
        SUCCESS = "success", _("Paid")
        FAILED = "failed", _("Failed")

    class Provider(models.TextChoices):
        YOCO = "yoco", _("Yoco")

    booking = models.ForeignKey(
        "bookings.HallBooking",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    provider = models.CharField(max_length=20, choices=Provider.choices, default=Provider.YOCO)
    checkout_id = models.CharField(max_length=100, blank=True, db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="ZAR")
    payment_reference = models.CharField(max_length=100, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Payment {self.checkout_id or self.pk} for booking {self.booking_id} ({self.status})"

    def mark_success(self, payment_reference: str | None = None) -> None:
        self.status = self.Status.SUCCESS
        if payment_reference:
            self.payment_reference = payment_reference
        self.paid_at = timezone.now()
        self.save(update_fields=["status", "payment_reference", "paid_at", "updated_at"])

    def mark_failed(self, reason: str | None = None) -> None:
        self.status = self.Status.FAILED
        if reason:
            self.metadata["failure_reason"] = reason
        self.save(update_fields=["status", "metadata", "updated_at"])


class PaymentTransaction(models.Model):
    """Raw log of callbacks and webhooks received for a payment."""

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    event = models.CharField(max_length=50)
    payload = models.JSONField()
    status = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.event} for payment {self.payment_id}"
