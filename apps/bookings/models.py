"""Hall booking persistence model."""

from __future__ import annotations

from datetime import time
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import EncryptedCharField

from .constants import EVENT_TYPES


class HallBooking(models.Model):
    """Application to rent the hall, from first draft to confirmed booking."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PAYMENT_PROCESSING = "payment_processing", _("Payment processing")
        CONFIRMED = "confirmed", _("Confirmed")
        REJECTED = "rejected", _("Rejected")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hall_bookings",
    )
    revision = models.PositiveIntegerField(default=0)

    # Applicant
    applicant_name = models.CharField(max_length=100, blank=True)
    applicant_surname = models.CharField(max_length=100, blank=True)
    applicant_address = models.CharField(max_length=255, blank=True)
    applicant_phone = models.CharField(max_length=20, blank=True)
    applicant_email = models.EmailField(blank=True)
    is_estate_resident = models.BooleanField(default=True)
    estate_address = models.CharField(max_length=255, blank=True)

    # Event
    event_date = models.DateField(null=True, blank=True)
    event_start_time = models.TimeField(null=True, blank=True, default=time(10, 0))
    event_end_time = models.TimeField(null=True, blank=True, default=time(22, 0))
    event_type = models.CharField(max_length=32, choices=EVENT_TYPES, blank=True)
    event_description = models.TextField(blank=True)
    total_guests = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(50)],
    )
    number_of_vehicles = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(30)])
    tables_required = models.PositiveSmallIntegerField(default=0)
    chairs_required = models.PositiveSmallIntegerField(default=0)

    # Bank details for the deposit refund
    bank_account_holder = models.CharField(max_length=150, blank=True)
    bank_name = models.CharField(max_length=64, blank=True)
    bank_branch_code = models.CharField(max_length=16, blank=True)
    bank_account_number = EncryptedCharField(max_length=32, blank=True)
    bank_proof_document_url = models.CharField(max_length=500, blank=True)

    # Additional info
    will_play_music = models.BooleanField(default=False)
    music_license_proof_url = models.CharField(max_length=500, blank=True)
    special_requests = models.TextField(blank=True)

    # Terms
    terms_page_1_initial = models.CharField(max_length=10, blank=True)
    terms_page_2_initial = models.CharField(max_length=10, blank=True)
    terms_page_3_initial = models.CharField(max_length=10, blank=True)
    terms_page_4_initial = models.CharField(max_length=10, blank=True)
    terms_accepted = models.BooleanField(default=False)
    terms_accepted_at = models.DateTimeField(null=True, blank=True)
    terms_version = models.CharField(max_length=16, default="2025-01")

    # Money
    rental_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("1500.00"))
    deposit_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("1000.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("2500.00"))
    currency = models.CharField(max_length=3, default="ZAR")

    # Status and payment
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.DRAFT)
    payment_status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    checkout_id = models.CharField(max_length=100, blank=True)
    payment_started_at = models.DateTimeField(null=True, blank=True)
    payment_reference = models.CharField(max_length=100, blank=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    booking_reference = models.CharField(max_length=20, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hall booking")
        verbose_name_plural = _("Hall bookings")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking_reference"],
                condition=~models.Q(booking_reference=""),
                name="hall_booking_unique_reference",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "status"], name="bookings_ha_user_id_5c1f0e_idx"),
            models.Index(fields=["status", "payment_started_at"], name="bookings_ha_status_8a2d4b_idx"),
            models.Index(fields=["checkout_id"], name="bookings_ha_checkou_3e7b91_idx"),
        ]

    def __str__(self) -> str:
        return f"Hall booking {self.booking_reference or f'#{self.pk}'} ({self.status})"

    @property
    def applicant_full_name(self) -> str:
        return f"{self.applicant_name} {self.applicant_surname}".strip()
