import datetime
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import shared.infrastructure.fields


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="HallBooking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("revision", models.PositiveIntegerField(default=0)),
                ("applicant_name", models.CharField(blank=True, max_length=100)),
                ("applicant_surname", models.CharField(blank=True, max_length=100)),
                ("applicant_address", models.CharField(blank=True, max_length=255)),
                ("applicant_phone", models.CharField(blank=True, max_length=20)),
                ("applicant_email", models.EmailField(blank=True, max_length=254)),
                ("is_estate_resident", models.BooleanField(default=True)),
                ("estate_address", models.CharField(blank=True, max_length=255)),
                ("event_date", models.DateField(blank=True, null=True)),
                ("event_start_time", models.TimeField(blank=True, default=datetime.time(10, 0), null=True)),
                ("event_end_time", models.TimeField(blank=True, default=datetime.time(22, 0), null=True)),
                ("event_type", models.CharField(blank=True, choices=[("birthday", "Birthday Party"), ("wedding", "Wedding / Reception"), ("anniversary", "Anniversary"), ("corporate", "Corporate Event"), ("conference", "Conference / Seminar"), ("community", "Community Event"), ("funeral", "Funeral / Memorial Service"), ("other", "Other Event")], max_length=32)),
                ("event_description", models.TextField(blank=True)),
                ("total_guests", models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(50)])),
                ("number_of_vehicles", models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(30)])),
                ("tables_required", models.PositiveSmallIntegerField(default=0)),
                ("chairs_required", models.PositiveSmallIntegerField(default=0)),
                ("bank_account_holder", models.CharField(blank=True, max_length=150)),
                ("bank_name", models.CharField(blank=True, max_length=64)),
                ("bank_branch_code", models.CharField(blank=True, max_length=16)),
                ("bank_account_number", shared.infrastructure.fields.EncryptedCharField(blank=True, max_length=32)),
                ("bank_proof_document_url", models.CharField(blank=True, max_length=500)),
                ("will_play_music", models.BooleanField(default=False)),
                ("music_license_proof_url", models.CharField(blank=True, max_length=500)),
                ("special_requests", models.TextField(blank=True)),
                ("terms_page_1_initial", models.CharField(blank=True, max_length=10)),
                ("terms_page_2_initial", models.CharField(blank=True, max_length=10)),
                ("terms_page_3_initial", models.CharField(blank=True, max_length=10)),
                ("terms_page_4_initial", models.CharField(blank=True, max_length=10)),
                ("terms_accepted", models.BooleanField(default=False)),
                ("terms_accepted_at", models.DateTimeField(blank=True, null=True)),
                ("terms_version", models.CharField(default="2025-01", max_length=16)),
                ("rental_fee", models.DecimalField(decimal_places=2, default=Decimal("1500.00"), max_digits=10)),
                ("deposit_amount", models.DecimalField(decimal_places=2, default=Decimal("1000.00"), max_digits=10)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("2500.00"), max_digits=10)),
                ("currency", models.CharField(default="ZAR", max_length=3)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("payment_processing", "Payment processing"), ("confirmed", "Confirmed"), ("rejected", "Rejected")], default="draft", max_length=32)),
                ("payment_status", models.CharField(choices=[("pending", "Pending"), ("paid", "Paid"), ("failed", "Failed")], default="pending", max_length=16)),
                ("checkout_id", models.CharField(blank=True, max_length=100)),
                ("payment_started_at", models.DateTimeField(blank=True, null=True)),
                ("payment_reference", models.CharField(blank=True, max_length=100)),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("booking_reference", models.CharField(blank=True, max_length=20)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="hall_bookings", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Hall booking",
                "verbose_name_plural": "Hall bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="bookings_ha_user_id_5c1f0e_idx"),
                    models.Index(fields=["status", "payment_started_at"], name="bookings_ha_status_8a2d4b_idx"),
                    models.Index(fields=["checkout_id"], name="bookings_ha_checkou_3e7b91_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("booking_reference", ""), _negated=True), fields=("booking_reference",), name="hall_booking_unique_reference"),
                ],
            },
        ),
    ]
