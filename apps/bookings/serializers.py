"""Serializers for the hall booking form and the staff booking list."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.encryption import mask_value

from .constants import DOCUMENT_KINDS, FIRST_STEP, PAYMENT_STEP
from .models import HallBooking


class DraftChangesSerializer(serializers.Serializer):
    """
    Field edits posted with advance/save

    Only type checks happen here; the step rules produce the user-facing
    messages. ``revision`` is the revision the client last saw.
    """

    revision = serializers.IntegerField(required=False, min_value=0)

    applicant_name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    applicant_surname = serializers.CharField(required=False, allow_blank=True, max_length=100)
    applicant_address = serializers.CharField(required=False, allow_blank=True, max_length=255)
    applicant_phone = serializers.CharField(required=False, allow_blank=True, max_length=20)
    applicant_email = serializers.CharField(required=False, allow_blank=True, max_length=254)
    is_estate_resident = serializers.BooleanField(required=False)
    estate_address = serializers.CharField(required=False, allow_blank=True, max_length=255)

    event_date = serializers.DateField(required=False, allow_null=True)
    event_start_time = serializers.TimeField(required=False, allow_null=True)
    event_end_time = serializers.TimeField(required=False, allow_null=True)
    event_type = serializers.CharField(required=False, allow_blank=True, max_length=32)
    event_description = serializers.CharField(required=False, allow_blank=True)
    total_guests = serializers.IntegerField(required=False, min_value=0, max_value=1000)
    number_of_vehicles = serializers.IntegerField(required=False, min_value=0, max_value=1000)
    tables_required = serializers.IntegerField(required=False, min_value=0, max_value=1000)
    chairs_required = serializers.IntegerField(required=False, min_value=0, max_value=1000)

    bank_account_holder = serializers.CharField(required=False, allow_blank=True, max_length=150)
    bank_name = serializers.CharField(required=False, allow_blank=True, max_length=64)
    bank_branch_code = serializers.CharField(required=False, allow_blank=True, max_length=16)
    bank_account_number = serializers.CharField(required=False, allow_blank=True, max_length=32)

    will_play_music = serializers.BooleanField(required=False)
    special_requests = serializers.CharField(required=False, allow_blank=True)

    terms_page_1_initial = serializers.CharField(required=False, allow_blank=True, max_length=10)
    terms_page_2_initial = serializers.CharField(required=False, allow_blank=True, max_length=10)
    terms_page_3_initial = serializers.CharField(required=False, allow_blank=True, max_length=10)
    terms_page_4_initial = serializers.CharField(required=False, allow_blank=True, max_length=10)
    terms_accepted = serializers.BooleanField(required=False)

    def to_internal_value(self, data):  # type: ignore
        unknown = sorted(set(data) - set(self.fields)) if hasattr(data, "keys") else []
        if unknown:
            raise serializers.ValidationError({name: "Unknown or read-only field." for name in unknown})
        return super().to_internal_value(data)

    @property
    def changes(self) -> dict:
        return {k: v for k, v in self.validated_data.items() if k != "revision"}

    @property
    def expected_revision(self) -> int | None:
        return self.validated_data.get("revision")


class BookingDraftSerializer(serializers.Serializer):
    """Read-only view of a BookingDraft entity."""

    id = serializers.IntegerField(allow_null=True)
    revision = serializers.IntegerField()

    applicant_name = serializers.CharField()
    applicant_surname = serializers.CharField()
    applicant_address = serializers.CharField()
    applicant_phone = serializers.CharField()
    applicant_email = serializers.CharField()
    is_estate_resident = serializers.BooleanField()
    estate_address = serializers.CharField()

    event_date = serializers.DateField(allow_null=True)
    event_start_time = serializers.TimeField(format="%H:%M", allow_null=True)
    event_end_time = serializers.TimeField(format="%H:%M", allow_null=True)
    event_type = serializers.CharField()
    event_description = serializers.CharField()
    total_guests = serializers.IntegerField()
    number_of_vehicles = serializers.IntegerField()
    tables_required = serializers.IntegerField()
    chairs_required = serializers.IntegerField()

    bank_account_holder = serializers.CharField()
    bank_name = serializers.CharField()
    bank_branch_code = serializers.CharField()
    bank_account_number = serializers.SerializerMethodField()
    bank_proof_document_url = serializers.CharField()

    will_play_music = serializers.BooleanField()
    music_license_proof_url = serializers.CharField()
    special_requests = serializers.CharField()

    terms_page_1_initial = serializers.CharField()
    terms_page_2_initial = serializers.CharField()
    terms_page_3_initial = serializers.CharField()
    terms_page_4_initial = serializers.CharField()
    terms_accepted = serializers.BooleanField()
    terms_accepted_at = serializers.DateTimeField(allow_null=True)
    terms_version = serializers.CharField()

    rental_fee = serializers.DecimalField(max_digits=10, decimal_places=2)
    deposit_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.CharField()

    status = serializers.SerializerMethodField()
    payment_status = serializers.SerializerMethodField()
    checkout_id = serializers.CharField()
    payment_reference = serializers.CharField()
    payment_date = serializers.DateTimeField(allow_null=True)
    booking_reference = serializers.CharField()
    confirmed_at = serializers.DateTimeField(allow_null=True)

    def get_bank_account_number(self, draft) -> str:  # type: ignore
        return mask_value(draft.bank_account_number)

    def get_status(self, draft) -> str:  # type: ignore
        return draft.status.value

    def get_payment_status(self, draft) -> str:  # type: ignore
        return draft.payment_status.value


class StepSerializer(serializers.Serializer):
    step = serializers.IntegerField(min_value=FIRST_STEP, max_value=PAYMENT_STEP)


class DocumentUploadSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=sorted(DOCUMENT_KINDS))
    file = serializers.FileField()


class PdfFormSerializer(serializers.Serializer):
    """A filled-in PDF booking form; name and email default to the profile."""

    pdf = serializers.FileField()
    name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    email = serializers.EmailField(required=False, allow_blank=True)


class PaymentResultSerializer(serializers.Serializer):
    """Inline payment result: either ``id`` or ``error``."""

    id = serializers.CharField(required=False, allow_blank=True)
    error = serializers.JSONField(required=False)

    def validate(self, attrs):  # type: ignore
        if not attrs.get("id") and not attrs.get("error"):
            raise serializers.ValidationError("Provide either 'id' or 'error'.")
        return attrs


class RejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class HallBookingSerializer(serializers.ModelSerializer):
    """Staff and owner view of a stored booking."""

    applicant_full_name = serializers.CharField(read_only=True)
    bank_account_number = serializers.SerializerMethodField()

    class Meta:
        model = HallBooking
        fields = [
            "id",
            "user",
            "booking_reference",
            "status",
            "payment_status",
            "applicant_full_name",
            "applicant_email",
            "applicant_phone",
            "applicant_address",
            "estate_address",
            "event_date",
            "event_start_time",
            "event_end_time",
            "event_type",
            "event_description",
            "total_guests",
            "number_of_vehicles",
            "tables_required",
            "chairs_required",
            "bank_account_holder",
            "bank_name",
            "bank_branch_code",
            "bank_account_number",
            "bank_proof_document_url",
            "will_play_music",
            "music_license_proof_url",
            "special_requests",
            "terms_accepted_at",
            "terms_version",
            "rental_fee",
            "deposit_amount",
            "total_amount",
            "payment_reference",
            "payment_date",
            "confirmed_at",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_bank_account_number(self, obj: HallBooking) -> str:  # type: ignore
        return mask_value(obj.bank_account_number)
