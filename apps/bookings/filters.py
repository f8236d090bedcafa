"""FilterSet for the staff hall booking list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import HallBooking


class HallBookingFilterSet(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=HallBooking.Status.choices)
    payment_status = django_filters.ChoiceFilter(choices=HallBooking.PaymentStatus.choices)
    event_type = django_filters.CharFilter(field_name="event_type", lookup_expr="exact")
    event_date_from = django_filters.DateFilter(field_name="event_date", lookup_expr="gte")
    event_date_to = django_filters.DateFilter(field_name="event_date", lookup_expr="lte")
    reference = django_filters.CharFilter(field_name="booking_reference", lookup_expr="icontains")
    applicant = django_filters.CharFilter(method="filter_applicant")

    class Meta:
        model = HallBooking
        fields = ["status", "payment_status", "event_type"]

    def filter_applicant(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return (
            queryset.filter(applicant_name__icontains=value)
            | queryset.filter(applicant_surname__icontains=value)
            | queryset.filter(applicant_email__icontains=value)
        )
