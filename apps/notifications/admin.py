"""Admin registrations for notifications."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "title", "is_read", "created_at")
    list_filter = ("is_read",)
    search_fields = ("user__email", "title")
