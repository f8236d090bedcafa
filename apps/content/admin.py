from django.contrib import admin  # type: ignore

from .models import PageElement


@admin.register(PageElement)
class PageElementAdmin(admin.ModelAdmin):
    list_display = ("page", "key", "color", "background_color", "updated_by", "updated_at")
    list_filter = ("page",)
    search_fields = ("page", "key", "text")
    readonly_fields = ("created_at", "updated_at")
