"""Admin-editable page elements."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PageElement(models.Model):
    """Current text, colors and image of one editable element on a page."""

    page = models.SlugField(max_length=64)
    key = models.SlugField(max_length=64)
    text = models.TextField(blank=True)
    color = models.CharField(max_length=7, blank=True)
    background_color = models.CharField(max_length=7, blank=True)
    image_url = models.URLField(max_length=500, blank=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="page_edits",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Page element")
        verbose_name_plural = _("Page elements")
        ordering = ["page", "key"]
        constraints = [
            models.UniqueConstraint(fields=["page", "key"], name="content_unique_page_element"),
        ]

    def __str__(self) -> str:
        return f"{self.page}/{self.key}"

    def as_dict(self) -> dict:
        return {
            "text": self.text,
            "color": self.color,
            "background_color": self.background_color,
            "image_url": self.image_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
