"""Serializers for page content."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.changes import InvalidChangeError
from .models import PageElement
from .services import parse_changes


class PageElementSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageElement
        fields = ["page", "key", "text", "color", "background_color", "image_url", "updated_at"]
        read_only_fields = fields


class PageChangesSerializer(serializers.Serializer):
    """A batch of typed changes for one page; the page comes from the URL."""

    changes = serializers.ListField(child=serializers.DictField(), allow_empty=False, max_length=200)

    def validate(self, attrs):  # type: ignore
        page = self.context["page"]
        try:
            attrs["commands"] = parse_changes(page, attrs["changes"])
        except InvalidChangeError as exc:
            raise serializers.ValidationError({"changes": [str(exc)]}) from exc
        return attrs
