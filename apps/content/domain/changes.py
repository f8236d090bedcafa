"""
Page Content Changes

Edits made in the admin page editor arrive as a batch of typed commands,
each addressed to one element of one page:

- ElementId: (page, key) pair naming an editable element
- TextChange: replace the element's text
- ColorChange: set text and/or background color
- ImageChange: point the element at a new image

Every command validates itself on construction and knows how to apply
itself to an element record.
"""

import re
from dataclasses import dataclass
from typing import Any, ClassVar, Union
from urllib.parse import urlparse

from shared.domain.value_objects import ValueObject

SLUG_PATTERN = re.compile(r'^[a-z0-9][a-z0-9_-]{0,63}$')
COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
MAX_TEXT_LENGTH = 5000


class InvalidChangeError(ValueError):
    """A change command failed validation."""


@dataclass(frozen=True)
class ElementId(ValueObject):
    page: str
    key: str

    def __post_init__(self):
        for label, value in (('page', self.page), ('element key', self.key)):
            if not isinstance(value, str) or not SLUG_PATTERN.match(value):
                raise InvalidChangeError(
                    f"Invalid {label} {value!r}: use lowercase letters, digits, '-' or '_'"
                )

    def __str__(self):
        return f"{self.page}/{self.key}"


def _check_color(value: str) -> str:
    if not isinstance(value, str) or not COLOR_PATTERN.match(value):
        raise InvalidChangeError(f"Invalid color {value!r}: expected #rgb or #rrggbb")
    return value.lower()


@dataclass(frozen=True)
class TextChange:
    kind: ClassVar[str] = 'text'

    element: ElementId
    text: str

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise InvalidChangeError(f"Text for {self.element} must be a string")
        if len(self.text) > MAX_TEXT_LENGTH:
            raise InvalidChangeError(f"Text for {self.element} is longer than {MAX_TEXT_LENGTH} characters")

    def apply(self, target: Any):
        target.text = self.text


@dataclass(frozen=True)
class ColorChange:
    kind: ClassVar[str] = 'color'

    element: ElementId
    color: str = ''
    background_color: str = ''

    def __post_init__(self):
        if not self.color and not self.background_color:
            raise InvalidChangeError(f"Color change for {self.element} sets neither color nor background")
        if self.color:
            object.__setattr__(self, 'color', _check_color(self.color))
        if self.background_color:
            object.__setattr__(self, 'background_color', _check_color(self.background_color))

    def apply(self, target: Any):
        if self.color:
            target.color = self.color
        if self.background_color:
            target.background_color = self.background_color


@dataclass(frozen=True)
class ImageChange:
    kind: ClassVar[str] = 'image'

    element: ElementId
    image_url: str

    def __post_init__(self):
        if not isinstance(self.image_url, str):
            raise InvalidChangeError(f"Image URL for {self.element} must be a string")
        parsed = urlparse(self.image_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise InvalidChangeError(f"Image URL for {self.element} must be an http(s) address")

    def apply(self, target: Any):
        target.image_url = self.image_url


ElementChange = Union[TextChange, ColorChange, ImageChange]

CHANGE_TYPES = {cls.kind: cls for cls in (TextChange, ColorChange, ImageChange)}


def _text_field(raw: dict, name: str, optional: bool = False) -> str:
    value = raw.get(name, '')
    if value is None and optional:
        return ''
    if not isinstance(value, str):
        raise InvalidChangeError(f"'{name}' must be a string")
    return value


def parse_change(page: str, raw: dict) -> ElementChange:
    """
    Build a change command from its wire form

    ``{"type": "text", "key": "hero-title", "text": "Welcome"}``
    ``{"type": "color", "key": "hero", "color": "#fff", "background_color": "#123456"}``
    ``{"type": "image", "key": "hero", "image_url": "https://..."}``
    """
    if not isinstance(raw, dict):
        raise InvalidChangeError("Each change must be an object")
    type_name = raw.get('type')
    change_type = CHANGE_TYPES.get(type_name) if isinstance(type_name, str) else None
    if change_type is None:
        raise InvalidChangeError(f"Unknown change type {type_name!r}")

    element = ElementId(page=page, key=_text_field(raw, 'key'))
    if change_type is TextChange:
        return TextChange(element=element, text=_text_field(raw, 'text'))
    if change_type is ColorChange:
        return ColorChange(
            element=element,
            color=_text_field(raw, 'color', optional=True),
            background_color=_text_field(raw, 'background_color', optional=True),
        )
    return ImageChange(element=element, image_url=_text_field(raw, 'image_url'))
