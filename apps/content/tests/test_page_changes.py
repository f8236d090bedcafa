"""Typed page content changes."""

import pytest

from apps.content.domain.changes import (
    ColorChange,
    ElementId,
    ImageChange,
    InvalidChangeError,
    TextChange,
    parse_change,
)
from apps.content.models import PageElement
from apps.content.services import apply_changes, get_page_elements, parse_changes

HERO = ElementId(page="homepage", key="hero-title")


def test_parse_change_builds_typed_commands():
    assert parse_change("homepage", {"type": "text", "key": "hero-title", "text": "Welcome"}) == TextChange(
        element=HERO, text="Welcome"
    )
    color = parse_change("homepage", {"type": "color", "key": "hero-title", "color": "#FFF"})
    assert isinstance(color, ColorChange)
    assert color.color == "#fff"
    image = parse_change("homepage", {"type": "image", "key": "hero-image", "image_url": "https://cdn.example.com/a.jpg"})
    assert isinstance(image, ImageChange)


@pytest.mark.parametrize("color", ["fff", "#ffff", "#12345g", "red"])
def test_colors_must_be_hex(color):
    with pytest.raises(InvalidChangeError):
        ColorChange(element=HERO, color=color)


def test_color_change_needs_a_value():
    with pytest.raises(InvalidChangeError):
        ColorChange(element=HERO)


@pytest.mark.parametrize("url", ["javascript:alert(1)", "ftp://example.com/a.png", "/media/a.png", ""])
def test_images_must_be_http_urls(url):
    with pytest.raises(InvalidChangeError):
        ImageChange(element=HERO, image_url=url)


@pytest.mark.parametrize("raw", [{"type": "font", "key": "x"}, {"type": "text", "key": "Bad Key"}, "text"])
def test_malformed_changes_are_rejected(raw):
    with pytest.raises(InvalidChangeError):
        parse_change("homepage", raw)


@pytest.mark.parametrize(
    "raw",
    [
        {"type": ["text"], "key": "hero-title", "text": "Welcome"},
        {"type": None, "key": "hero-title"},
        {"type": "text", "key": 7, "text": "Welcome"},
        {"type": "text", "key": "hero-title", "text": None},
        {"type": "text", "key": "hero-title", "text": {"en": "Welcome"}},
        {"type": "color", "key": "hero-title", "color": 5},
        {"type": "color", "key": "hero-title", "background_color": ["#fff"]},
        {"type": "image", "key": "hero-image", "image_url": None},
    ],
)
def test_wrongly_typed_values_are_rejected(raw):
    with pytest.raises(InvalidChangeError):
        parse_change("homepage", raw)


def test_null_color_counts_as_unset():
    change = parse_change("homepage", {"type": "color", "key": "hero-title", "color": None, "background_color": "#000"})

    assert change == ColorChange(element=HERO, background_color="#000")


def test_element_id_validates_page():
    with pytest.raises(InvalidChangeError):
        ElementId(page="../etc", key="hero")
    assert str(HERO) == "homepage/hero-title"


@pytest.mark.django_db
def test_apply_changes_creates_and_updates_elements():
    apply_changes([TextChange(element=HERO, text="Welcome")])

    apply_changes(parse_changes("homepage", [
        {"type": "text", "key": "hero-title", "text": "Welcome to Roberts Hall"},
        {"type": "color", "key": "hero-title", "background_color": "#112233"},
    ]))

    element = PageElement.objects.get(page="homepage", key="hero-title")
    assert element.text == "Welcome to Roberts Hall"
    assert element.background_color == "#112233"
    assert PageElement.objects.count() == 1
    assert get_page_elements("homepage")["hero-title"]["text"] == "Welcome to Roberts Hall"
    assert get_page_elements("menu") == {}
