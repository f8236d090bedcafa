"""Reading and editing page content."""

from __future__ import annotations

import logging
from typing import Iterable

from django.db import transaction  # type: ignore

from .domain.changes import ElementChange, parse_change
from .models import PageElement

logger = logging.getLogger(__name__)


def get_page_elements(page: str) -> dict[str, dict]:
    """Element map for a page, keyed by element key."""
    return {element.key: element.as_dict() for element in PageElement.objects.filter(page=page)}


def parse_changes(page: str, raw_changes: Iterable[dict]) -> list[ElementChange]:
    """Parse a whole batch first so one bad entry rejects all of it."""
    return [parse_change(page, raw) for raw in raw_changes]


@transaction.atomic
def apply_changes(changes: Iterable[ElementChange], user=None) -> list[PageElement]:
    """
    Apply a batch of change commands in one transaction

    Elements that do not exist yet are created. Several changes to the same
    element are applied in order.
    """
    touched: dict[tuple[str, str], PageElement] = {}
    for change in changes:
        element_id = (change.element.page, change.element.key)
        element = touched.get(element_id)
        if element is None:
            element, _created = PageElement.objects.select_for_update().get_or_create(
                page=change.element.page,
                key=change.element.key,
            )
            touched[element_id] = element
        change.apply(element)

    for element in touched.values():
        element.updated_by = user
        element.save()

    logger.info(
        f"Applied page content changes to {len(touched)} element(s)"
        f" by {getattr(user, 'pk', None)}"
    )
    return list(touched.values())
