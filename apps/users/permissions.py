"""Permission classes for hall staff endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsHallManager(permissions.BasePermission):
    """
    Permission class that only allows hall staff to access.

    Hall staff are users with role 'staff' or 'admin', plus Django staff
    and superusers.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False):
            return True
        return bool(getattr(user, "is_hall_manager", False))


class IsHallManagerOrReadOnly(IsHallManager):
    """Anyone may read; writes need hall staff."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().has_permission(request, view)
