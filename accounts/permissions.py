# backend/accounts/permissions.py
from rest_framework.permissions import BasePermission

from .models import has_min_access


class HasMinAccessLevel(BasePermission):
    """
    Usage:
        permission_classes = [HasMinAccessLevel.with_level("admin")]
    """

    required_level = None
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return has_min_access(getattr(user, "access_level", None), self.required_level)

    @classmethod
    def with_level(cls, level: str):
        class _Perm(cls):
            required_level = level
        return _Perm


IsCMSAdmin = HasMinAccessLevel.with_level("admin")
