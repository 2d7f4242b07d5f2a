# shared/common/permissions.py
"""
Role gates for ledger endpoints.

These only decide whether a caller may reach an endpoint at all. The ledger
services repeat the check against their authorizer, so a gate here is never
the sole guard on a write.
"""

import logging
from typing import FrozenSet
from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.views import APIView

logger = logging.getLogger(__name__)


class HasAnyRole(permissions.BasePermission):
    """Allow callers holding at least one of `allowed_roles`."""

    allowed_roles: FrozenSet[str] = frozenset()
    message = 'Your role does not permit this operation.'

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False

        roles = set(getattr(user, 'roles', ()))
        if roles & self.allowed_roles:
            return True

        logger.info(
            f"Role gate refused {getattr(user, 'id', None)} on "
            f"{view.__class__.__name__}.{getattr(view, 'action', None)}: "
            f"needs one of {sorted(self.allowed_roles)}"
        )
        return False


def create_role_permission(*roles) -> type:
    """
    Build a HasAnyRole subclass for the given roles.

    Usage:
        permission_classes = [create_role_permission(UserRole.INSPECTOR)]
    """
    allowed = frozenset(getattr(role, 'value', role) for role in roles)
    name = 'Requires' + ''.join(value.title() for value in sorted(allowed))
    return type(name, (HasAnyRole,), {'allowed_roles': allowed})
