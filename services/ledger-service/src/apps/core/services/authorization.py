# services/ledger-service/src/apps/core/services/authorization.py
"""
Authorization

Role checks injected into the ledger services. A service never inspects
the request; it asks its authorizer whether an actor holds a role.
"""

import uuid
import logging
from typing import Dict, Iterable, Protocol, Union

from common.constants import UserRole

logger = logging.getLogger(__name__)

RoleLike = Union[UserRole, str]


def _role_value(role: RoleLike) -> str:
    return role.value if isinstance(role, UserRole) else str(role)


class Authorizer(Protocol):
    """Answers role questions about an actor."""

    def has_role(self, actor_id: uuid.UUID, role: RoleLike) -> bool:
        ...


class TokenRoleAuthorizer:
    """
    Roles from the authenticated request user.

    Only answers for that user's own id; any other actor holds no roles.
    """

    def __init__(self, user):
        self.user = user

    def has_role(self, actor_id: uuid.UUID, role: RoleLike) -> bool:
        user_id = getattr(self.user, 'id', None)
        if user_id is None or str(user_id) != str(actor_id):
            return False
        return self.user.has_role(_role_value(role))


class StaticRoleAuthorizer:
    """Fixed actor to roles table."""

    def __init__(self, mapping: Dict[Union[uuid.UUID, str], Iterable[RoleLike]] = None):
        self.mapping = {
            str(actor_id): {_role_value(role) for role in roles}
            for actor_id, roles in (mapping or {}).items()
        }

    def grant(self, actor_id: uuid.UUID, *roles: RoleLike) -> None:
        self.mapping.setdefault(str(actor_id), set()).update(
            _role_value(role) for role in roles
        )

    def has_role(self, actor_id: uuid.UUID, role: RoleLike) -> bool:
        return _role_value(role) in self.mapping.get(str(actor_id), set())


class DenyAllAuthorizer:
    """Grants nothing."""

    def has_role(self, actor_id: uuid.UUID, role: RoleLike) -> bool:
        return False


def has_any_role(authorizer: Authorizer, actor_id: uuid.UUID, roles: Iterable[RoleLike]) -> bool:
    return any(authorizer.has_role(actor_id, role) for role in roles)


def require_any_role(
    authorizer: Authorizer,
    actor_id: uuid.UUID,
    roles: Iterable[RoleLike],
    action: str
) -> None:
    """Raise ForbiddenError unless the actor holds one of the roles."""
    roles = list(roles)
    if has_any_role(authorizer, actor_id, roles):
        return

    required = ', '.join(_role_value(role) for role in roles)
    logger.warning(f"Actor {actor_id} denied {action}: requires one of [{required}]")

    from . import ForbiddenError
    raise ForbiddenError(f"{action} requires one of the roles: {required}")
