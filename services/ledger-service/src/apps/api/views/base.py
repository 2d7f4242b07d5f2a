# services/ledger-service/src/apps/api/views/base.py
"""
Shared view behaviour for the ledger API.
"""

import logging

from rest_framework.permissions import IsAuthenticated

from common.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateTransitionException,
    NotFoundException,
    RecordSignedException,
    ValidationException,
)
from common.permissions import create_role_permission
from apps.core.services import (
    ConflictError,
    ForbiddenError,
    InvalidStateTransitionError,
    LedgerValidationError,
    NotFoundError,
    ReleaseSignedError,
    TokenRoleAuthorizer,
)

logger = logging.getLogger(__name__)


def translate_service_error(exc):
    """Map a ledger service error onto the shared API exceptions."""
    if isinstance(exc, NotFoundError):
        return NotFoundException(detail=str(exc))
    if isinstance(exc, InvalidStateTransitionError):
        return InvalidStateTransitionException(
            detail=str(exc),
            required_state=exc.required_state,
            current_state=exc.current_state
        )
    if isinstance(exc, ReleaseSignedError):
        return RecordSignedException(detail=str(exc))
    if isinstance(exc, ForbiddenError):
        return ForbiddenException(detail=str(exc))
    if isinstance(exc, LedgerValidationError):
        return ValidationException(detail=str(exc))
    if isinstance(exc, ConflictError):
        return ConflictException(detail=str(exc))
    return exc


class LedgerViewMixin:
    """
    Common plumbing for ledger viewsets.

    - Service errors become API exceptions for the shared handler
    - The acting user is always the authenticated token subject
    - Per-action role gates come from ``action_roles``
    """

    action_roles = {}

    def get_permissions(self):
        permissions = [IsAuthenticated()]
        roles = self.action_roles.get(self.action)
        if roles:
            permissions.append(create_role_permission(*roles)())
        return permissions

    def handle_exception(self, exc):
        return super().handle_exception(translate_service_error(exc))

    @property
    def actor_id(self):
        return self.request.user.id

    @property
    def authorizer(self):
        return TokenRoleAuthorizer(self.request.user)
