# shared/common/authentication.py
"""
Bearer token authentication for ledger actors.

Every ledger write records the acting user's id, so a token is only accepted
when its subject is a UUID. Role claims are narrowed to the roles the ledger
knows about; anything else in the claim is ignored.
"""

import jwt
import uuid
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple, Iterable, FrozenSet
from django.conf import settings
from rest_framework import authentication, exceptions
from rest_framework.request import Request

from .constants import UserRole

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ['exp', 'iat', 'sub', 'iss']


def _jwt_setting(name: str) -> Any:
    return settings.JWT_SETTINGS[name]


def _role_value(role) -> str:
    return getattr(role, 'value', role)


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Authenticates `Authorization: Bearer <token>` headers.

    Requests without the header fall through to the next authenticator (and
    end up anonymous); malformed or unverifiable tokens fail with 401.
    """

    keyword = 'Bearer'

    def authenticate(self, request: Request) -> Optional[Tuple['TokenUser', Dict]]:
        header = authentication.get_authorization_header(request)
        if not header:
            return None

        try:
            scheme, _, token = header.decode('utf-8').partition(' ')
        except UnicodeDecodeError:
            raise exceptions.AuthenticationFailed('Invalid token header encoding')

        if scheme.lower() != self.keyword.lower():
            return None

        token = token.strip()
        if not token or ' ' in token:
            raise exceptions.AuthenticationFailed('Invalid token header format')

        payload = self.decode(token)
        return (TokenUser.from_payload(payload), payload)

    def decode(self, token: str) -> Dict:
        try:
            return jwt.decode(
                token,
                _jwt_setting('VERIFYING_KEY'),
                algorithms=[_jwt_setting('ALGORITHM')],
                issuer=_jwt_setting('ISSUER'),
                options={'require': REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token')

    def authenticate_header(self, request: Request) -> str:
        return f'{self.keyword} realm="ledger"'


class TokenUser:
    """
    The acting user behind a request, built from verified token claims.

    `id` is the canonical string form of the subject UUID; services store it
    in the *_by columns of ledger records.
    """

    is_active = True
    is_authenticated = True
    is_anonymous = False

    def __init__(self, user_id: uuid.UUID, roles: Iterable[str] = (), email: str = None):
        self.uuid = user_id
        self.id = str(user_id)
        self.pk = self.id
        self.email = email
        self.roles: FrozenSet[str] = frozenset(roles)

    @classmethod
    def from_payload(cls, payload: Dict) -> 'TokenUser':
        try:
            user_id = uuid.UUID(str(payload['sub']))
        except ValueError:
            raise exceptions.AuthenticationFailed('Token subject is not a valid user id')

        claimed = payload.get('roles') or []
        if isinstance(claimed, str):
            claimed = [claimed]

        known = {role.value for role in UserRole}
        roles = [role for role in claimed if role in known]
        if len(roles) != len(claimed):
            logger.debug(f"Ignoring unknown roles for {user_id}: {set(claimed) - known}")

        return cls(user_id, roles, email=payload.get('email'))

    def __str__(self) -> str:
        return f"TokenUser({self.email or self.id})"

    def has_role(self, role) -> bool:
        return _role_value(role) in self.roles

    def has_any_role(self, roles: Iterable) -> bool:
        return any(self.has_role(role) for role in roles)


def issue_access_token(user_id, roles: Iterable = (), email: str = None, **extra_claims) -> str:
    """
    Sign an access token with the configured key.

    Production tokens come from the identity provider; this produces the same
    claim set for local tooling and tests.
    """
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'roles': [_role_value(role) for role in roles],
        'iat': now,
        'exp': now + _jwt_setting('ACCESS_TOKEN_LIFETIME'),
        'iss': _jwt_setting('ISSUER'),
        **extra_claims,
    }
    if email:
        payload['email'] = email

    return jwt.encode(payload, _jwt_setting('SIGNING_KEY'), algorithm=_jwt_setting('ALGORITHM'))
