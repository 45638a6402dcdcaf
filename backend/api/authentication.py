import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from jwt import InvalidTokenError
from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = logging.getLogger(__name__)

@dataclass
class Principal:
    user_id: Optional[str]
    username: Optional[str]
    roles: list[str]
    email: Optional[str] = None
    permissions: list[str] = field(default_factory=list)
    is_authenticated: bool = True


def issue_token(user: dict) -> str:
    """Sign a session token for a mock-login user record."""
    now = datetime.now(timezone.utc)
    payload = {
        "iss": settings.AUTH_ISSUER,
        "sub": str(user["id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "roles": [str(user.get("role") or "").upper()],
        "iat": now,
        "exp": now + timedelta(minutes=settings.AUTH_TOKEN_TTL_MINUTES or 480),
    }
    return jwt.encode(payload, settings.AUTH_SIGNING_KEY, algorithm=settings.AUTH_ALGORITHMS[0])


def _verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_SIGNING_KEY,
            algorithms=settings.AUTH_ALGORITHMS,
            issuer=settings.AUTH_ISSUER or None,
            options={"verify_iss": bool(settings.AUTH_ISSUER), "require": ["exp", "sub"]},
        )
    except InvalidTokenError as exc:
        logger.warning("JWT verification failed: %s", exc)
        raise AuthenticationFailed("Invalid bearer token.") from exc
    if not isinstance(payload, dict):
        raise AuthenticationFailed("Invalid JWT payload.")
    return payload


def _parse_roles(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(role) for role in value if str(role)]
    if isinstance(value, str):
        if "," in value:
            return [role.strip() for role in value.split(",") if role.strip()]
        return [value] if value else []
    return [str(value)]


class BaskitTokenAuthentication(BaseAuthentication):
    """
    Bearer-token auth for tokens minted by the mock login endpoint.
    A dev principal can be injected through DEV_AUTH_* settings.
    """

    def authenticate(self, request) -> Optional[Tuple[Principal, None]]:
        if settings.DEV_AUTH_ENABLED:
            principal = Principal(
                user_id=str(settings.DEV_AUTH_USER_ID),
                username=str(settings.DEV_AUTH_USER_ID),
                roles=list(settings.DEV_AUTH_ROLES),
                permissions=list(settings.DEV_AUTH_PERMISSIONS),
            )
            return principal, None

        if not settings.AUTH_ENABLED:
            return None

        auth_header = request.META.get("HTTP_AUTHORIZATION", "")
        if not auth_header.startswith("Bearer "):
            raise AuthenticationFailed("Missing bearer token.")

        token = auth_header.replace("Bearer ", "", 1).strip()
        if not token:
            raise AuthenticationFailed("Missing bearer token.")

        payload = _verify_token(token)
        principal = Principal(
            user_id=str(payload["sub"]),
            username=payload.get("name"),
            email=payload.get("email"),
            roles=_parse_roles(payload.get("roles")),
        )
        return principal, None

    def authenticate_header(self, request) -> str:
        return "Bearer"
