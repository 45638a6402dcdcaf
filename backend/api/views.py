import logging
import re
from uuid import uuid4

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from api.authentication import BaskitTokenAuthentication, issue_token
from api.rbac import SELECTABLE_ROLES, resolve_roles_and_permissions

logger = logging.getLogger("baskit.audit")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\- ]{5,}$")
_ROLE_CODES = {role["code"] for role in SELECTABLE_ROLES}


def build_login_user(payload: dict) -> tuple[dict | None, dict]:
    """
    Mock login: any well-formed credentials are accepted. Email logins take
    their display name from the local part; phone logins get a synthetic
    name and address.
    """
    errors: dict = {}
    method = str(payload.get("method") or "email").strip().lower()
    role = str(payload.get("role") or "distributor").strip().lower()
    if role not in _ROLE_CODES:
        errors["role"] = f"Must be one of: {', '.join(sorted(_ROLE_CODES))}."

    if method == "email":
        email = str(payload.get("email") or "").strip()
        password = payload.get("password") or ""
        if not email:
            errors["email"] = "Email is required."
        elif not _EMAIL_RE.match(email):
            errors["email"] = "Enter a valid email address."
        if not password:
            errors["password"] = "Password is required."
        name = email.split("@")[0]
    elif method == "phone":
        phone = str(payload.get("phone") or "").strip()
        if not phone:
            errors["phone"] = "Phone number is required."
        elif not _PHONE_RE.match(phone):
            errors["phone"] = "Enter a valid phone number."
        name = f"User-{phone[-4:]}"
        email = f"{phone}@phone.baskit.com"
    else:
        errors["method"] = "Must be email or phone."
        return None, errors

    if errors:
        return None, errors
    return {
        "id": str(uuid4()),
        "name": name,
        "email": email,
        "role": role,
        "is_logged_in": True,
    }, {}


@api_view(["GET"])
def health(request):
    return Response({"status": "ok"})


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def roles(request):
    return Response({"roles": SELECTABLE_ROLES})


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    user, errors = build_login_user(request.data or {})
    if errors:
        return Response({"errors": errors}, status=400)

    logger.info(
        "auth_login",
        extra={
            "event_type": "LOGIN",
            "user_id": user["id"],
            "username": user["name"],
            "role": user["role"],
            "method": str((request.data or {}).get("method") or "email").lower(),
        },
    )
    return Response({"user": user, "token": issue_token(user)}, status=200)


@api_view(["GET"])
@authentication_classes([BaskitTokenAuthentication])
@permission_classes([IsAuthenticated])
def whoami(request):
    roles_, permissions = resolve_roles_and_permissions(request, request.user)
    return Response(
        {
            "user_id": request.user.user_id,
            "username": request.user.username,
            "email": request.user.email,
            "roles": roles_,
            "permissions": sorted(permissions),
        }
    )
