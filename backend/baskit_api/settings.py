import os
import sys
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


def _load_env_file(path: Path) -> None:
    """
    Lightweight .env loader so local overrides live in one place without an
    extra dependency.
    """
    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.lower().startswith("export "):
            key = key[7:].strip()
        if not key:
            continue
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


def _get_csv_env(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name} value: {raw!r}") from exc


def _get_int_env(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name} value: {raw!r}") from exc


_load_env_file(BASE_DIR / ".env")

RUNNING_TESTS = (len(sys.argv) > 1 and sys.argv[1] == "test") or "pytest" in sys.modules

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = _get_csv_env("DJANGO_ALLOWED_HOSTS", ["*"])

if not DEBUG and not RUNNING_TESTS:
    if SECRET_KEY == "dev-only-insecure-key":
        raise RuntimeError("DEBUG is False but DJANGO_SECRET_KEY is still the dev default.")
    if not ALLOWED_HOSTS or "*" in ALLOWED_HOSTS:
        raise RuntimeError("DEBUG is False but DJANGO_ALLOWED_HOSTS is empty or contains '*'.")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "api",
    "sourcing",
    "marketplace",
    "partner",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "baskit_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    }
]

WSGI_APPLICATION = "baskit_api.wsgi.application"

# Reference data is fixture-backed; the database only serves Django internals.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DJANGO_SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "Asia/Jakarta")
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
}

# AuthN/AuthZ configuration (env-driven).
# Off by default. /auth/login/ always issues a token, but bearer tokens are
# only read when AUTH_ENABLED=1; otherwise use the DEV_AUTH_* principal.
AUTH_ENABLED = os.getenv("AUTH_ENABLED", "0") == "1"
AUTH_ISSUER = os.getenv("AUTH_ISSUER", "baskit")
AUTH_SIGNING_KEY = os.getenv("AUTH_SIGNING_KEY", SECRET_KEY)
AUTH_ALGORITHMS = _get_csv_env("AUTH_ALGORITHMS", ["HS256"])
AUTH_TOKEN_TTL_MINUTES = _get_int_env("AUTH_TOKEN_TTL_MINUTES", 480)

if AUTH_ENABLED:
    missing = []
    if not AUTH_ISSUER:
        missing.append("AUTH_ISSUER")
    if not AUTH_SIGNING_KEY:
        missing.append("AUTH_SIGNING_KEY")
    if not AUTH_ALGORITHMS:
        missing.append("AUTH_ALGORITHMS")
    if missing:
        raise RuntimeError(
            "AUTH_ENABLED is true but required settings are missing: "
            + ", ".join(missing)
        )

DEV_AUTH_ENABLED = os.getenv("DEV_AUTH_ENABLED", "0") == "1"
DEV_AUTH_USER_ID = os.getenv("DEV_AUTH_USER_ID", "dev-user")
DEV_AUTH_ROLES = _get_csv_env("DEV_AUTH_ROLES", ["DISTRIBUTOR"])
DEV_AUTH_PERMISSIONS = _get_csv_env("DEV_AUTH_PERMISSIONS", [])

# JSON dev store for purchase orders, shortlists and marketplace activity.
ORDER_STORE_ENABLED = os.getenv("ORDER_STORE_ENABLED", "1") == "1"
ORDER_STORE_PATH = os.getenv(
    "ORDER_STORE_PATH", str(BASE_DIR / ".local" / "baskit_store.json")
)

# Purchase order defaults.
PO_TAX_RATE = _get_float_env("PO_TAX_RATE", 0.11)
PO_DELIVERY_DAYS = _get_int_env("PO_DELIVERY_DAYS", 3)

LOYALTY_STARTING_POINTS = _get_int_env("LOYALTY_STARTING_POINTS", 0)
