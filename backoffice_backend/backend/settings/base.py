"""
PATH: backend/settings/base.py

BASE SETTINGS (shared by dev + prod + test)

- Env is read through django-environ (.env in the project dir, then repo root)
- Database: DATABASE_URL, or a MySQL driver DSN in MYSQL_DSN
  ("user:pass@tcp(host:3306)/db?parseTime=true")
- Bearer tokens: SimpleJWT HS256 signed with JWT_SECRET, JWT_TTL_HOURS lifetime
- AUTH_BYPASS injects an admin identity (dev only; prod refuses it)
- Every API error body is {"error", "reason", "detail"}
"""

from __future__ import annotations

import re
from datetime import timedelta
from pathlib import Path
from urllib.parse import quote

import environ
from corsheaders.defaults import default_headers, default_methods
from django.core.exceptions import ImproperlyConfigured

# -----------------------------------------
# BASE DIRECTORY
# -----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# -----------------------------------------
# ENV (django-environ)
# -----------------------------------------
env = environ.Env(
    DEBUG=(bool, True),
    SECRET_KEY=(str, ""),
    TIME_ZONE=(str, "Asia/Shanghai"),
    ALLOWED_HOSTS=(list, ["localhost", "127.0.0.1"]),
    CORS_ALLOWED_ORIGINS=(list, ["http://localhost:5173"]),
    CSRF_TRUSTED_ORIGINS=(list, ["http://localhost:5173"]),
    DATABASE_URL=(str, ""),
    MYSQL_DSN=(str, ""),
    PORT=(int, 8080),
    # Bearer tokens
    JWT_SECRET=(str, ""),
    JWT_TTL_HOURS=(int, 168),
    # Dev switches
    AUTH_BYPASS=(bool, False),
    DEV_SEED_ENABLED=(bool, False),
    # Domain toggles
    MV_REFRESH_INTERVAL=(int, 600),
    STRICT_PRODUCT_SUPPLIER=(bool, False),
    # Throttling
    THROTTLE_ANON_RATE=(str, "60/min"),
    THROTTLE_USER_RATE=(str, "600/min"),
    # Logging
    LOG_LEVEL=(str, "INFO"),
)

# -----------------------------------------
# LOAD .env
# -----------------------------------------
env_file_1 = BASE_DIR / ".env"
env_file_2 = BASE_DIR.parent / ".env"

if env_file_1.exists():
    env.read_env(str(env_file_1))
elif env_file_2.exists():
    env.read_env(str(env_file_2))

# -----------------------------------------
# CORE SECURITY
# -----------------------------------------
SECRET_KEY = (env("SECRET_KEY") or "dev-insecure-change-me").strip()
DEBUG = env.bool("DEBUG")
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS")

# -----------------------------------------
# I18N / TZ
# -----------------------------------------
# Due dates and "server-local" timestamps are computed in TIME_ZONE.
LANGUAGE_CODE = "en-us"
TIME_ZONE = (env("TIME_ZONE") or "Asia/Shanghai").strip()
USE_I18N = True
USE_TZ = True

# -----------------------------------------
# AUTH USER MODEL (custom)
# -----------------------------------------
AUTH_USER_MODEL = "users.User"

# -----------------------------------------
# INSTALLED APPS
# -----------------------------------------
INSTALLED_APPS = [
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "rest_framework_simplejwt",
    "drf_spectacular",
    "django_filters",
    "core",
    "bases",
    "users",
    "suppliers",
    "products",
    "purchases",
    "payables",
    "expenses",
    "analytics",
]

# -----------------------------------------
# MIDDLEWARE
# -----------------------------------------
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "backend.urls"
WSGI_APPLICATION = "backend.wsgi.application"
ASGI_APPLICATION = "backend.asgi.application"

# Routes are slash-less (/api/payable/list); never redirect POST/PUT bodies.
APPEND_SLASH = False

# -----------------------------------------
# TEMPLATES (required for Django admin)
# -----------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

# -----------------------------------------
# DATABASE
# -----------------------------------------
_MYSQL_DSN_RE = re.compile(
    r"^(?P<user>[^:@]*)(?::(?P<password>[^@]*))?@(?:tcp\((?P<host>[^)]*)\))?/(?P<name>[^?]+)"
)


def mysql_dsn_to_url(dsn: str) -> str:
    """Convert a Go-driver MySQL DSN into a django-environ database URL."""
    m = _MYSQL_DSN_RE.match(dsn.strip())
    if not m:
        raise ImproperlyConfigured("MYSQL_DSN must look like user:pass@tcp(host:port)/dbname")

    user = quote(m.group("user") or "", safe="")
    password = quote(m.group("password") or "", safe="")
    host = m.group("host") or "127.0.0.1:3306"
    auth = f"{user}:{password}" if password else user
    return f"mysql://{auth}@{host}/{m.group('name')}?charset=utf8mb4"


def database_url() -> str:
    url = (env("DATABASE_URL") or "").strip()
    if url:
        return url
    dsn = (env("MYSQL_DSN") or "").strip()
    if dsn:
        return mysql_dsn_to_url(dsn)
    return f"sqlite:///{BASE_DIR / 'db.sqlite3'}"


DATABASES = {
    "default": env.db_url_config(database_url()),
}

# -----------------------------------------
# HTTP
# -----------------------------------------
PORT = env.int("PORT")

# -----------------------------------------
# REST FRAMEWORK
# -----------------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "users.authentication.AuthBypassAuthentication",
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_FILTER_BACKENDS": ("django_filters.rest_framework.DjangoFilterBackend",),
    "DEFAULT_PAGINATION_CLASS": "core.pagination.RecordsPagination",
    "PAGE_SIZE": 20,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "core.api.errors.exception_handler",
    "DATETIME_FORMAT": "%Y-%m-%d %H:%M:%S",
    "DATE_FORMAT": "%Y-%m-%d",
    "COERCE_DECIMAL_TO_STRING": True,
    "DEFAULT_THROTTLE_CLASSES": (
        "rest_framework.throttling.AnonRateThrottle",
        "rest_framework.throttling.UserRateThrottle",
    ),
    "DEFAULT_THROTTLE_RATES": {
        "anon": env("THROTTLE_ANON_RATE"),
        "user": env("THROTTLE_USER_RATE"),
    },
}

# -----------------------------------------
# SIMPLE JWT
# -----------------------------------------
JWT_SECRET = (env("JWT_SECRET") or "").strip()
JWT_TTL_HOURS = env.int("JWT_TTL_HOURS")

SIMPLE_JWT = {
    "ALGORITHM": "HS256",
    "SIGNING_KEY": JWT_SECRET or SECRET_KEY,
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=JWT_TTL_HOURS),
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_FIELD": "id",
    "USER_ID_CLAIM": "uid",
    "AUTH_TOKEN_CLASSES": ("users.tokens.BackofficeAccessToken",),
    "UPDATE_LAST_LOGIN": False,
}

# -----------------------------------------
# DEV SWITCHES
# -----------------------------------------
AUTH_BYPASS = env.bool("AUTH_BYPASS")
DEV_SEED_ENABLED = env.bool("DEV_SEED_ENABLED")

# -----------------------------------------
# DOMAIN TOGGLES
# -----------------------------------------
# Seconds between rollup refresh passes (refresh_rollups --loop).
MV_REFRESH_INTERVAL = env.int("MV_REFRESH_INTERVAL")

# Reject purchase lines whose product belongs to another supplier.
STRICT_PRODUCT_SUPPLIER = env.bool("STRICT_PRODUCT_SUPPLIER")

# -----------------------------------------
# CORS / CSRF
# -----------------------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS")
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = list(default_methods)
CORS_ALLOW_HEADERS = [*default_headers, "idempotency-key"]

CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS")

# -----------------------------------------
# STATIC FILES
# -----------------------------------------
STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# LOGGING
# -----------------------------------------
LOG_LEVEL = (env("LOG_LEVEL") or "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django.db.backends": {"level": "WARNING"},
    },
}

# -----------------------------------------
# SWAGGER
# -----------------------------------------
SPECTACULAR_SETTINGS = {
    "TITLE": "Back-office API",
    "DESCRIPTION": "Purchases, supplier payables, payments, expenses and monthly analytics",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}
