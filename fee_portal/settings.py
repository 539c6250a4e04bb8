import os

# ────────────────────────────────────────────────────────────────────
# Paths
# ────────────────────────────────────────────────────────────────────
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ────────────────────────────────────────────────────────────────────
# Security / Debug
# ────────────────────────────────────────────────────────────────────
# NOTE: set SECRET_KEY / DEBUG in the environment for real deployments.
SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-7q$k2v!m0x@fee-portal-change-me")
DEBUG = os.getenv("DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    h.strip() for h in os.getenv("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",")
    if h.strip()
]

CSRF_TRUSTED_ORIGINS = [
    o.strip() for o in os.getenv("CSRF_TRUSTED_ORIGINS", "http://127.0.0.1,http://localhost").split(",")
    if o.strip()
]

# ────────────────────────────────────────────────────────────────────
# Applications
# ────────────────────────────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.admin",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django.contrib.humanize",

    # Third-party
    "django_filters",
    "rest_framework",
    "rest_framework.authtoken",

    # Local apps
    "apps.corecode",
    "apps.clients",
    "apps.finance",
    "accounts",
    "dashboard",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "fee_portal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [os.path.join(BASE_DIR, "templates")],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "fee_portal.wsgi.application"
ASGI_APPLICATION = "fee_portal.asgi.application"

# ────────────────────────────────────────────────────────────────────
# Database (SQLite for dev, PostgreSQL when DB_NAME is set)
# ────────────────────────────────────────────────────────────────────
if os.getenv("DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("DB_NAME"),
            "USER": os.getenv("DB_USER", ""),
            "PASSWORD": os.getenv("DB_PASSWORD", ""),
            "HOST": os.getenv("DB_HOST", "localhost"),
            "PORT": os.getenv("DB_PORT", "5432"),
            "CONN_MAX_AGE": int(os.getenv("DB_CONN_MAX_AGE", "60")),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.path.join(BASE_DIR, "db.sqlite3"),
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ────────────────────────────────────────────────────────────────────
# Password validation
# ────────────────────────────────────────────────────────────────────
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# ────────────────────────────────────────────────────────────────────
# Static
# ────────────────────────────────────────────────────────────────────
STATIC_URL = "/static/"
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")

# ────────────────────────────────────────────────────────────────────
# Authentication
# ────────────────────────────────────────────────────────────────────
AUTH_USER_MODEL = "accounts.CustomUser"

# ────────────────────────────────────────────────────────────────────
# I18N / Time
# ────────────────────────────────────────────────────────────────────
TIME_ZONE = "Asia/Karachi"
LANGUAGE_CODE = "en-us"
USE_I18N = True
USE_TZ = True

# ────────────────────────────────────────────────────────────────────
# REST framework
# ────────────────────────────────────────────────────────────────────
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.TokenAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
    ],
    "DEFAULT_PAGINATION_CLASS": "apps.corecode.pagination.LimitOffsetEnvelope",
    "PAGE_SIZE": 20,
    "EXCEPTION_HANDLER": "apps.corecode.exceptions.api_exception_handler",
    "COERCE_DECIMAL_TO_STRING": False,
}

# ────────────────────────────────────────────────────────────────────
# Fees
# ────────────────────────────────────────────────────────────────────
FEE_CURRENCY = "PKR"
VOUCHER_NUMBER_PREFIX = os.getenv("VOUCHER_NUMBER_PREFIX", "VOC")
DEFAULT_PAYMENT_METHOD = "Cash"

# Four-milestone plan applied when a client is onboarded without one.
DEFAULT_PAYMENT_PLAN = [
    {"payment_type": "advance",                "display_order": 1, "amount": 30000},
    {"payment_type": "after_pre_registration", "display_order": 2, "amount": 10000},
    {"payment_type": "submitted_examination",  "display_order": 3, "amount": 10000},
    {"payment_type": "roll_number_slip",       "display_order": 4, "amount": 10000},
]

# ────────────────────────────────────────────────────────────────────
# Logging
# ────────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "apps":      {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "accounts":  {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "dashboard": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
