"""
Django settings for the carpentry quotation (cotizador) project.
Clients, materials catalog, margins and quotations for residential furniture.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-dev-key-change-in-production"
)

DEBUG = os.environ.get("DEBUG", "true").lower() in ("1", "true", "yes")

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

# =============================================================================
# Apps
# =============================================================================

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "common",
    "clients",
    "catalog",
    "pricing",
    "quotes",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# =============================================================================
# Database
# =============================================================================

_db_engine = os.environ.get("DB_ENGINE", "sqlite")
if _db_engine == "mysql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.mysql",
            "NAME": os.environ.get("DB_NAME", "cotizador"),
            "USER": os.environ.get("DB_USER", "cotizador_user"),
            "PASSWORD": os.environ.get("DB_PASSWORD", ""),
            "HOST": os.environ.get("DB_HOST", "127.0.0.1"),
            "PORT": os.environ.get("DB_PORT", "3306"),
            "OPTIONS": {
                "charset": "utf8mb4",
                "init_command": "SET sql_mode='STRICT_TRANS_TABLES'",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

# =============================================================================
# i18n
# =============================================================================

LANGUAGE_CODE = "es-mx"
TIME_ZONE = "America/Mexico_City"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# =============================================================================
# Quotations (cotizador)
# =============================================================================

COTIZADOR = {
    # IVA in Mexico, as a percentage
    "TAX_RATE": os.environ.get("COTIZADOR_TAX_RATE", "16"),
    "VALIDITY_DAYS": int(os.environ.get("COTIZADOR_VALIDITY_DAYS", "15")),
    # Fraction of the total required up front (anticipo)
    "ADVANCE_PAYMENT_RATE": os.environ.get("COTIZADOR_ADVANCE_PAYMENT_RATE", "0.70"),
    "DEFAULT_TERMS": "\n".join(
        [
            "1. Los precios están sujetos a cambios sin previo aviso.",
            "2. Esta cotización tiene una validez de 15 días.",
            "3. Los tiempos de entrega se confirmarán al momento de la orden.",
            "4. Se requiere un anticipo del 70% para iniciar el proyecto.",
            "5. El precio no incluye instalación, a menos que se indique expresamente.",
        ]
    ),
    "COMPANY_INFO": {
        "name": os.environ.get("COMPANY_NAME", "GRUPO UCMV S.A. de C.V."),
        "address": "Av. Principal #123, Col. Centro, Ciudad de México, CP 01000",
        "phone": "+52 55 1234 5678",
        "email": "contacto@grupoucmv.com",
        "website": "www.grupoucmv.com",
        "rfc": "UCM123456ABC",
    },
}

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "pricing": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "quotes": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "catalog": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
