"""
Django settings for backend_challenges project.

For more information on this file, see
https://docs.djangoproject.com/en/5.0/topics/settings/
"""
import os
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-dev-key-change-me")

DEBUG = os.getenv("DJANGO_DEBUG", "False").lower() in {"1", "true", "yes"}

ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h]


# Application definition

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "challenges",
    "submissions",
    "rewards",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

ROOT_URLCONF = "backend_challenges.urls"

WSGI_APPLICATION = "backend_challenges.wsgi.application"


# Database

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True


# Logging

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.getenv("DJANGO_LOG_LEVEL", "INFO"),
    },
}


# User customizable configs

USER_CUSTOMIZABLE_CONFIGS = BASE_DIR / "user_customizable_configs"
EXECUTION_ENGINE_CONFIGS = Path(
    os.getenv("EXECUTION_ENGINE_CONFIGS", USER_CUSTOMIZABLE_CONFIGS / "execution_engine" / "engine.yaml")
)
REWARD_CONFIGS = Path(
    os.getenv("REWARD_CONFIGS", USER_CUSTOMIZABLE_CONFIGS / "rewards" / "rewards.yaml")
)
CHALLENGE_CATALOG_CONFIGS = Path(
    os.getenv("CHALLENGE_CATALOG_CONFIGS", USER_CUSTOMIZABLE_CONFIGS / "challenges" / "challenges.yaml")
)
