"""
Django settings for campusboard project.

Values come from the environment (optionally a .env file in the project root).
"""
import os
from pathlib import Path

from django.utils.translation import gettext_lazy as _
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


DEBUG = env_bool('DEBUG', False)

SECRET_KEY = os.environ.get('SECRET_KEY', '')
if not SECRET_KEY:
    if DEBUG or env_bool('ALLOW_INSECURE_DEFAULTS'):
        SECRET_KEY = 'dev-insecure-secret-key-change-me-before-deploying'
    else:
        raise RuntimeError('SECRET_KEY is required. Set SECRET_KEY or enable DEBUG for local development.')

ALLOWED_HOSTS = [h.strip() for h in os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'accounts',
    'schools',
    'exams',
    'attendance',
    'notices',
    'dashboard',
    'analytics',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.locale.LocaleMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'campusboard.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.template.context_processors.i18n',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'dashboard.context_processors.menu',
            ],
        },
    },
]

WSGI_APPLICATION = 'campusboard.wsgi.application'


# Database

DATABASE_ENGINE = os.environ.get('DATABASE_ENGINE', 'sqlite').strip().lower()

if DATABASE_ENGINE in ('postgres', 'postgresql'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('POSTGRES_DB', 'campusboard'),
            'USER': os.environ.get('POSTGRES_USER', 'campusboard'),
            'PASSWORD': os.environ.get('POSTGRES_PASSWORD', ''),
            'HOST': os.environ.get('POSTGRES_HOST', 'localhost'),
            'PORT': os.environ.get('POSTGRES_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.environ.get('SQLITE_PATH', str(BASE_DIR / 'db.sqlite3')),
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Authentication

AUTH_USER_MODEL = 'accounts.User'

LOGIN_URL = 'accounts:login'
LOGIN_REDIRECT_URL = 'dashboard:home'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'accounts.validators.PasswordStrengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]


# Internationalization

LANGUAGE_CODE = os.environ.get('LANGUAGE_CODE', 'en')

LANGUAGES = [
    ('en', _('English')),
    ('es', _('Spanish')),
]

LOCALE_PATHS = [BASE_DIR / 'locale']

TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')

USE_I18N = True

USE_TZ = True


# Static and media files

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STATICFILES_DIRS = [BASE_DIR / 'static']

MEDIA_URL = 'media/'
MEDIA_ROOT = BASE_DIR / 'media'


# Logging

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'accounts': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'schools': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'exams': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'attendance': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'notices': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'dashboard': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'analytics': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}


# Domain settings

CAMPUSBOARD = {
    'PAGE_SIZE': 10,
    'PASS_MARK': 60,
    'MAX_EXAM_HOURS': 4,
    'MIN_ASSIGNMENT_DAYS': 1,
    'MAX_ASSIGNMENT_DAYS': 30,
    'DEFAULT_STUDENT_PASSWORD': os.environ.get('DEFAULT_STUDENT_PASSWORD', 'Student2024'),
}
