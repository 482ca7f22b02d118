"""Settings for the test suite: in-memory sqlite and a fast hasher."""
import os
import tempfile

os.environ.setdefault('ALLOW_INSECURE_DEFAULTS', '1')

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

MEDIA_ROOT = tempfile.mkdtemp(prefix='campusboard-media-')

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

LANGUAGE_CODE = 'en'
TIME_ZONE = 'UTC'
