"""
Test settings for Ledger Service
"""

from .base import *

DEBUG = False

SECRET_KEY = 'ledger-test-secret-key-not-for-production-use'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

STORAGES['staticfiles'] = {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

JWT_SETTINGS['SIGNING_KEY'] = SECRET_KEY
JWT_SETTINGS['VERIFYING_KEY'] = SECRET_KEY

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

LOGGING['loggers']['apps']['level'] = 'INFO'
