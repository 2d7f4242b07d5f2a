"""
Development settings for Ledger Service
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

# CORS - Allow all in development
CORS_ALLOW_ALL_ORIGINS = True

LOGGING['root']['level'] = 'DEBUG'

# Disable throttling in development
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
