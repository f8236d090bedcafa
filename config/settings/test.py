"""Test settings.

In-memory SQLite, eager Celery, locmem email and plain static storage so
the test suite runs without Redis, SMTP or collected static files.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

SITE_URL = 'http://testserver'
YOCO_SECRET_KEY = 'sk_test_secret'
YOCO_WEBHOOK_SECRET = 'whsec_test'
YOCO_EMULATE = False

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'hall-booking-payment': '1000/minute',
        'hall-booking-pdf-form': '3/hour',
    },
}
