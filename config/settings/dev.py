"""Development settings for the hall booking project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts, using the
console email backend and emulating the payment gateway when no Yoco key
is configured. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Without a secret key the gateway is emulated (inline payment flow)
YOCO_EMULATE = YOCO_EMULATE or not YOCO_SECRET_KEY  # noqa: F405
