"""
Encryption utilities

Symmetric (Fernet) encryption for sensitive values stored at rest, such as
the bank account numbers captured by the hall booking form.
"""

import base64
import hashlib

from cryptography.fernet import Fernet
from django.conf import settings


def get_fernet() -> Fernet:
    """
    Build a Fernet instance from ``settings.ENCRYPTION_KEY``

    Any passphrase is accepted: it is stretched with SHA-256 into the
    32-byte urlsafe key Fernet expects.
    """
    key = getattr(settings, 'ENCRYPTION_KEY', None)
    if not key:
        raise ValueError("ENCRYPTION_KEY not configured in settings")

    if isinstance(key, str):
        key = key.encode()
    return Fernet(base64.urlsafe_b64encode(hashlib.sha256(key).digest()))


def encrypt_string(plaintext: str) -> str:
    if not plaintext:
        return ''
    return get_fernet().encrypt(plaintext.encode()).decode()


def decrypt_string(token: str) -> str:
    if not token:
        return ''
    return get_fernet().decrypt(token.encode()).decode()


def mask_value(value: str, visible: int = 4) -> str:
    """Mask all but the last ``visible`` characters, e.g. ``****6789``."""
    if not value:
        return ''
    if len(value) <= visible:
        return '*' * len(value)
    return '*' * (len(value) - visible) + value[-visible:]
