"""
Model fields for sensitive data.

EncryptedCharField encrypts on the way into the database and decrypts on
the way out, so application code only ever sees plaintext.
"""

import logging

from cryptography.fernet import InvalidToken
from django.db import models

from .encryption import decrypt_string, encrypt_string

logger = logging.getLogger(__name__)


class EncryptedCharField(models.TextField):
    """
    Text column holding a Fernet token

    ``max_length`` is accepted for symmetry with CharField; ciphertext is
    much longer than the plaintext so the column itself is unbounded.
    """

    description = "Encrypted text field"

    def __init__(self, *args, **kwargs):
        self.plaintext_max_length = kwargs.pop('max_length', None)
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.plaintext_max_length is not None:
            kwargs['max_length'] = self.plaintext_max_length
        return name, path, args, kwargs

    def from_db_value(self, value, expression, connection):
        if value is None:
            return value
        try:
            return decrypt_string(value)
        except InvalidToken:
            logger.warning(f"Could not decrypt value in column {self.attname}; ENCRYPTION_KEY changed?")
            return ''

    def get_prep_value(self, value):
        if value is None or value == '':
            return ''
        return encrypt_string(str(value))

    def to_python(self, value):
        if value is None:
            return value
        return str(value)
