"""
Configuration encryption utilities for hsdp-api.

Secrets such as the signing secret key can be stored in the configuration
file as ``ENC[...]`` values. All encryption uses AES-256-GCM with a key
derived from a master password via PBKDF2.
"""

import base64
import os
from typing import Any, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hsdp_api.logging_config import get_logger

logger = get_logger(__name__)

MASTER_PASSWORD_ENV = "HSDP_MASTER_PASSWORD"
NONCE_SIZE = 12


class ConfigEncryption:
    """
    Handles encryption and decryption of configuration values.

    Example:
        >>> encryptor = ConfigEncryption("master_password")
        >>> encrypted = encryptor.encrypt("shared-secret")
        >>> encryptor.decrypt(encrypted)
        'shared-secret'
    """

    ENCRYPTED_PREFIX = "ENC["
    ENCRYPTED_SUFFIX = "]"

    DEFAULT_SALT = b"hsdp_api_config_encryption_salt_v1"

    def __init__(
        self,
        master_password: Optional[str] = None,
        salt: Optional[bytes] = None,
    ):
        """
        Args:
            master_password: Master password (read from HSDP_MASTER_PASSWORD if not provided)
            salt: Salt for key derivation (uses default if not provided)

        Raises:
            ValueError: If no master password is available
        """
        if master_password is None:
            master_password = os.environ.get(MASTER_PASSWORD_ENV)
            if not master_password:
                raise ValueError(
                    f"Master password not provided. Set {MASTER_PASSWORD_ENV} "
                    "environment variable or pass master_password parameter."
                )

        self.salt = salt or self.DEFAULT_SALT
        self.cipher = AESGCM(self._derive_key(master_password, self.salt))

    @staticmethod
    def _derive_key(password: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=100000,
        )
        return kdf.derive(password.encode())

    @classmethod
    def is_encrypted(cls, value: Any) -> bool:
        return (
            isinstance(value, str) and
            value.startswith(cls.ENCRYPTED_PREFIX) and
            value.endswith(cls.ENCRYPTED_SUFFIX)
        )

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` into ``ENC[base64(nonce + ciphertext)]``."""
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self.cipher.encrypt(nonce, plaintext.encode(), None)
        encoded = base64.b64encode(nonce + ciphertext).decode('ascii')
        return f"{self.ENCRYPTED_PREFIX}{encoded}{self.ENCRYPTED_SUFFIX}"

    def decrypt(self, encrypted: str) -> str:
        """
        Decrypt an ``ENC[...]`` value.

        Raises:
            ValueError: If the value is not encrypted or decryption fails
        """
        if not self.is_encrypted(encrypted):
            raise ValueError(
                f"Value is not encrypted (must start with {self.ENCRYPTED_PREFIX} "
                f"and end with {self.ENCRYPTED_SUFFIX})"
            )

        encoded = encrypted[len(self.ENCRYPTED_PREFIX):-len(self.ENCRYPTED_SUFFIX)]

        try:
            encrypted_data = base64.b64decode(encoded)
            plaintext = self.cipher.decrypt(
                encrypted_data[:NONCE_SIZE], encrypted_data[NONCE_SIZE:], None
            )
            return plaintext.decode('utf-8')
        except (InvalidTag, ValueError) as e:
            logger.error("Failed to decrypt value")
            raise ValueError(f"Failed to decrypt value: {e!r}") from e

    def decrypt_config(self, config_dict: dict) -> dict:
        """Recursively decrypt every encrypted value of a configuration mapping."""
        result = {}

        for key, value in config_dict.items():
            if self.is_encrypted(value):
                result[key] = self.decrypt(value)
                logger.debug(f"Decrypted configuration value: {key}")
            elif isinstance(value, dict):
                result[key] = self.decrypt_config(value)
            elif isinstance(value, list):
                result[key] = [
                    self.decrypt(item) if self.is_encrypted(item) else item
                    for item in value
                ]
            else:
                result[key] = value

        return result


def encrypt_value(value: str, master_password: Optional[str] = None) -> str:
    """Encrypt a single value for pasting into a configuration file."""
    return ConfigEncryption(master_password=master_password).encrypt(value)


def decrypt_value(encrypted: str, master_password: Optional[str] = None) -> str:
    return ConfigEncryption(master_password=master_password).decrypt(encrypted)
