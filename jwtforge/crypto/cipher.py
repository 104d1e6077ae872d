"""At-rest encryption of signing keys with a machine-derived AES key.

The AES-256 key is the SHA-256 digest of ``username@hostname``. This keeps
stored keys unreadable to someone browsing the settings file, but it is not a
security boundary: anyone able to learn the OS user and host names can derive
the same key. Records are ``base64(iv || ciphertext)`` with a 16-byte IV and
PKCS7-padded AES-CBC ciphertext.
"""

import base64
import binascii
import getpass
import hashlib
import logging
import os
import socket

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from jwtforge.core.errors import DecryptionError, EncryptionError
from jwtforge.core.settings import IdentitySettings
from jwtforge.crypto.types import MachineIdentity

logger = logging.getLogger(__name__)

IV_SIZE = 16
KEY_SIZE = 32
BLOCK_SIZE_BITS = algorithms.AES.block_size


def current_identity(settings: IdentitySettings | None = None) -> MachineIdentity:
    """Read the OS user and host names, honouring configured overrides."""
    settings = settings or IdentitySettings()
    username = settings.username or getpass.getuser()
    hostname = settings.hostname or socket.gethostname()
    return MachineIdentity(username=username, hostname=hostname)


def derive_machine_key(identity: MachineIdentity) -> bytes:
    """Derive the 256-bit cipher key for an identity."""
    return hashlib.sha256(identity.seed.encode()).digest()


class AtRestCipher:
    """Encrypts and decrypts signing keys for persistence.

    Build one instance at process start and pass it to whatever needs it.
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            raise ValueError(f"Cipher key must be {KEY_SIZE} bytes")
        self._key = key

    @classmethod
    def from_identity(cls, identity: MachineIdentity | None = None) -> "AtRestCipher":
        """Create a cipher keyed to the given (or current) machine identity."""
        identity = identity or current_identity()
        logger.info("At-rest cipher initialised for host %s", identity.hostname)
        return cls(derive_machine_key(identity))

    def _cipher(self, iv: bytes) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(iv))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` under a fresh random IV."""
        try:
            iv = os.urandom(IV_SIZE)
            padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
            padded = padder.update(plaintext.encode()) + padder.finalize()
            encryptor = self._cipher(iv).encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (ValueError, TypeError, UnicodeError) as exc:
            raise EncryptionError(f"Encryption failed: {exc}") from exc
        return base64.b64encode(iv + ciphertext).decode()

    def decrypt(self, record: str) -> str:
        """Decrypt a record produced by :meth:`encrypt`.

        Raises:
            DecryptionError: On any failure; the cause is not exposed.
        """
        try:
            plaintext = self._decrypt(record)
        except (ValueError, TypeError, binascii.Error):
            logger.warning("Failed to decrypt stored key record")
            raise DecryptionError() from None
        return plaintext

    def _decrypt(self, record: str) -> str:
        combined = base64.b64decode(record, validate=True)
        iv, ciphertext = combined[:IV_SIZE], combined[IV_SIZE:]
        if len(iv) != IV_SIZE or not ciphertext:
            raise ValueError("truncated record")
        decryptor = self._cipher(iv).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        data = unpadder.update(padded) + unpadder.finalize()
        return data.decode("utf-8")
