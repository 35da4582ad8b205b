"""
Key management for the note vault.

The note key is generated once, stored base64-encoded in the secret store and
never rotated. Regenerating it would make the stored note unreadable.
"""

import base64
import binascii
import logging
import threading
from typing import Optional

from securenote import config
from securenote.crypto import CryptoManager
from securenote.errors import CorruptKeyError
from securenote.secure_store import SecretStore

logger = logging.getLogger(__name__)


class KeyStore:
    """Obtains or creates the 256-bit note key."""

    def __init__(self, store: SecretStore, crypto: Optional[CryptoManager] = None,
                 identifier: str = config.KEY_IDENTIFIER):
        """
        Initialize the key store.
        Args:
            store: Secret store holding the key blob
            crypto: Crypto manager used to generate the key
            identifier: Store identifier of the key blob
        """
        self.store = store
        self.crypto = crypto or CryptoManager()
        self.identifier = identifier
        self._lock = threading.Lock()
        self._key: Optional[bytes] = None

    def get_or_create_key(self) -> bytes:
        """
        Return the note key, creating and storing it on first use.

        The lock is held across read, generate and write so concurrent first
        calls agree on one key.

        Raises:
            CorruptKeyError: If the stored blob is not base64 of 32 bytes
            StorageError: If the secret store fails
        """
        with self._lock:
            if self._key is not None:
                return self._key

            stored = self.store.read(self.identifier)
            if stored is not None:
                self._key = self._decode(stored)
                logger.debug(f"Loaded existing key from {self.store.name} store")
                return self._key

            key = self.crypto.generate_key()
            self.store.write(self.identifier, base64.b64encode(key).decode('ascii'))
            logger.info(f"Generated new note key in {self.store.name} store")
            self._key = key
            return key

    def forget(self) -> None:
        """Drop the cached key. The stored key is untouched."""
        with self._lock:
            self._key = None

    def _decode(self, blob: str) -> bytes:
        try:
            key = base64.b64decode(blob, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Stored key under {self.identifier} is not valid base64")
            raise CorruptKeyError(f"Stored key under {self.identifier} is not valid base64") from e
        if len(key) != self.crypto.KEY_SIZE:
            logger.error(f"Stored key under {self.identifier} has {len(key)} bytes, expected {self.crypto.KEY_SIZE}")
            raise CorruptKeyError(
                f"Stored key has {len(key)} bytes, expected {self.crypto.KEY_SIZE}"
            )
        return key
