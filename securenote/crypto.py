"""
Cryptographic operations for the note vault.

LEGAL NOTICE:
This module handles encryption/decryption of the user's note. It must only be
used for legitimate personal note keeping on devices you own or administer.
"""

import os
import logging
from typing import Tuple
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.backends import default_backend

from securenote import config
from securenote.errors import DecryptionError

logger = logging.getLogger(__name__)


class CryptoManager:
    """Handles all cryptographic operations for the note vault."""

    # Constants
    KEY_SIZE = config.KEY_SIZE  # 256 bits for AES-256
    IV_SIZE = config.IV_SIZE    # one AES block
    BLOCK_SIZE_BITS = config.BLOCK_SIZE_BITS

    def __init__(self):
        """Initialize the crypto manager."""
        self.backend = default_backend()

    def generate_key(self) -> bytes:
        """Generate a cryptographically secure random AES-256 key."""
        return os.urandom(self.KEY_SIZE)

    def generate_iv(self) -> bytes:
        """Generate a fresh random IV. Never reuse one across encryptions."""
        return os.urandom(self.IV_SIZE)

    def encrypt(self, plaintext: bytes, key: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt data using AES-256-CBC with PKCS#7 padding.

        Args:
            plaintext: Data to encrypt
            key: 32-byte encryption key

        Returns:
            Tuple of (ciphertext, iv)
        """
        iv = self.generate_iv()
        padder = padding.PKCS7(self.BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        cipher = Cipher(
            algorithms.AES(key),
            modes.CBC(iv),
            backend=self.backend
        )
        encryptor = cipher.encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return ciphertext, iv

    def decrypt(self, ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
        """
        Decrypt data using AES-256-CBC and strip PKCS#7 padding.

        CBC carries no authentication tag. Tampering is only detected when it
        breaks the block length or the padding, so a modified IV or first
        block can still decrypt to altered plaintext.

        Args:
            ciphertext: Encrypted data
            key: 32-byte encryption key
            iv: IV used for encryption

        Returns:
            Decrypted plaintext

        Raises:
            DecryptionError: If the length or padding check fails
        """
        block_bytes = self.BLOCK_SIZE_BITS // 8
        if not ciphertext or len(ciphertext) % block_bytes:
            raise DecryptionError(
                f"Ciphertext length {len(ciphertext)} is not a positive multiple of {block_bytes}"
            )

        cipher = Cipher(
            algorithms.AES(key),
            modes.CBC(iv),
            backend=self.backend
        )
        decryptor = cipher.decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(self.BLOCK_SIZE_BITS).unpadder()
        try:
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            logger.debug("Padding check failed after decryption")
            raise DecryptionError("Invalid padding: wrong key or corrupted data") from e
