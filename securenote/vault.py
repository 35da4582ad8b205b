"""
Encrypted storage of the single note.

A stored note is one string: ``base64(ciphertext):base64(iv)``. Saving always
replaces the previous note.

LEGAL NOTICE:
This module handles the user's private note. All data is encrypted locally
and never transmitted. Use only on devices you own or administer.
"""

import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from securenote import config
from securenote.crypto import CryptoManager
from securenote.errors import DecryptionError, InvalidNoteError, MalformedRecordError
from securenote.keystore import KeyStore
from securenote.secure_store import SecretStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncryptedRecord:
    """Ciphertext of one note and the IV it was encrypted with."""
    ciphertext: bytes
    iv: bytes


def encode_record(record: EncryptedRecord) -> str:
    """Serialize a record to ``base64(ciphertext):base64(iv)``."""
    return (
        base64.b64encode(record.ciphertext).decode('ascii')
        + config.RECORD_SEPARATOR
        + base64.b64encode(record.iv).decode('ascii')
    )


def decode_record(value: str) -> EncryptedRecord:
    """
    Parse a serialized record.

    Raises:
        MalformedRecordError: If the value does not have exactly two base64
            fields or the IV is not 16 bytes
    """
    parts = value.split(config.RECORD_SEPARATOR)
    if len(parts) != 2:
        raise MalformedRecordError(f"Expected 2 fields in note record, found {len(parts)}")

    try:
        ciphertext = base64.b64decode(parts[0], validate=True)
        iv = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedRecordError("Note record field is not valid base64") from e

    if len(iv) != config.IV_SIZE:
        raise MalformedRecordError(f"IV has {len(iv)} bytes, expected {config.IV_SIZE}")
    return EncryptedRecord(ciphertext=ciphertext, iv=iv)


class NoteVault:
    """Encrypts and decrypts the single stored note."""

    def __init__(self, keystore: KeyStore, store: Optional[SecretStore] = None,
                 identifier: str = config.NOTE_IDENTIFIER):
        """
        Initialize the vault.
        Args:
            keystore: Source of the note key
            store: Secret store holding the note. Defaults to the key store's.
            identifier: Store identifier of the note record
        """
        self.keystore = keystore
        self.store = store if store is not None else keystore.store
        self.crypto = keystore.crypto
        self.identifier = identifier
        self._lock = threading.Lock()

    def has_note(self) -> bool:
        """Check whether a note record is stored. Does not touch the key."""
        return self.store.read(self.identifier) is not None

    def save(self, plaintext: str) -> None:
        """
        Encrypt ``plaintext`` under a fresh IV and replace the stored note.

        Raises:
            CorruptKeyError: If the stored key is unusable
            StorageError: If the secret store fails
            InvalidNoteError: If the text is not encodable as UTF-8
        """
        try:
            data = plaintext.encode('utf-8')
        except UnicodeEncodeError as e:
            raise InvalidNoteError("Note text is not valid Unicode and cannot be stored") from e

        with self._lock:
            key = self.keystore.get_or_create_key()
            ciphertext, iv = self.crypto.encrypt(data, key)
            self.store.write(self.identifier, encode_record(EncryptedRecord(ciphertext, iv)))
            logger.info(f"Note saved ({len(ciphertext)} bytes of ciphertext)")

    def load(self) -> Optional[str]:
        """
        Decrypt and return the stored note.

        Returns:
            The note text, or None if no note has been saved yet

        Raises:
            MalformedRecordError: If the stored value is not a valid record
            DecryptionError: If the key, ciphertext or IV do not match
            CorruptKeyError: If the stored key is unusable
            StorageError: If the secret store fails
        """
        with self._lock:
            stored = self.store.read(self.identifier)
            if stored is None:
                logger.debug("No note stored")
                return None

            record = decode_record(stored)
            key = self.keystore.get_or_create_key()
            plaintext = self.crypto.decrypt(record.ciphertext, key, record.iv)

        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted note is not valid UTF-8: wrong key or corrupted data") from e
