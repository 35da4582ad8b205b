"""
SecureNote
Copyright (c) 2026

A single encrypted note whose key lives in the device's secret store and is
only handed out after an access check. Use only on devices you own.
"""

from securenote.errors import (
    SecureNoteError,
    CorruptKeyError,
    MalformedRecordError,
    DecryptionError,
    StorageError,
    InvalidNoteError,
)
from securenote.keystore import KeyStore
from securenote.vault import NoteVault, EncryptedRecord

__all__ = [
    "SecureNoteError",
    "CorruptKeyError",
    "MalformedRecordError",
    "DecryptionError",
    "StorageError",
    "InvalidNoteError",
    "KeyStore",
    "NoteVault",
    "EncryptedRecord",
]
