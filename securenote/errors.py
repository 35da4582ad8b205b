"""
Exception types raised by the SecureNote core.
"""


class SecureNoteError(Exception):
    """Base class for all SecureNote failures."""


class CorruptKeyError(SecureNoteError):
    """The stored key blob is not base64 of exactly 32 bytes.

    The key is never regenerated automatically: doing so would make every
    stored note permanently unreadable.
    """


class MalformedRecordError(SecureNoteError):
    """The stored note does not match ``base64(ciphertext):base64(iv)``."""


class DecryptionError(SecureNoteError):
    """Decryption failed: wrong key, or tampered ciphertext or IV."""


class StorageError(SecureNoteError):
    """The secret store backend could not read or write a value."""


class InvalidNoteError(SecureNoteError):
    """The note text cannot be encoded as UTF-8 (e.g. it holds lone surrogates)."""
