"""
Secret store backends for SecureNote.

A secret store is the opaque key-value collaborator that holds the note key
and the encrypted note. The core only needs ``read`` and ``write``; each
backend is expected to make a single ``write`` atomic.

LEGAL NOTICE:
Values are kept on this device only and never transmitted. Use only on
devices you own or administer.
"""

import os
import json
import base64
import binascii
import logging
import shutil
import threading
from typing import Dict, Optional

import keyring
from keyring.errors import KeyringError

from securenote import config
from securenote.errors import StorageError
from securenote.utils import get_config_dir, open_private, set_owner_only_permissions

logger = logging.getLogger(__name__)


class SecretStore:
    """Interface of a secure key-value store."""

    name = "abstract"

    def read(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if absent."""
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        raise NotImplementedError


class MemorySecretStore(SecretStore):
    """Process-local store. Nothing survives the process."""

    name = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class KeyringSecretStore(SecretStore):
    """Stores values in the OS credential store through ``keyring``."""

    name = config.BACKEND_KEYRING

    def __init__(self, service: str = config.KEYRING_SERVICE_NAME):
        self.service = service

    def read(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service, key)
        except KeyringError as e:
            logger.error(f"Error reading {key} from keyring service {self.service}: {e}", exc_info=True)
            raise StorageError(f"Keyring read failed for {key}") from e

    def write(self, key: str, value: str) -> None:
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            logger.error(f"Error writing {key} to keyring service {self.service}: {e}", exc_info=True)
            raise StorageError(f"Keyring write failed for {key}") from e
        logger.info(f"Secret stored: {key}")


class FileSecretStore(SecretStore):
    """
    Stores values in a JSON file readable by the owner only.
    Each value is base64-wrapped; the whole file is replaced atomically.
    """

    name = config.BACKEND_FILE

    def __init__(self, filepath: Optional[str] = None):
        """
        Args:
            filepath: Path to the secrets file. Defaults to secrets.json in
                the configuration directory.
        """
        self.filepath = filepath or os.path.join(get_config_dir(), config.SECRETS_FILE)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading secrets file {self.filepath}: {e}", exc_info=True)
            raise StorageError(f"Cannot read secrets file {self.filepath}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Secrets file {self.filepath} does not hold a JSON object")
        return data

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            data = self._load()
        if key not in data:
            return None
        try:
            return base64.b64decode(data[key], validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError, TypeError) as e:
            raise StorageError(f"Entry {key} in {self.filepath} is not valid base64 text") from e

    def write(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = base64.b64encode(value.encode('utf-8')).decode('ascii')

            tmp_path = self.filepath + '.tmp'
            try:
                with open_private(tmp_path) as f:
                    json.dump(data, f)
                if not set_owner_only_permissions(tmp_path):
                    logger.warning(f"Failed to set secure file permissions for secrets file: {tmp_path}")

                # Atomic replace using shutil.move
                shutil.move(tmp_path, self.filepath)
            except OSError as e:
                logger.error(f"Error saving secrets file {self.filepath}: {e}", exc_info=True)
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise StorageError(f"Cannot write secrets file {self.filepath}") from e

        logger.info(f"Secret stored: {key}")


def create_store(backend: str) -> SecretStore:
    """Build the secret store named by ``backend``."""
    if backend == config.BACKEND_KEYRING:
        return KeyringSecretStore()
    if backend == config.BACKEND_FILE:
        return FileSecretStore()
    raise ValueError(f"Unsupported backend: {backend}")
