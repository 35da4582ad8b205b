"""
Access gate for the note vault.

The vault is only handed out after a gate answers GRANTED. Failed or
cancelled checks answer DENIED; they are results, not exceptions.

LEGAL NOTICE:
This module handles user authentication. It must only be used for legitimate
personal note keeping on devices you own or administer.
"""

import os
import json
import enum
import getpass
import logging
from typing import Callable, Optional

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from securenote import config
from securenote.errors import StorageError
from securenote.utils import get_config_dir, open_private, set_owner_only_permissions
from securenote.vault import NoteVault

logger = logging.getLogger(__name__)


class AuthResult(enum.Enum):
    GRANTED = "granted"
    DENIED = "denied"


class AccessGate:
    """Base class for access checks that gate the vault."""

    def is_available(self) -> bool:
        """Check if this gate can be used on this device."""
        return True

    def authenticate(self, reason: str) -> AuthResult:
        raise NotImplementedError


class AlwaysGrantGate(AccessGate):
    def authenticate(self, reason: str) -> AuthResult:
        return AuthResult.GRANTED


class AlwaysDenyGate(AccessGate):
    def authenticate(self, reason: str) -> AuthResult:
        return AuthResult.DENIED


class PinGate(AccessGate):
    """
    PIN authentication. The first successful prompt enrolls the PIN; later
    prompts verify against the stored argon2id hash.
    """

    def __init__(self, auth_file: Optional[str] = None,
                 prompt: Callable[[str], str] = getpass.getpass):
        """
        Args:
            auth_file: Path of the PIN hash file. Defaults to auth.json in the
                configuration directory.
            prompt: Callable that shows a prompt and returns the typed PIN
        """
        self.auth_file = auth_file or os.path.join(get_config_dir(), config.AUTH_FILE)
        self.prompt = prompt
        self.ph = PasswordHasher(
            time_cost=config.ARGON2_TIME_COST,
            memory_cost=config.ARGON2_MEMORY_COST,
            parallelism=config.ARGON2_PARALLELISM,
            type=Type.ID
        )
        self._stored_hash = self._load_auth_hash()

    def is_enrolled(self) -> bool:
        return self._stored_hash is not None

    def _load_auth_hash(self) -> Optional[str]:
        """Load stored PIN hash if it exists."""
        if not os.path.exists(self.auth_file):
            return None
        try:
            with open(self.auth_file, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading auth file {self.auth_file}: {e}", exc_info=True)
            raise StorageError(f"Cannot read auth file {self.auth_file}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Auth file {self.auth_file} does not hold a JSON object")
        return data.get('auth_hash')

    def _save_auth_hash(self, pin: str) -> None:
        """Hash and store a new PIN."""
        data = {'auth_hash': self.ph.hash(pin)}
        try:
            with open_private(self.auth_file) as f:
                json.dump(data, f)
            set_owner_only_permissions(self.auth_file)
        except OSError as e:
            logger.error(f"Error saving auth hash: {e}", exc_info=True)
            raise StorageError(f"Cannot write auth file {self.auth_file}") from e
        self._stored_hash = data['auth_hash']

    def _verify_pin(self, pin: str) -> bool:
        try:
            return self.ph.verify(self._stored_hash, pin)
        except VerificationError:
            return False
        except InvalidHashError:
            logger.error(f"Stored PIN hash in {self.auth_file} is not a valid argon2 hash")
            return False

    def authenticate(self, reason: str) -> AuthResult:
        """
        Prompt for the PIN.

        Args:
            reason: Reason for authentication

        Returns:
            GRANTED on a matching PIN or a successful enrollment, else DENIED
        """
        logger.info(f"Starting authentication: {reason}")
        enrolled = self.is_enrolled()
        prompt_text = config.PIN_PROMPT_ENTER if enrolled else config.PIN_PROMPT_SETUP

        try:
            pin = self.prompt(prompt_text)
        except (EOFError, KeyboardInterrupt):
            logger.info("PIN authentication cancelled")
            return AuthResult.DENIED

        if not pin:
            logger.info("PIN authentication cancelled")
            return AuthResult.DENIED

        if enrolled:
            if self._verify_pin(pin):
                logger.info("PIN authentication successful")
                return AuthResult.GRANTED
            logger.warning("PIN authentication failed")
            return AuthResult.DENIED

        if len(pin) < config.PIN_MIN_LENGTH:
            logger.warning(f"PIN rejected: shorter than {config.PIN_MIN_LENGTH} characters")
            return AuthResult.DENIED
        self._save_auth_hash(pin)
        logger.info("PIN set up successfully")
        return AuthResult.GRANTED


def open_vault(gate: AccessGate, vault: NoteVault,
               reason: str = config.AUTH_REASON_UNLOCK) -> Optional[NoteVault]:
    """Return ``vault`` if ``gate`` grants access, else None."""
    if not gate.is_available():
        logger.warning(f"{type(gate).__name__} is not available on this device")
        return None
    if gate.authenticate(reason) is AuthResult.GRANTED:
        return vault
    return None
