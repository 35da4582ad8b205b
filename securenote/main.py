"""
Main entry point for SecureNote.

LEGAL NOTICE:
This tool is for personal use only. It keeps a single encrypted note on the
device where it is installed and must only be used by the owner of that device.
"""

import sys
import os
import argparse
import logging
from typing import List, Optional

from securenote import config
from securenote.biometric import AccessGate, PinGate, open_vault
from securenote.errors import InvalidNoteError, SecureNoteError
from securenote.keystore import KeyStore
from securenote.secure_store import SecretStore, create_store
from securenote.utils import get_config_dir
from securenote.vault import NoteVault

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="securenote", description=f"{config.APP_NAME} v{config.APP_VERSION}")
    parser.add_argument(
        "--backend",
        choices=config.BACKENDS,
        default=os.environ.get(config.BACKEND_ENV_VAR, config.BACKEND_FILE),
        help="secret store backend (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("show", help="print the stored note")
    save = sub.add_parser("save", help="encrypt and store a note, replacing the previous one")
    save.add_argument("text", nargs="?", help="note text (read from stdin when omitted)")
    sub.add_parser("info", help="show application and storage details")
    return parser


class SecureNoteApp:
    """Main application class for SecureNote."""

    def __init__(self, store: SecretStore, gate: Optional[AccessGate] = None):
        """
        Initialize the application.
        Args:
            store: Secret store holding the key and the note
            gate: Access check run before the vault is used
        """
        self.store = store
        self._gate = gate
        self.keystore = KeyStore(store)
        self.vault = NoteVault(self.keystore)

    @property
    def gate(self) -> AccessGate:
        if self._gate is None:
            self._gate = PinGate()
        return self._gate

    def _unlock(self) -> Optional[NoteVault]:
        vault = open_vault(self.gate, self.vault)
        if vault is None:
            print(config.MESSAGE_AUTH_FAILED, file=sys.stderr)
        return vault

    def show(self) -> int:
        vault = self._unlock()
        if vault is None:
            return 1
        note = vault.load()
        if note is None:
            print(config.MESSAGE_NO_NOTE)
        else:
            print(note)
        return 0

    def save(self, text: Optional[str]) -> int:
        vault = self._unlock()
        if vault is None:
            return 1
        if text is None:
            try:
                text = sys.stdin.read()
            except UnicodeDecodeError as e:
                raise InvalidNoteError("Note read from stdin is not valid UTF-8") from e
        vault.save(text)
        print(config.MESSAGE_NOTE_SAVED)
        return 0

    def info(self) -> int:
        print(f"{config.APP_NAME} v{config.APP_VERSION}")
        print(f"Backend: {self.store.name}")
        print(f"Config directory: {get_config_dir()}")
        print(config.APP_DISCLAIMER.strip())
        return 0

    def run(self, args: argparse.Namespace) -> int:
        """Run the requested command."""
        try:
            if args.command == "show":
                return self.show()
            if args.command == "save":
                return self.save(args.text)
            return self.info()
        except SecureNoteError as e:
            logger.error(f"{type(e).__name__}: {e}")
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def cleanup(self):
        """Clean up resources."""
        self.keystore.forget()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.backend not in config.BACKENDS:
        # an environment default bypasses argparse's choices check
        parser.error(f"invalid backend {args.backend!r} from {config.BACKEND_ENV_VAR} (choose from {', '.join(config.BACKENDS)})")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

    app = SecureNoteApp(create_store(args.backend))
    try:
        return app.run(args)
    finally:
        app.cleanup()


if __name__ == "__main__":
    sys.exit(main())
