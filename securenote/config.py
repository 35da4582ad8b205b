"""
Configuration constants for the SecureNote application.
"""

# Application Metadata
APP_VERSION = "1.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "SecureNote"  # Use: Full name of the application. Type: str. Range: Any valid string.
APP_DISCLAIMER = """  # Use: Legal disclaimer printed by the CLI info command. Type: str (multi-line). Range: Any valid string.
This tool is for personal use only. It keeps a single encrypted note on the
device where it is installed and must only be used by the owner of that device.
"""

# Security Settings
KEY_SIZE = 32  # Use: Size of the symmetric note key in bytes. Corresponds to AES-256. Type: int. Range: Fixed at 32; a stored key of any other size is rejected as corrupt.
IV_SIZE = 16  # Use: Size of the CBC initialization vector in bytes. Type: int. Range: Must equal the AES block size (16 bytes).
BLOCK_SIZE_BITS = 128  # Use: AES block size in bits, used for PKCS#7 padding. Type: int. Range: 128 for AES.
ARGON2_TIME_COST = 2  # Use: Argon2id time cost for PIN hashing. Type: int. Range: Typically 1 to 10.
ARGON2_MEMORY_COST = 65536  # Use: Argon2id memory cost in KiB for PIN hashing. Type: int. Range: Recommended to be at least 65536 (64 MB).
ARGON2_PARALLELISM = 4  # Use: Argon2id parallelism for PIN hashing. Type: int. Range: Typically 1 to 8.
PIN_MIN_LENGTH = 4  # Use: Minimum accepted PIN length when enrolling a new PIN. Type: int. Range: Positive integer.

# Secret Store Identifiers
KEY_IDENTIFIER = "secure_key"  # Use: Identifier under which the base64 note key is stored. Type: str. Range: Any non-empty string; changing it orphans existing notes.
NOTE_IDENTIFIER = "secure_note"  # Use: Identifier under which the serialized note record is stored. Type: str. Range: Any non-empty string.
RECORD_SEPARATOR = ":"  # Use: Separator between base64(ciphertext) and base64(iv) in a stored note. Type: str. Range: A single character outside the base64 alphabet.
KEYRING_SERVICE_NAME = "securenote"  # Use: Service name used for entries in the OS keyring. Type: str. Range: Any non-empty string.

# Backend Settings
BACKEND_KEYRING = "keyring"  # Use: Name of the OS keyring backend. Type: str. Range: "keyring"
BACKEND_FILE = "file"  # Use: Name of the JSON file backend. Type: str. Range: "file"
BACKENDS = (BACKEND_KEYRING, BACKEND_FILE)  # Use: Backends selectable from the CLI. Type: tuple[str]. Range: Names listed above.
BACKEND_ENV_VAR = "SECURENOTE_BACKEND"  # Use: Environment variable selecting the default backend. Type: str. Range: Any valid environment variable name.
CONFIG_DIR_ENV_VAR = "SECURENOTE_HOME"  # Use: Environment variable overriding the configuration directory. Type: str. Range: Any valid environment variable name.

# Authentication Messages
AUTH_REASON_UNLOCK = "Unlock SecureNote"  # Use: Reason shown when prompting for access before reading or writing the note. Type: str. Range: Any descriptive string.
PIN_PROMPT_ENTER = "Enter your PIN: "  # Use: Prompt for the user to enter their PIN. Type: str. Range: Any descriptive string.
PIN_PROMPT_SETUP = "Set up your PIN for quick authentication: "  # Use: Prompt for the user to choose a PIN on first use. Type: str. Range: Any descriptive string.
MESSAGE_AUTH_FAILED = "Authorization failed."  # Use: Message printed when access is denied. Type: str. Range: Any string.
MESSAGE_NOTE_SAVED = "Note saved securely."  # Use: Message printed after a successful save. Type: str. Range: Any string.
MESSAGE_NO_NOTE = "No note saved yet."  # Use: Message printed when no note is stored. Type: str. Range: Any string.

# File and Directory Names
CONFIG_DIR_NAME = ".securenote"  # Use: Name of the hidden directory within the user's home directory where SecureNote stores its files. Type: str. Range: Any valid directory name.
SECRETS_FILE = "secrets.json"  # Use: Filename of the JSON secret store used by the file backend. Type: str. Range: Any valid filename.
AUTH_FILE = "auth.json"  # Use: Filename for storing the PIN hash. Type: str. Range: Any valid filename.
