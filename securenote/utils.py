import platform
import os
import stat
import logging

from securenote import config

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import win32api
        import win32security
        import ntsecuritycon
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot set Windows file permissions securely.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False

OWNER_ONLY_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR  # 600
OWNER_ONLY_DIR_MODE = stat.S_IRWXU  # 700


def get_config_dir() -> str:
    """
    Return the directory holding SecureNote's files.
    Honors the SECURENOTE_HOME environment variable, else ~/.securenote.
    """
    override = os.environ.get(config.CONFIG_DIR_ENV_VAR)
    if override:
        return override
    return os.path.join(os.path.expanduser("~"), config.CONFIG_DIR_NAME)


def make_private_dir(path: str) -> None:
    """Create ``path`` (and parents) if missing; a newly created leaf is owner-only."""
    if os.path.isdir(path):
        return
    os.makedirs(path, mode=OWNER_ONLY_DIR_MODE, exist_ok=True)
    set_owner_only_permissions(path)


def open_private(filepath: str):
    """
    Open ``filepath`` for text writing, created owner-only before any byte
    is written. A leftover file at that path is removed first so its old
    mode is never reused.
    """
    make_private_dir(os.path.dirname(filepath) or '.')
    if os.path.exists(filepath):
        os.remove(filepath)
    fd = os.open(filepath, os.O_WRONLY | os.O_CREAT | os.O_EXCL, OWNER_ONLY_FILE_MODE)
    return os.fdopen(fd, 'w')


def set_owner_only_permissions(path: str) -> bool:
    """Restrict a file or directory to its owner."""
    if platform.system() == 'Windows':
        return _set_windows_file_permissions(path)
    mode = OWNER_ONLY_DIR_MODE if os.path.isdir(path) else OWNER_ONLY_FILE_MODE
    os.chmod(path, mode)
    return True


def _current_user_sid():
    token = win32security.OpenProcessToken(win32api.GetCurrentProcess(), win32security.TOKEN_QUERY)
    return win32security.GetTokenInformation(token, win32security.TokenUser)[0]


def _set_windows_file_permissions(path: str) -> bool:
    """
    Replace the DACL of ``path`` with a single protected entry for the
    account running this process. Inherited entries are dropped.
    """
    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping Windows ACL hardening for {path}: pywin32 not available.")
        return False

    try:
        descriptor = win32security.GetFileSecurity(path, win32security.DACL_SECURITY_INFORMATION)
        owner_only = win32security.ACL()
        owner_only.AddAccessAllowedAce(
            win32security.ACL_REVISION,
            ntsecuritycon.FILE_ALL_ACCESS,
            _current_user_sid()
        )
        descriptor.SetSecurityDescriptorDacl(1, owner_only, 0)
        descriptor.SetSecurityDescriptorControl(
            win32security.SE_DACL_PROTECTED, win32security.SE_DACL_PROTECTED
        )
        win32security.SetFileSecurity(path, win32security.DACL_SECURITY_INFORMATION, descriptor)
    except win32api.error as e:
        logger.error(f"Could not restrict {path} to the current user: {e}")
        return False
    logger.debug(f"Restricted {path} to the current user")
    return True
