import json
import os
import stat
import sys
from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordSetError

from securenote.errors import StorageError
from securenote.secure_store import (
    FileSecretStore,
    KeyringSecretStore,
    MemorySecretStore,
    create_store,
)


def test_memory_store_read_write():
    store = MemorySecretStore()
    assert store.read("k") is None
    store.write("k", "v1")
    store.write("k", "v2")
    assert store.read("k") == "v2"


def test_file_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "secrets.json"
    store = FileSecretStore(str(path))

    assert store.read("secure_key") is None
    store.write("secure_key", "abc=")
    store.write("secure_note", "ct:iv")

    reopened = FileSecretStore(str(path))
    assert reopened.read("secure_key") == "abc="
    assert reopened.read("secure_note") == "ct:iv"
    assert not os.path.exists(str(path) + ".tmp")


def test_file_store_wraps_values_in_base64(tmp_path):
    path = tmp_path / "secrets.json"
    FileSecretStore(str(path)).write("secure_note", "plain:value")

    data = json.loads(path.read_text())
    assert data == {"secure_note": "cGxhaW46dmFsdWU="}


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_file_store_is_owner_only(tmp_path):
    path = tmp_path / "secrets.json"
    FileSecretStore(str(path)).write("k", "v")

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600


def test_file_store_defaults_to_config_dir(isolated_home):
    store = FileSecretStore()
    store.write("k", "v")

    assert os.path.exists(isolated_home / "secrets.json")


def test_file_store_unreadable_json(tmp_path):
    path = tmp_path / "secrets.json"
    path.write_text("{not json")

    with pytest.raises(StorageError):
        FileSecretStore(str(path)).read("k")


def test_file_store_non_object_json(tmp_path):
    path = tmp_path / "secrets.json"
    path.write_text("[1, 2]")

    with pytest.raises(StorageError):
        FileSecretStore(str(path)).read("k")


def test_file_store_bad_entry(tmp_path):
    path = tmp_path / "secrets.json"
    path.write_text(json.dumps({"k": "***"}))

    with pytest.raises(StorageError):
        FileSecretStore(str(path)).read("k")


@patch("securenote.secure_store.keyring")
def test_keyring_store_delegates(mock_keyring):
    mock_keyring.get_password.return_value = "stored"
    store = KeyringSecretStore(service="svc")

    assert store.read("secure_key") == "stored"
    store.write("secure_note", "value")

    mock_keyring.get_password.assert_called_once_with("svc", "secure_key")
    mock_keyring.set_password.assert_called_once_with("svc", "secure_note", "value")


@patch("securenote.secure_store.keyring")
def test_keyring_store_absent_value(mock_keyring):
    mock_keyring.get_password.return_value = None
    assert KeyringSecretStore().read("secure_key") is None


@patch("securenote.secure_store.keyring")
def test_keyring_errors_become_storage_errors(mock_keyring):
    mock_keyring.get_password.side_effect = KeyringError("no backend")
    mock_keyring.set_password.side_effect = PasswordSetError("locked")
    store = KeyringSecretStore()

    with pytest.raises(StorageError):
        store.read("secure_key")
    with pytest.raises(StorageError):
        store.write("secure_key", "v")


def test_create_store():
    assert isinstance(create_store("file"), FileSecretStore)
    assert isinstance(create_store("keyring"), KeyringSecretStore)
    with pytest.raises(ValueError):
        create_store("cloud")


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permissions")
def test_file_store_key_never_lands_in_readable_file(tmp_path):
    path = tmp_path / "home" / "secrets.json"
    modes = []
    real_dump = json.dump

    def recording_dump(data, f):
        modes.append(stat.S_IMODE(os.fstat(f.fileno()).st_mode))
        real_dump(data, f)

    with patch("securenote.secure_store.json.dump", side_effect=recording_dump):
        FileSecretStore(str(path)).write("secure_key", "KEYMATERIAL")

    assert modes == [0o600]
    assert stat.S_IMODE(os.stat(path.parent).st_mode) == 0o700
