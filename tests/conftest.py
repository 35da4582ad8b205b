import pytest

from securenote.keystore import KeyStore
from securenote.secure_store import MemorySecretStore
from securenote.vault import NoteVault


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("SECURENOTE_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


@pytest.fixture
def store():
    return MemorySecretStore()


@pytest.fixture
def keystore(store):
    return KeyStore(store)


@pytest.fixture
def vault(keystore):
    return NoteVault(keystore)
