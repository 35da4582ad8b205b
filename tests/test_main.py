import base64
import io

import pytest

from securenote.biometric import AlwaysDenyGate, AlwaysGrantGate
from securenote.main import SecureNoteApp, build_parser, main
from securenote.secure_store import MemorySecretStore


@pytest.fixture
def app():
    return SecureNoteApp(MemorySecretStore(), gate=AlwaysGrantGate())


def _run(app, *argv):
    return app.run(build_parser().parse_args(list(argv)))


def test_show_without_note(app, capsys):
    assert _run(app, "show") == 0
    assert capsys.readouterr().out.strip() == "No note saved yet."


def test_save_then_show(app, capsys):
    assert _run(app, "save", "Hello, world!") == 0
    assert "Note saved securely." in capsys.readouterr().out

    assert _run(app, "show") == 0
    assert capsys.readouterr().out.strip() == "Hello, world!"


def test_save_reads_stdin(app, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("from stdin\n"))

    assert _run(app, "save") == 0
    assert app.vault.load() == "from stdin\n"


def test_denied_access(capsys):
    store = MemorySecretStore()
    app = SecureNoteApp(store, gate=AlwaysDenyGate())

    assert _run(app, "save", "secret") == 1
    assert _run(app, "show") == 1
    assert "Authorization failed." in capsys.readouterr().err
    assert store.read("secure_note") is None


def test_core_errors_exit_nonzero(capsys):
    store = MemorySecretStore({"secure_key": base64.b64encode(b"short").decode()})
    app = SecureNoteApp(store, gate=AlwaysGrantGate())

    assert _run(app, "save", "x") == 1
    assert "Error:" in capsys.readouterr().err


def test_info(app, capsys, isolated_home):
    assert _run(app, "info") == 0
    out = capsys.readouterr().out
    assert "SecureNote v1.0" in out
    assert "Backend: memory" in out
    assert str(isolated_home) in out


def test_cleanup_forgets_key(app):
    _run(app, "save", "x")
    assert app.keystore._key is not None
    app.cleanup()
    assert app.keystore._key is None


def test_main_info_with_file_backend(capsys):
    assert main(["--backend", "file", "info"]) == 0
    assert "Backend: file" in capsys.readouterr().out


def test_backend_default_from_environment(monkeypatch):
    monkeypatch.setenv("SECURENOTE_BACKEND", "keyring")
    assert build_parser().parse_args(["info"]).backend == "keyring"


def test_invalid_backend_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("SECURENOTE_BACKEND", "cloud")

    with pytest.raises(SystemExit) as exc:
        main(["info"])
    assert exc.value.code == 2
    assert "invalid backend 'cloud'" in capsys.readouterr().err


def test_save_rejects_undecodable_stdin(app, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"\xff\xfe note"), encoding="utf-8"))

    assert _run(app, "save") == 1
    assert "Error:" in capsys.readouterr().err
    assert app.vault.load() is None


def test_save_rejects_surrogate_argument(app, capsys):
    assert _run(app, "save", "bad \udcff byte") == 1
    assert "Error:" in capsys.readouterr().err
