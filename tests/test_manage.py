"""Tests for the admin command line."""

import pytest

from studio import manage
from studio.utils.auth import verify_password


def _answers(monkeypatch, *answers):
    replies = iter(answers)
    monkeypatch.setattr(manage.getpass, "getpass", lambda prompt="": next(replies))


def test_hash_password_prints_env_line(monkeypatch, capsys):
    _answers(monkeypatch, "open sesame", "open sesame")

    assert manage.main(["hash-password", "--rounds", "4"]) == 0

    out = capsys.readouterr().out
    line = next(l for l in out.splitlines() if l.startswith("ADMIN_PASSWORD_HASH="))
    assert verify_password("open sesame", line.split("=", 1)[1])


def test_hash_password_mismatch(monkeypatch, capsys):
    _answers(monkeypatch, "open sesame", "open sesane")

    assert manage.main(["hash-password"]) == 1
    assert "do not match" in capsys.readouterr().out


def test_hash_password_empty(monkeypatch, capsys):
    _answers(monkeypatch, "")

    assert manage.main(["hash-password"]) == 1


def test_command_required():
    with pytest.raises(SystemExit):
        manage.main([])
