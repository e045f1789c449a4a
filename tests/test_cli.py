from __future__ import annotations

from pathlib import Path

import pytest

from livy_client import cli
from livy_client.registry import ProviderRegistry


class _HttpFactory:
    def create_client(self, uri, conf):  # noqa: ARG002
        return None


def test_effective_config_is_printed_redacted(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "livy-client.conf").write_text("spark.master=yarn\n", encoding="utf-8")

    code = cli.main(["--conf-dir", str(tmp_path), "livy.uri=http://u:secret@h:8998/", "livy.sessionId=3"])

    out = capsys.readouterr().out
    assert code == 0
    assert "=== Effective Config ===" in out
    assert "spark.master: yarn" in out
    assert "livy.uri: http://%5Bredacted%5D@h:8998/" in out
    assert "secret" not in out
    assert "livy.sessionId: '3'" in out


def test_no_defaults_skips_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "livy-client.conf").write_text("spark.master=yarn\n", encoding="utf-8")
    cli.main(["--no-defaults", "--conf-dir", str(tmp_path), "a=b"])
    out = capsys.readouterr().out
    assert "spark.master" not in out
    assert "a: b" in out


def test_invalid_uri_is_masked(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["--no-defaults", "livy.uri=http://u:secret@h:port/"])
    out = capsys.readouterr().out
    assert "<invalid URI>" in out
    assert "secret" not in out


def test_malformed_override_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--no-defaults", "novalue"])
    assert excinfo.value.code == 2


def test_list_factories(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def explode():
        raise ImportError("nope")

    registry = ProviderRegistry([_HttpFactory, explode])
    monkeypatch.setattr(cli, "get_registry", lambda: registry)

    cli.main(["--no-defaults", "--list-factories"])

    out = capsys.readouterr().out
    assert "=== Client Factories ===" in out
    assert "1. tests.test_cli._HttpFactory" in out or "1. test_cli._HttpFactory" in out
    assert "FAILED" in out and "nope" in out
