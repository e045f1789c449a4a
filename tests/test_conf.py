from __future__ import annotations

import os
from pathlib import Path

import pytest

from livy_client.conf import (
    CONF_PATH_ENV,
    ClientConf,
    default_search_path,
    parse_properties,
    read_default_sources,
)


def test_client_specific_defaults_override_generic() -> None:
    conf = ClientConf()
    conf.load_defaults(
        [
            ("spark-defaults.conf", "spark.master=yarn\nshared.key=generic\n"),
            ("livy-client.conf", "shared.key=client\nlivy.uri=http://localhost:8998\n"),
        ]
    )
    assert conf["shared.key"] == "client"
    assert conf["spark.master"] == "yarn"
    assert list(conf) == ["spark.master", "shared.key", "livy.uri"]


def test_absent_source_is_skipped() -> None:
    conf = ClientConf()
    conf.load_defaults([("spark-defaults.conf", None), ("livy-client.conf", "a=1")])
    assert conf.to_dict() == {"a": "1"}


def test_set_none_removes_key() -> None:
    conf = ClientConf({"a": "1", "b": "2"})
    conf.set("a", None)
    conf.set("missing", None)
    assert "a" not in conf
    assert conf.to_dict() == {"b": "2"}


def test_merge_later_wins_and_values_are_strings() -> None:
    conf = ClientConf()
    conf.merge({"a": "1", "n": 5})
    conf.merge({"a": "2"})
    assert conf["a"] == "2"
    assert conf["n"] == "5"


def test_parse_properties_separators_and_comments() -> None:
    text = "\n".join(
        [
            "# comment",
            "! also a comment",
            "",
            "eq=1",
            "colon: 2",
            "space   3",
            "  padded.key = four ",
            "empty",
            "dup=first",
            "dup=second",
        ]
    )
    assert parse_properties(text) == {
        "eq": "1",
        "colon": "2",
        "space": "3",
        "padded.key": "four ",
        "empty": "",
        "dup": "second",
    }


def test_parse_properties_continuation_and_escapes() -> None:
    text = "multi=one, \\\n    two\nesc\\=key=tab\\there\nuni=\\u0041b\nbs=c:\\\\dir\n"
    assert parse_properties(text) == {
        "multi": "one, two",
        "esc=key": "tab\there",
        "uni": "Ab",
        "bs": "c:\\dir",
    }


def test_read_default_sources_first_directory_wins(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "livy-client.conf").write_text("k=first\n", encoding="utf-8")
    (second / "livy-client.conf").write_text("k=second\n", encoding="utf-8")
    (second / "spark-defaults.conf").write_text("s=1\n", encoding="utf-8")

    sources = read_default_sources(search_path=[first, second])

    assert [Path(name).name for name, _ in sources] == ["spark-defaults.conf", "livy-client.conf"]
    conf = ClientConf()
    conf.load_defaults(sources)
    assert conf.to_dict() == {"s": "1", "k": "first"}


def test_read_default_sources_missing_files(tmp_path: Path) -> None:
    sources = read_default_sources(search_path=[tmp_path])
    assert sources == [("spark-defaults.conf", None), ("livy-client.conf", None)]


def test_read_error_is_fatal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "livy-client.conf").write_text("k=v\n", encoding="utf-8")

    def broken_read(self, *args, **kwargs):  # noqa: ARG001
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_text", broken_read)
    with pytest.raises(PermissionError):
        read_default_sources(search_path=[tmp_path])


def test_default_search_path_reads_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONF_PATH_ENV, os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")]))
    monkeypatch.chdir(tmp_path)
    assert default_search_path() == [tmp_path / "a", tmp_path / "b", Path.cwd()]


def test_default_search_path_without_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONF_PATH_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    assert default_search_path() == [Path.cwd()]


def test_set_none_removes_non_string_key() -> None:
    conf = ClientConf()
    conf.set(5, "x")
    conf.set(5, None)
    assert len(conf) == 0


def test_parse_properties_breaks_lines_only_on_cr_lf() -> None:
    text = "k=a\u2028b\x0cc\x85d\r\nx=y\rz=w\n"
    assert parse_properties(text) == {"k": "a\u2028b\x0cc\x85d", "x": "y", "z": "w"}


def test_parse_properties_unicode_space_does_not_end_key() -> None:
    assert parse_properties("a\xa0b=c\n") == {"a\xa0b": "c"}
    assert parse_properties("\xa0lead=1\n") == {"\xa0lead": "1"}
