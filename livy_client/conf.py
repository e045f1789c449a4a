"""
Layered client configuration.

Configuration is a flat, insertion-ordered ``str -> str`` mapping. Values come
from default files found on a search path (generic Spark defaults first,
client-specific Livy defaults second) and are then overridden by whatever the
caller sets on the builder. Later writes always win.

Usage:
    conf = ClientConf()
    conf.load_defaults(read_default_sources())
    conf.set("livy.uri", "http://localhost:8998")
    conf.set("spark.app.name", None)   # un-set a loaded default
"""

from __future__ import annotations

import logging
import os
import re
from collections import OrderedDict
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# Generic defaults first, client-specific second: later files win.
DEFAULT_CONF_FILES: Tuple[str, ...] = ("spark-defaults.conf", "livy-client.conf")
CONF_PATH_ENV = "LIVY_CLIENT_CONF_PATH"

ConfSource = Tuple[str, Optional[str]]

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_KEY_END_RE = re.compile(r"(?<!\\)(?:\\\\)*[=: \t\f]")
_LINE_BREAK_RE = re.compile(r"\r\n|[\r\n]")
_BLANKS = " \t\f"


class ClientConf(Mapping):
    """Insertion-ordered string configuration with last-write-wins semantics."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        if initial:
            self.merge(initial)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ClientConf({dict(self._entries)!r})"

    def set(self, key: str, value: Any) -> None:
        """Store ``str(value)`` under ``key``; ``None`` removes the key."""
        if value is None:
            self._entries.pop(str(key), None)
        else:
            self._entries[str(key)] = str(value)

    def merge(self, other: Mapping[str, Any]) -> None:
        for key, value in other.items():
            self.set(key, value)

    def load_defaults(self, sources: Iterable[ConfSource]) -> None:
        """Merge ``(name, text)`` sources in order; ``text=None`` means absent."""
        for name, text in sources:
            if text is None:
                logger.debug("Config source %s not found, skipping", name)
                continue
            entries = parse_properties(text)
            logger.debug("Loaded %d entries from %s", len(entries), name)
            self.merge(entries)

    def to_dict(self) -> Dict[str, str]:
        return dict(self._entries)


def _unescape(raw: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch != "\\" or i + 1 >= len(raw):
            out.append(ch)
            i += 1
            continue
        nxt = raw[i + 1]
        if nxt == "u" and re.fullmatch(r"[0-9A-Fa-f]{4}", raw[i + 2:i + 6]):
            out.append(chr(int(raw[i + 2:i + 6], 16)))
            i += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _logical_lines(text: str) -> Iterator[str]:
    pending: Optional[str] = None
    for line in _LINE_BREAK_RE.split(text):
        stripped = line.lstrip(_BLANKS)
        if pending is None and (not stripped or stripped[0] in "#!"):
            continue
        piece = stripped if pending is None else pending + stripped
        trailing = len(piece) - len(piece.rstrip("\\"))
        if trailing % 2 == 1:
            pending = piece[:-1]
            continue
        pending = None
        yield piece
    if pending is not None:
        yield pending


def parse_properties(text: str) -> Dict[str, str]:
    """Parse Java-properties style ``key=value`` text.

    Supports ``=``, ``:`` or whitespace separators, ``#``/``!`` comments,
    backslash line continuations and the usual escapes. Duplicate keys keep
    the last value.
    """
    entries: Dict[str, str] = {}
    for line in _logical_lines(text):
        match = _KEY_END_RE.search(line)
        if match is None:
            key, rest = line, ""
        else:
            key, rest = line[:match.end() - 1], line[match.end() - 1:]
            rest = rest.lstrip(_BLANKS)
            if rest[:1] in ("=", ":"):
                rest = rest[1:].lstrip(_BLANKS)
        entries[_unescape(key)] = _unescape(rest)
    return entries


def default_search_path() -> List[Path]:
    """Directories from ``$LIVY_CLIENT_CONF_PATH``, then the working directory."""
    paths: List[Path] = []
    env_value = os.getenv(CONF_PATH_ENV)
    if env_value:
        paths.extend(Path(p) for p in env_value.split(os.pathsep) if p)
    paths.append(Path.cwd())
    return paths


def find_resource(name: str, search_path: Sequence[Union[str, Path]]) -> Optional[Path]:
    """Return the first ``dir / name`` that exists on the search path."""
    for directory in search_path:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def read_default_sources(
    names: Sequence[str] = DEFAULT_CONF_FILES,
    search_path: Optional[Sequence[Union[str, Path]]] = None,
) -> List[ConfSource]:
    """
    Locate and read the named default files.

    Missing files yield ``(name, None)``. Errors while reading a file that
    does exist are not caught: a half-read configuration must not be used.
    """
    if search_path is None:
        search_path = default_search_path()
    sources: List[ConfSource] = []
    for name in names:
        path = find_resource(name, search_path)
        if path is None:
            sources.append((name, None))
            continue
        logger.debug("Reading config defaults from %s", path)
        sources.append((str(path), path.read_text(encoding="utf-8")))
    return sources


__all__ = [
    "ClientConf",
    "CONF_PATH_ENV",
    "DEFAULT_CONF_FILES",
    "default_search_path",
    "find_resource",
    "parse_properties",
    "read_default_sources",
]
