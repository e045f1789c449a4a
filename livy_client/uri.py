# All comments are in English.
from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from livy_client.errors import InvalidURIError

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_ILLEGAL_CHARS_RE = re.compile(r'[\s<>"{}|\\^`\x00-\x1f\x7f]')
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_uri(text: str) -> SplitResult:
    """
    Parse ``text`` into a ``SplitResult``, rejecting strings that are not URIs.

    ``urlsplit`` accepts nearly anything, so characters that may not appear
    unescaped in a URI, broken percent-escapes, a malformed scheme and a
    non-numeric port are checked here.

    Raises:
        InvalidURIError: the text is not a syntactically valid URI.
    """
    if not isinstance(text, str):
        raise InvalidURIError("expected a string")
    if _ILLEGAL_CHARS_RE.search(text):
        raise InvalidURIError("illegal character")
    if _BAD_ESCAPE_RE.search(text):
        raise InvalidURIError("malformed escape sequence")

    head = re.split(r"[/?#]", text, maxsplit=1)[0]
    if ":" in head:
        scheme, _, rest = text.partition(":")
        if not _SCHEME_RE.match(scheme):
            raise InvalidURIError("expected scheme name")
        if not rest:
            raise InvalidURIError("expected scheme-specific part")

    try:
        parts = urlsplit(text)
        # Port is parsed lazily; touching it validates the authority.
        parts.port
    except ValueError as exc:
        raise InvalidURIError(str(exc)) from exc
    return parts


__all__ = ["parse_uri"]
