# All comments are in English.
from __future__ import annotations

from typing import Union
from urllib.parse import SplitResult, quote, urlsplit, urlunsplit

# "[redacted]", escaped so the result still parses as a URI.
REDACTED_USERINFO = quote("[redacted]", safe="")


def redact_uri(uri: Union[str, SplitResult]) -> SplitResult:
    """Replace the userinfo of ``uri`` with a fixed placeholder.

    Only the part of the netloc before the last ``@`` changes; host, port and
    every other component are kept as they are. URIs without userinfo come
    back unchanged, and redacting twice gives the same result as once.
    """
    parts = urlsplit(uri) if isinstance(uri, str) else uri
    _, sep, hostport = parts.netloc.rpartition("@")
    if not sep:
        return parts
    return parts._replace(netloc=f"{REDACTED_USERINFO}@{hostport}")


def redacted_str(uri: Union[str, SplitResult]) -> str:
    return urlunsplit(redact_uri(uri))


__all__ = ["REDACTED_USERINFO", "redact_uri", "redacted_str"]
