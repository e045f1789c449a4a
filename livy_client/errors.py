"""
Error hierarchy for client resolution.

Every error raised by ``LivyClientBuilder.build`` derives from
``LivyClientError`` and carries a stable ``code``. The builtin bases
(``ValueError`` / ``RuntimeError``) tell callers whether the request itself
was bad or the process is not set up to serve it.
"""

from __future__ import annotations

from typing import Any, Optional


class LivyClientError(Exception):
    """Base exception for all client resolution failures."""

    code = "LIVY_CLIENT_ERROR"


class MissingURIError(LivyClientError, ValueError):
    """``livy.uri`` is not set."""

    code = "MISSING_URI"

    def __init__(self, key: str):
        super().__init__(f"URI must be provided (set '{key}').")


class InvalidURIError(LivyClientError, ValueError):
    """``livy.uri`` is set but cannot be parsed as a URI."""

    code = "INVALID_URI"

    def __init__(self, reason: Optional[str] = None):
        # The offending text is never echoed: it may carry credentials.
        super().__init__(f"Invalid URI: {reason}." if reason else "Invalid URI.")
        self.reason = reason


class NoProviderInstalledError(LivyClientError, RuntimeError):
    """The registry holds no client factories."""

    code = "NO_PROVIDER_INSTALLED"

    def __init__(self):
        super().__init__("No LivyClientFactory implementation was found.")


class UnsupportedURIError(LivyClientError, ValueError):
    """Every registered factory declined the URI."""

    code = "UNSUPPORTED_URI"

    def __init__(self, redacted_uri: str):
        super().__init__(
            f"URI '{redacted_uri}' is not supported by any registered client factories."
        )
        self.uri = redacted_uri


class FactoryError(LivyClientError, RuntimeError):
    """A client factory raised while creating a client."""

    code = "FACTORY_ERROR"

    def __init__(self, factory: Any, cause: BaseException):
        name = type(factory).__name__
        super().__init__(f"Client factory {name} failed: {cause}")
        self.factory = factory


__all__ = [
    "LivyClientError",
    "MissingURIError",
    "InvalidURIError",
    "NoProviderInstalledError",
    "UnsupportedURIError",
    "FactoryError",
]
