"""
Builder that resolves a configuration into a Livy client.

The builder owns a ``ClientConf``, optionally seeded from the default files on
the search path. ``build()`` asks every registered client factory, in
registry order, to handle ``livy.uri``; the first one that returns a client
wins. A factory that raises stops resolution immediately.

Usage:
    client = (
        LivyClientBuilder()
        .set_uri("http://localhost:8998")
        .set_conf("spark.executor.memory", "2g")
        .build()
    )
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Union
from urllib.parse import SplitResult, urlunsplit

from livy_client.conf import ClientConf, read_default_sources
from livy_client.errors import (
    FactoryError,
    InvalidURIError,
    LivyClientError,
    MissingURIError,
    NoProviderInstalledError,
    UnsupportedURIError,
)
from livy_client.factory import LivyClient
from livy_client.redact import redact_uri, redacted_str
from livy_client.registry import ProviderRegistry, get_registry
from livy_client.uri import parse_uri

logger = logging.getLogger(__name__)

LIVY_URI_KEY = "livy.uri"
LIVY_SESSION_ID_KEY = "livy.sessionId"


class LivyClientBuilder:
    """Fluent builder for Livy clients."""

    def __init__(
        self,
        load_defaults: bool = True,
        *,
        search_path: Optional[Sequence[Union[str, Path]]] = None,
        registry: Optional[ProviderRegistry] = None,
    ):
        """
        Args:
            load_defaults: Read ``spark-defaults.conf`` then ``livy-client.conf``
                from the search path. Livy values win over Spark ones, and
                anything set on the builder wins over both.
            search_path: Directories to look for the default files in;
                defaults to ``$LIVY_CLIENT_CONF_PATH`` plus the working directory.
            registry: Factory registry to resolve against; defaults to the
                process-wide one.

        Raises:
            OSError: a default file exists but could not be read.
        """
        self._conf = ClientConf()
        self._registry = registry
        if load_defaults:
            self._conf.load_defaults(read_default_sources(search_path=search_path))

    @property
    def conf(self) -> Mapping[str, str]:
        return MappingProxyType(self._conf.to_dict())

    def set_uri(self, uri: Union[str, SplitResult]) -> "LivyClientBuilder":
        """
        Set the URI of the Livy server. If the URI contains ``sessions/{id}`` the
        chosen factory may attach to that session instead of creating one.
        """
        if isinstance(uri, SplitResult):
            uri = urlunsplit(uri)
        self._conf.set(LIVY_URI_KEY, uri)
        return self

    def set_session_id(self, session_id: int) -> "LivyClientBuilder":
        """Attach to an existing session; its original configuration is then used."""
        if isinstance(session_id, bool) or not isinstance(session_id, int):
            raise ValueError(f"Session id must be an int, got {type(session_id).__name__}.")
        if session_id < 0:
            raise ValueError(f"Session id must be non-negative, got {session_id}.")
        self._conf.set(LIVY_SESSION_ID_KEY, str(session_id))
        return self

    def set_conf(self, key: str, value: Optional[Any]) -> "LivyClientBuilder":
        """Set ``key``; a ``None`` value un-sets it, including loaded defaults."""
        self._conf.set(key, value)
        return self

    def set_all(self, props: Mapping[str, Any]) -> "LivyClientBuilder":
        self._conf.merge(props)
        return self

    def build(self) -> LivyClient:
        """
        Resolve the configuration into a client.

        Raises:
            MissingURIError, InvalidURIError, NoProviderInstalledError,
            UnsupportedURIError, FactoryError: see ``livy_client.errors``.
            FileNotFoundError, TypeError: the registry file is missing or
                malformed. Nothing is cached on failure, so every later call
                reads the file again until it is fixed.
        """
        uri_str = self._conf.get(LIVY_URI_KEY)
        if uri_str is None:
            raise MissingURIError(LIVY_URI_KEY)
        uri = parse_uri(uri_str)

        registry = self._registry if self._registry is not None else get_registry()
        factories = registry.factories()
        if not factories:
            raise NoProviderInstalledError()

        snapshot = MappingProxyType(self._conf.to_dict())
        shown_uri = redacted_str(uri)
        for factory in factories:
            name = type(factory).__name__
            logger.debug("Asking %s to handle %s", name, shown_uri)
            try:
                client = factory.create_client(uri, snapshot)
            except LivyClientError:
                raise
            except Exception as e:
                raise FactoryError(factory, e) from e
            if client is not None:
                logger.info("Client for %s created by %s", shown_uri, name)
                return client

        raise UnsupportedURIError(self._redact_for_error(uri))

    @staticmethod
    def _redact_for_error(uri: SplitResult) -> str:
        redacted = urlunsplit(redact_uri(uri))
        try:
            parse_uri(redacted)
        except InvalidURIError as e:
            # Redaction only swaps the userinfo, so this should not happen.
            raise RuntimeError("Redacted URI is no longer a valid URI.") from e
        return redacted


__all__ = ["LIVY_SESSION_ID_KEY", "LIVY_URI_KEY", "LivyClientBuilder"]
