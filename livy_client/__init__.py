"""
Livy client builder.

Resolves a ``livy.uri`` plus configuration into a client by asking pluggable
client factories in registry order.

    from livy_client import LivyClientBuilder, register_factory

    register_factory(MyHttpClientFactory)
    client = LivyClientBuilder().set_uri("http://localhost:8998").build()
"""

from .builder import LIVY_SESSION_ID_KEY, LIVY_URI_KEY, LivyClientBuilder
from .conf import ClientConf, parse_properties, read_default_sources
from .errors import (
    FactoryError,
    InvalidURIError,
    LivyClientError,
    MissingURIError,
    NoProviderInstalledError,
    UnsupportedURIError,
)
from .factory import LivyClient, LivyClientFactory
from .redact import REDACTED_USERINFO, redact_uri
from .registry import ProviderRegistry, get_registry, register_factory
from .uri import parse_uri

__all__ = [
    "LIVY_SESSION_ID_KEY",
    "LIVY_URI_KEY",
    "LivyClientBuilder",
    "ClientConf",
    "parse_properties",
    "read_default_sources",
    "LivyClientError",
    "MissingURIError",
    "InvalidURIError",
    "NoProviderInstalledError",
    "UnsupportedURIError",
    "FactoryError",
    "LivyClient",
    "LivyClientFactory",
    "REDACTED_USERINFO",
    "redact_uri",
    "ProviderRegistry",
    "get_registry",
    "register_factory",
    "parse_uri",
]
