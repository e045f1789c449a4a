# All comments are in English.
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Mapping, Optional
from urllib.parse import SplitResult


class LivyClient(ABC):
    """Handle to a remote Livy session. Owned by whoever called ``build()``."""

    @abstractmethod
    def stop(self, shutdown_context: bool) -> None:
        """Release the client; with ``shutdown_context`` also end the remote session."""
        raise NotImplementedError


class LivyClientFactory(ABC):
    """Pluggable capability that may accept or decline a connection URI."""

    @abstractmethod
    def create_client(self, uri: SplitResult, conf: Mapping[str, str]) -> Optional[LivyClient]:
        """
        Create a client for ``uri`` or return ``None`` if this factory does not handle it.

        Declining must be signalled with ``None`` only. Any exception raised here
        aborts resolution; no other factory is tried afterwards.

        Args:
            uri: Parsed value of ``livy.uri``.
            conf: Read-only snapshot of the builder configuration. ``livy.sessionId``,
                when present, names an existing session to attach to.
        """
        raise NotImplementedError
