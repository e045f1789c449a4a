# Client factory registry loaded from client_factories.yaml
from __future__ import annotations
import importlib
import logging
import os
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import yaml

from livy_client.factory import LivyClientFactory

logger = logging.getLogger(__name__)

FactoryConstructor = Callable[[], LivyClientFactory]

REGISTRY_ENV = "LIVY_CLIENT_FACTORIES_CONF"
DEFAULT_REGISTRY_PATH = os.path.join(os.path.dirname(__file__), "configs", "client_factories.yaml")


def _import_constructor(path: str) -> FactoryConstructor:
    module_name, attr = path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def _read_registry_file(path: str) -> List[Tuple[str, Any]]:
    """Return ``(label, constructor_or_dotted_path)`` pairs in file order."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"client_factories.yaml not found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    entries = config.get("client_factories") or []
    if not isinstance(entries, list):
        raise TypeError(f"'client_factories' in {path} must be a list of dotted paths")
    return [(str(entry), str(entry)) for entry in entries]


class ProviderRegistry:
    """
    Ordered, load-once collection of client factories.

    Constructors are either passed in explicitly or listed in a YAML file.
    The first call to ``factories()`` instantiates them, in order, and freezes
    the result; registration is closed from then on.
    """

    def __init__(
        self,
        constructors: Optional[Sequence[FactoryConstructor]] = None,
        registry_path: Optional[str] = None,
    ) -> None:
        self._constructors: Optional[List[FactoryConstructor]] = (
            list(constructors) if constructors is not None else None
        )
        self._registry_path = registry_path
        self._extra: List[FactoryConstructor] = []
        self._snapshot: Optional[Tuple[LivyClientFactory, ...]] = None
        self._failed: Dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def register_factory(self, constructor: FactoryConstructor) -> None:
        """Append a factory constructor. Only allowed before the first lookup."""
        with self._lock:
            if self._snapshot is not None:
                raise RuntimeError("Client factory registry is already loaded; register factories at startup.")
            self._extra.append(constructor)

    def _pending(self) -> List[Tuple[str, Any]]:
        if self._constructors is not None:
            pending = [(_label(c), c) for c in self._constructors]
        else:
            path = self._registry_path or os.getenv(REGISTRY_ENV) or DEFAULT_REGISTRY_PATH
            pending = _read_registry_file(path)
        pending.extend((_label(c), c) for c in self._extra)
        return pending

    def _load(self) -> Tuple[LivyClientFactory, ...]:
        factories: List[LivyClientFactory] = []
        for label, target in self._pending():
            try:
                constructor = _import_constructor(target) if isinstance(target, str) else target
                factory = constructor()
                if not callable(getattr(factory, "create_client", None)):
                    raise TypeError(f"{type(factory).__name__} has no create_client()")
            except Exception as e:
                self._failed[label] = str(e)
                logger.warning(f"Failed to load client factory '{label}': {e}")
                continue
            factories.append(factory)

        logger.debug("Loaded %d client factories", len(factories))
        return tuple(factories)

    def factories(self) -> Tuple[LivyClientFactory, ...]:
        """Return the factory snapshot, loading it on first use."""
        if self._snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = self._load()
        return self._snapshot

    def failed(self) -> Dict[str, str]:
        """Entries that could not be loaded, mapped to the error message."""
        self.factories()
        return dict(self._failed)

    def __iter__(self) -> Iterator[LivyClientFactory]:
        return iter(self.factories())

    def __len__(self) -> int:
        return len(self.factories())


def _label(constructor: Any) -> str:
    module = getattr(constructor, "__module__", None)
    name = getattr(constructor, "__qualname__", None) or type(constructor).__name__
    return f"{module}.{name}" if module else name


REGISTRY = ProviderRegistry()


def get_registry() -> ProviderRegistry:
    return REGISTRY


def register_factory(constructor: FactoryConstructor) -> None:
    """Register ``constructor`` with the process-wide registry."""
    REGISTRY.register_factory(constructor)


__all__ = [
    "DEFAULT_REGISTRY_PATH",
    "FactoryConstructor",
    "ProviderRegistry",
    "REGISTRY",
    "REGISTRY_ENV",
    "get_registry",
    "register_factory",
]
