"""
Dependency Injection Container.

Holds named providers for the application's collaborators (settings,
algorithm catalog, repository, procedure service) and builds them lazily.

Usage:
    from procedural_memory.core.container import get_container

    container = get_container()
    container.register("catalog", lambda c: load_algorithm_catalog())
    catalog = container.get("catalog")
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)

# A provider is a class (called with no arguments) or a callable taking the container
Factory = Union[type, Callable[["ServiceContainer"], Any]]
AsyncFactory = Callable[["ServiceContainer"], Any]


@dataclass
class _Provider:
    factory: Optional[Callable[..., Any]]
    is_async: bool = False
    singleton: bool = True


class ServiceContainer:
    """
    Named providers with lazy construction.

    Singletons are cached after the first build; transient providers run on
    every lookup. Async providers (storage setup needs awaiting) must be
    resolved through ``get_async``. Tests override a provider with
    ``register_instance``.
    """

    def __init__(self) -> None:
        self._providers: Dict[str, _Provider] = {}
        self._built: Dict[str, Any] = {}

    def register(self, name: str, factory: Factory, singleton: bool = True) -> None:
        """
        Register a synchronous provider.

        Args:
            name: Lookup key
            factory: Class, or callable receiving this container
            singleton: Cache the first built instance (default)
        """
        self._set_provider(name, _Provider(factory, is_async=False, singleton=singleton))

    def register_async(self, name: str, factory: AsyncFactory, singleton: bool = True) -> None:
        """Register a coroutine provider; resolve it with ``get_async``."""
        self._set_provider(name, _Provider(factory, is_async=True, singleton=singleton))

    def register_instance(self, name: str, instance: Any) -> None:
        """Bind ``name`` to an already built object."""
        self._providers[name] = _Provider(None)
        self._built[name] = instance
        logger.debug("Bound instance for %s", name)

    def _set_provider(self, name: str, provider: _Provider) -> None:
        self._providers[name] = provider
        self._built.pop(name, None)
        logger.debug(
            "Provider %s registered (async=%s, singleton=%s)",
            name,
            provider.is_async,
            provider.singleton,
        )

    def _lookup(self, name: str) -> _Provider:
        try:
            return self._providers[name]
        except KeyError:
            raise KeyError(f"Service '{name}' is not registered") from None

    def get(self, name: str) -> Any:
        """
        Resolve a synchronous service.

        Raises:
            KeyError: if nothing is registered under ``name``, or the
                provider is async and has not been built yet.
        """
        if name in self._built:
            return self._built[name]

        provider = self._lookup(name)
        if provider.is_async:
            raise KeyError(f"Service '{name}' is async; use get_async()")

        factory = provider.factory
        instance = factory() if isinstance(factory, type) else factory(self)
        return self._keep(name, provider, instance)

    async def get_async(self, name: str) -> Any:
        """Resolve any service, awaiting async providers."""
        if name in self._built:
            return self._built[name]

        provider = self._lookup(name)
        if not provider.is_async:
            return self.get(name)

        instance = await provider.factory(self)
        return self._keep(name, provider, instance)

    def _keep(self, name: str, provider: _Provider, instance: Any) -> Any:
        if provider.singleton:
            self._built[name] = instance
            logger.debug("Built singleton %s", name)
        return instance

    def has(self, name: str) -> bool:
        """True when a provider or instance exists for ``name``."""
        return name in self._providers

    def clear(self) -> None:
        """Drop every provider and built instance."""
        self._providers.clear()
        self._built.clear()


_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Return the process-wide container, creating it on first use."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Start over with an empty container (tests)."""
    global _container
    if _container is not None:
        _container.clear()
    _container = ServiceContainer()
