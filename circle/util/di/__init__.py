"""Dependency injection module."""

from typing import Type

from circle.util.di.base import Component, ProviderBase
from circle.util.di.core import ProdConfigProvider
from circle.util.di.domain import ProdDomainProvider
from circle.util.di.infrastructure import (
    ContentProvider,
    NotificationProvider,
    PersistenceProvider,
    ProdContentProvider,
    ProdNotificationProvider,
    ProdPersistenceProvider,
)

# Single list - all providers treated uniformly
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    # Infrastructure components (mockable)
    PersistenceProvider,
    NotificationProvider,
    ContentProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve the provider class to instantiate for one PROVIDERS entry.

    Config and domain providers have no subclasses and are returned as-is.
    Infrastructure components (persistence, notifications, content) are
    abstract bases; their subclasses are told apart by ``__is_mock__``.

    Args:
        base: Entry of PROVIDERS
        use_mock: Select the mock subclass instead of the production one

    Returns:
        Provider class, not instantiated

    Raises:
        ValueError: If the component has no subclass of the requested kind
    """
    candidates = base.__subclasses__()
    if not candidates:
        return base

    for candidate in candidates:
        if getattr(candidate, "__is_mock__", False) == use_mock:
            return candidate

    kind = "mock" if use_mock else "production"
    component = getattr(base, "__mock_component__", None) or base.__name__
    raise ValueError(f"No {kind} provider registered for {component}")


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    # Infrastructure base classes
    "ContentProvider",
    "NotificationProvider",
    "PersistenceProvider",
    # Infrastructure implementations
    "ProdContentProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
