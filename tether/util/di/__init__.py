"""Dependency injection module.

Providers come in two kinds. Core providers (config, domain, application)
have a single implementation. Component providers (``oauth``,
``persistence``) are bases with a production subclass and, once the test
package is imported, a mock subclass; ``select_providers`` picks one per
component.
"""

from typing import Type

from tether.util.di.application import ProdApplicationProvider
from tether.util.di.base import Component, ProviderBase
from tether.util.di.core import ProdConfigProvider
from tether.util.di.domain import ProdDomainProvider
from tether.util.di.infrastructure import (
    OAuthProvider,
    PersistenceProvider,
    ProdOAuthProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    OAuthProvider,
    PersistenceProvider,
]


def mockable_components() -> set[Component]:
    """Names of the components that can be swapped for mocks."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__mock_component__ is not None
    }


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Get the implementation of a provider base.

    Args:
        base: Provider base class
        use_mock: Whether to pick the mock implementation

    Returns:
        Provider class (not instantiated). Core providers are returned as-is.

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    if base.__mock_component__ is None:
        return base

    for impl in base.__subclasses__():
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


def select_providers(mocked: set[Component] | None = None) -> list[ProviderBase]:
    """Instantiate one provider per entry in PROVIDERS.

    Args:
        mocked: Components to take the mock implementation for

    Returns:
        Provider instances ready for ``make_async_container``

    Raises:
        ValueError: If an unknown component is named
    """
    mocked = mocked or set()
    unknown = mocked - mockable_components()
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    return [
        get_provider(base, use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]


__all__ = [
    "Component",
    "OAuthProvider",
    "PROVIDERS",
    "PersistenceProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdOAuthProvider",
    "ProdPersistenceProvider",
    "ProviderBase",
    "get_provider",
    "mockable_components",
    "select_providers",
]
