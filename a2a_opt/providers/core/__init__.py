"""Provider lifecycle, settings and registration."""

from .base import Provider, ProviderSettings
from .decorators import provider, store_provider
from .provider_base import ProviderBase
from .registry import ProviderRegistry, provider_registry

__all__ = [
    "Provider",
    "ProviderBase",
    "ProviderSettings",
    "ProviderRegistry",
    "provider",
    "provider_registry",
    "store_provider",
]
