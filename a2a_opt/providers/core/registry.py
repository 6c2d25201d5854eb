"""Provider registry.

Providers register a factory under (provider_type, name) through the
@provider decorator; callers create instances by name, optionally passing
runtime settings as a dict.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, Dict, List, Optional, Tuple

from .base import Provider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Optional[Dict[str, Any]]], Provider]


class ProviderRegistry:
    """Registry of provider factories keyed by type and name."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._factories: Dict[Tuple[str, str], ProviderFactory] = {}
        self._settings_classes: Dict[Tuple[str, str], type] = {}

    def register_factory(
        self,
        provider_type: str,
        name: str,
        factory: ProviderFactory,
        settings_class: Optional[type] = None,
    ) -> None:
        """Register a factory for creating providers.

        Args:
            provider_type: Type of provider (e.g. "opt_store")
            name: Unique name for this provider
            factory: Callable that builds the provider from optional runtime settings
            settings_class: Pydantic model class for provider settings
        """
        key = (provider_type, name)
        with self._lock:
            if key in self._factories:
                logger.debug(f"Replacing factory for provider '{name}' (type: {provider_type})")
            self._factories[key] = factory
            if settings_class is not None:
                self._settings_classes[key] = settings_class
        logger.debug(f"Registered provider factory: {name} (type: {provider_type})")

    def contains(self, provider_type: str, name: str) -> bool:
        with self._lock:
            return (provider_type, name) in self._factories

    def list_providers(self, provider_type: Optional[str] = None) -> List[str]:
        """List registered provider names, optionally for one type."""
        with self._lock:
            return sorted(
                name for (ptype, name) in self._factories
                if provider_type is None or ptype == provider_type
            )

    def get_settings_class(self, provider_type: str, name: str) -> Optional[type]:
        with self._lock:
            return self._settings_classes.get((provider_type, name))

    def create(
        self,
        provider_type: str,
        name: str,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Provider:
        """Create a provider instance from its registered factory.

        Raises:
            KeyError: If no factory is registered under (provider_type, name)
        """
        with self._lock:
            factory = self._factories.get((provider_type, name))
        if factory is None:
            available = ", ".join(self.list_providers(provider_type)) or "none"
            raise KeyError(
                f"No provider '{name}' registered for type '{provider_type}' (available: {available})"
            )
        return factory(settings)


provider_registry = ProviderRegistry()
