"""Store factory.

Creates OPT store providers registered through @store_provider by name,
converting plain dict settings to the provider's settings class.
"""

import logging
from typing import Any, Dict, Optional, Union, cast

from a2a_opt.providers.core.base import ProviderSettings
from a2a_opt.providers.core.registry import provider_registry
from a2a_opt.providers.store.base import OPTStore

# Imported for its registration side effect.
from a2a_opt.providers.store.memory_store import InMemoryOPTStore  # noqa: F401

logger = logging.getLogger(__name__)

STORE_PROVIDER_TYPE = "opt_store"


def create_store(
    name: str = "memory-opt",
    settings: Optional[Union[ProviderSettings, Dict[str, Any]]] = None,
) -> OPTStore:
    """Create an OPT store provider by registered name.

    Args:
        name: Registered store provider name
        settings: Settings instance or dict of settings values

    Returns:
        A new, not yet initialized store

    Raises:
        KeyError: If no store is registered under that name
        ValueError: If the settings are rejected by the provider's settings class
    """
    if isinstance(settings, ProviderSettings):
        settings = settings.model_dump()
    store = provider_registry.create(STORE_PROVIDER_TYPE, name, settings)
    logger.debug(f"Created store provider '{name}'")
    return cast(OPTStore, store)
