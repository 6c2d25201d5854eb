"""Provider base implementation with settings and lifecycle management.

This module provides the foundation for storage providers: typed settings,
idempotent initialization guarded by a lock, and graceful shutdown.
"""

import asyncio
import logging
from typing import Any, Optional, TypeVar, cast

from pydantic import PrivateAttr

from a2a_opt.core.models import StrictBaseModel

from .provider_base import ProviderBase

logger = logging.getLogger(__name__)


class ProviderSettings(StrictBaseModel):
    """Base settings for providers.

    Carries no fields of its own; each provider type declares a subclass
    with the options it reads.
    """


T = TypeVar('T', bound=ProviderSettings)


class Provider(ProviderBase[T]):
    """Base class for all providers with lifecycle management.

    This class provides:
    1. Consistent initialization and cleanup pattern
    2. Configuration via settings models
    3. Clean error propagation on failed initialization
    """

    _initialized: bool = PrivateAttr(default=False)
    _setup_lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)

    def __init__(
        self,
        name: str,
        provider_type: str,
        settings: Optional[Any] = None,
        **kwargs: Any
    ):
        if settings is None:
            settings = cast(T, self._default_settings())

        super().__init__(name=name, provider_type=provider_type, settings=settings, **kwargs)
        logger.debug(f"Created provider: {name} ({self.provider_type}) with settings: {self.settings}")

    @property
    def initialized(self) -> bool:
        """Check if provider is initialized."""
        return self._initialized

    def _default_settings(self) -> ProviderSettings:
        """Create default settings instance.

        Raises:
            TypeError: If the provider class does not declare a settings class
        """
        settings_class = getattr(self.__class__, 'settings_class', None)
        if settings_class is None:
            raise TypeError(
                f"Provider class {self.__class__.__name__} must specify settings type. "
                f"Use @provider(settings_class=YourSettings)."
            )
        settings_instance = settings_class()
        if not isinstance(settings_instance, ProviderSettings):
            raise TypeError(f"Settings class must return ProviderSettings instance, got {type(settings_instance)}")
        return settings_instance

    async def initialize(self) -> None:
        """Initialize the provider.

        Safe to call more than once; only the first call does any work.
        """
        if self._initialized:
            return

        async with self._setup_lock:
            if self._initialized:
                return

            try:
                await self._initialize()
            except Exception as e:
                logger.error(f"Failed to initialize provider '{self.name}': {str(e)}")
                raise
            self._initialized = True
            logger.info(f"Provider '{self.name}' initialized successfully")

    async def shutdown(self) -> None:
        """Close provider resources.

        Shutdown errors are logged and not re-raised so that callers can
        tear down several providers in a row.
        """
        if not self._initialized:
            return

        try:
            await self._shutdown()
            self._initialized = False
            logger.info(f"Provider '{self.name}' shut down successfully")
        except Exception as e:
            logger.error(f"Error shutting down provider '{self.name}': {str(e)}")

    async def _initialize(self) -> None:
        """Concrete initialization logic implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement _initialize().")

    async def _shutdown(self) -> None:
        """Concrete shutdown logic implemented by subclasses.

        Default implementation does nothing.
        """
        pass
