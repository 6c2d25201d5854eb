from collections.abc import Callable
from typing import Any, Dict, Optional

from .provider_base import ProviderBase
from .registry import provider_registry


def provider(
    name: str, provider_type: str, *, settings_class: Optional[type] = None
) -> Callable[[type], type]:
    """
    Register a class as a provider factory.
    Only ProviderBase subclasses (pydantic v2) can be registered, and a
    settings_class is required so the provider has a single source of
    configuration. Fails fast otherwise.
    """
    if settings_class is None:
        raise TypeError(
            f"Provider '{name}' must supply a 'settings_class' argument (Pydantic v2 class)"
        )

    def decorator(cls: type) -> type:
        if not isinstance(cls, type) or not issubclass(cls, ProviderBase):
            raise TypeError(
                f"Provider '{name}' must be a ProviderBase subclass (pydantic v2), got {type(cls)}"
            )

        def factory(runtime_settings_dict: Optional[Dict[str, Any]] = None) -> Any:
            # Runtime settings win; otherwise the settings class defaults apply.
            if runtime_settings_dict is not None:
                try:
                    final_settings = settings_class(**runtime_settings_dict)
                except Exception as e:
                    raise ValueError(
                        f"Error parsing runtime settings for '{name}' with {settings_class.__name__}: {e}. "
                        f"Input: {runtime_settings_dict}"
                    ) from e
            else:
                final_settings = settings_class()

            return cls(name=name, provider_type=provider_type, settings=final_settings)

        provider_registry.register_factory(
            name=name, factory=factory, provider_type=provider_type, settings_class=settings_class
        )
        cls.__provider_name__ = name  # type: ignore[attr-defined]
        cls.__provider_type__ = provider_type  # type: ignore[attr-defined]
        cls.settings_class = settings_class  # type: ignore[attr-defined]

        return cls

    return decorator


def store_provider(name: str, *, settings_class: Optional[type] = None) -> Callable[[type], type]:
    """Register a class as an OPT store provider factory."""
    return provider(name, "opt_store", settings_class=settings_class)
