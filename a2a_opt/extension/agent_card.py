"""Agent card declaration of the OPT extension."""

from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import Field, ValidationError

from a2a_opt.core.models import WireModel
from a2a_opt.extension.constants import OPT_EXTENSION_URI


class OPTExtensionParams(WireModel):
    """Limits an agent advertises for the extension.

    These are advertised only; the dispatch layer does not enforce them.
    """

    max_plans_per_objective: Optional[int] = Field(None, ge=1)
    max_tasks_per_plan: Optional[int] = Field(None, ge=1)
    persistence_enabled: Optional[bool] = None


class OPTExtensionDeclaration(WireModel):
    """Entry for capabilities.extensions of an agent card."""

    uri: str = OPT_EXTENSION_URI
    required: bool = False
    params: Optional[OPTExtensionParams] = None


DEFAULT_OPT_PARAMS = OPTExtensionParams(
    max_plans_per_objective=10,
    max_tasks_per_plan=50,
    persistence_enabled=False,
)


def create_extension_declaration(
    params: Optional[OPTExtensionParams] = None, required: bool = False
) -> OPTExtensionDeclaration:
    """Build the OPT entry for an agent card's capabilities.extensions."""
    return OPTExtensionDeclaration(uri=OPT_EXTENSION_URI, required=required, params=params)


def _declared_extensions(agent_card: Any) -> List[Mapping[str, Any]]:
    if not isinstance(agent_card, Mapping):
        return []
    capabilities = agent_card.get("capabilities")
    if not isinstance(capabilities, Mapping):
        return []
    extensions = capabilities.get("extensions")
    if not isinstance(extensions, list):
        return []
    return [ext for ext in extensions if isinstance(ext, Mapping)]


def _find_opt_extension(agent_card: Any) -> Optional[Mapping[str, Any]]:
    for extension in _declared_extensions(agent_card):
        if extension.get("uri") == OPT_EXTENSION_URI:
            return extension
    return None


def agent_supports_opt(agent_card: Any) -> bool:
    """Check whether an agent card (as a dict) declares the OPT extension."""
    return _find_opt_extension(agent_card) is not None


def get_opt_params(agent_card: Any) -> Optional[OPTExtensionParams]:
    """Get the OPT params an agent card declares, if any."""
    extension = _find_opt_extension(agent_card)
    if extension is None:
        return None
    params = extension.get("params")
    if not isinstance(params, Mapping):
        return None
    try:
        return OPTExtensionParams.model_validate(params)
    except ValidationError:
        return None
