"""A2A glue for the OPT extension: activation, metadata and agent card helpers."""

from a2a_opt.extension.activation import (
    build_extensions_header,
    is_opt_activated,
    parse_extensions_header,
)
from a2a_opt.extension.agent_card import (
    DEFAULT_OPT_PARAMS,
    OPTExtensionDeclaration,
    OPTExtensionParams,
    agent_supports_opt,
    create_extension_declaration,
    get_opt_params,
)
from a2a_opt.extension.constants import (
    A2A_EXTENSIONS_HEADER,
    METADATA_DEPENDENCIES,
    METADATA_OBJECTIVE,
    METADATA_OBJECTIVE_ID,
    METADATA_PLAN,
    METADATA_PLAN_ID,
    METADATA_TASK_INDEX,
    OPT_EXTENSION_URI,
    OPT_METADATA_PREFIX,
)
from a2a_opt.extension.metadata import (
    OPTTaskLink,
    get_objective_from_metadata,
    get_opt_metadata,
    get_plan_from_metadata,
    is_opt_task,
    set_objective_in_metadata,
    set_opt_metadata,
    set_plan_in_metadata,
)

__all__ = [
    "OPT_EXTENSION_URI",
    "A2A_EXTENSIONS_HEADER",
    "OPT_METADATA_PREFIX",
    "METADATA_OBJECTIVE_ID",
    "METADATA_PLAN_ID",
    "METADATA_TASK_INDEX",
    "METADATA_DEPENDENCIES",
    "METADATA_OBJECTIVE",
    "METADATA_PLAN",
    "is_opt_activated",
    "parse_extensions_header",
    "build_extensions_header",
    "OPTTaskLink",
    "set_opt_metadata",
    "get_opt_metadata",
    "is_opt_task",
    "set_objective_in_metadata",
    "get_objective_from_metadata",
    "set_plan_in_metadata",
    "get_plan_from_metadata",
    "OPTExtensionParams",
    "OPTExtensionDeclaration",
    "DEFAULT_OPT_PARAMS",
    "create_extension_declaration",
    "agent_supports_opt",
    "get_opt_params",
]
