"""A2A OPT: Objective -> Plan -> Task hierarchy for A2A agents.

Adds objectives and plans on top of single-level A2A tasks: a status
machine per level, a hierarchy store behind a provider interface, and a
JSON-RPC handler exposing the objectives/* and plans/* methods.
"""

from a2a_opt.core.errors import ErrorCode, OPTError
from a2a_opt.core.settings import OPTSettings, load_settings
from a2a_opt.extension import OPT_EXTENSION_URI
from a2a_opt.hierarchy import (
    Objective,
    ObjectiveStatus,
    Plan,
    PlanStatus,
    PlanTask,
    is_valid_objective_transition,
    is_valid_plan_transition,
)
from a2a_opt.providers.store import InMemoryOPTStore, OPTStore, create_store
from a2a_opt.rpc import OPTHandler, StatusChangeEvent

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "OPTError",
    "OPTSettings",
    "load_settings",
    "OPT_EXTENSION_URI",
    "Objective",
    "ObjectiveStatus",
    "Plan",
    "PlanStatus",
    "PlanTask",
    "is_valid_objective_transition",
    "is_valid_plan_transition",
    "OPTStore",
    "InMemoryOPTStore",
    "create_store",
    "OPTHandler",
    "StatusChangeEvent",
    "__version__",
]
