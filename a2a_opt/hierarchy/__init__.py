"""Objective -> Plan -> Task hierarchy: records and status rules."""

from a2a_opt.hierarchy.models import (
    CreateObjectiveRequest,
    CreatePlanRequest,
    GetObjectiveRequest,
    GetPlanRequest,
    ListObjectivesRequest,
    ListObjectivesResponse,
    Objective,
    ObjectiveResponse,
    ObjectiveStatus,
    Plan,
    PlanResponse,
    PlanStatus,
    PlanTask,
    PlanTaskSpec,
    UpdateObjectiveRequest,
    UpdatePlanRequest,
)
from a2a_opt.hierarchy.transitions import (
    OBJECTIVE_TRANSITIONS,
    PLAN_TRANSITIONS,
    is_terminal_objective_status,
    is_terminal_plan_status,
    is_valid_objective_transition,
    is_valid_plan_transition,
)

__all__ = [
    "Objective",
    "ObjectiveStatus",
    "Plan",
    "PlanStatus",
    "PlanTask",
    "PlanTaskSpec",
    "CreateObjectiveRequest",
    "GetObjectiveRequest",
    "ListObjectivesRequest",
    "ListObjectivesResponse",
    "ObjectiveResponse",
    "UpdateObjectiveRequest",
    "CreatePlanRequest",
    "GetPlanRequest",
    "UpdatePlanRequest",
    "PlanResponse",
    "OBJECTIVE_TRANSITIONS",
    "PLAN_TRANSITIONS",
    "is_valid_objective_transition",
    "is_valid_plan_transition",
    "is_terminal_objective_status",
    "is_terminal_plan_status",
]
