"""Objective / Plan / PlanTask records and the RPC payload contracts.

Records use snake_case attributes in Python and camelCase names on the
wire (see WireModel). Child collections (Objective.plans, Plan.tasks) are
None when they were not populated and a list, possibly empty, when they
were.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from a2a_opt.core.models import WireModel


class ObjectiveStatus(str, Enum):
    """Status of an objective."""
    SUBMITTED = "submitted"
    PLANNING = "planning"
    WORKING = "working"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELED = "canceled"


class PlanStatus(str, Enum):
    """Status of a plan."""
    PENDING = "pending"
    WORKING = "working"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class PlanTask(WireModel):
    """Atomic work item inside a plan, optionally linked to an A2A task."""

    id: str = Field(..., description="Unique task id")
    plan_id: str = Field(..., description="Parent plan id")
    objective_id: str = Field(..., description="Parent objective id")
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    task_index: int = Field(..., ge=0, description="Order within the plan (0-indexed)")
    dependencies: Optional[List[str]] = Field(None, description="PlanTask ids that must complete first")
    a2a_task_id: Optional[str] = Field(None, alias="a2aTaskId", description="Linked A2A task id")
    status: Optional[str] = Field(None, description="Mirrors the linked A2A task state")
    metadata: Optional[Dict[str, Any]] = None


class Plan(WireModel):
    """Named, ordered approach belonging to one objective."""

    id: str
    objective_id: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: PlanStatus = PlanStatus.PENDING
    tasks: Optional[List[PlanTask]] = None
    dependencies: List[str] = Field(default_factory=list, description="Plan ids that must complete first")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str


class Objective(WireModel):
    """Top-level goal, root of the hierarchy."""

    id: str
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: ObjectiveStatus = ObjectiveStatus.SUBMITTED
    plans: Optional[List[Plan]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: str
    updated_at: str


# -- Request / response payloads -------------------------------------------------


class CreateObjectiveRequest(WireModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class GetObjectiveRequest(WireModel):
    id: str = Field(..., min_length=1)
    include_plans: Optional[bool] = None
    include_tasks: Optional[bool] = None


class ListObjectivesRequest(WireModel):
    status: Optional[ObjectiveStatus] = None
    page_size: Optional[int] = Field(None, ge=1)
    page_token: Optional[str] = None


class ListObjectivesResponse(WireModel):
    objectives: List[Objective] = Field(default_factory=list)
    next_page_token: Optional[str] = None
    total_size: int = 0


class ObjectiveResponse(WireModel):
    """Result of objectives/create, objectives/get and objectives/update."""

    objective: Objective


class UpdateObjectiveRequest(WireModel):
    id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[ObjectiveStatus] = None
    metadata: Optional[Dict[str, Any]] = None


class PlanResponse(WireModel):
    """Result of plans/create, plans/get and plans/update."""

    plan: Plan


class PlanTaskSpec(WireModel):
    """A task to create as part of plan creation.

    Dependencies may name sibling tasks of the same request positionally
    ("task-0", "task-1", ...) or reference existing task ids directly.
    """

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    dependencies: Optional[List[str]] = None


class CreatePlanRequest(WireModel):
    objective_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    tasks: Optional[List[PlanTaskSpec]] = None
    dependencies: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None


class GetPlanRequest(WireModel):
    id: str = Field(..., min_length=1)
    include_tasks: Optional[bool] = None


class UpdatePlanRequest(WireModel):
    id: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[PlanStatus] = None
    dependencies: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None
