"""Mapping between PlanTasks and A2A task metadata.

An A2A task created for a PlanTask carries the hierarchy ids in its
generic metadata bag under the "opt/v1/" namespace. Messages may also
embed a full Objective or Plan snapshot.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError

from a2a_opt.core.models import WireModel
from a2a_opt.extension.constants import (
    METADATA_DEPENDENCIES,
    METADATA_OBJECTIVE,
    METADATA_OBJECTIVE_ID,
    METADATA_PLAN,
    METADATA_PLAN_ID,
    METADATA_TASK_INDEX,
)
from a2a_opt.hierarchy.models import Objective, Plan, PlanTask

logger = logging.getLogger(__name__)


class OPTTaskLink(WireModel):
    """Hierarchy position of an A2A task, as read back from its metadata."""

    objective_id: str
    plan_id: str
    task_index: int = 0
    dependencies: Optional[List[str]] = Field(None, description="Omitted when the task has none")


def set_opt_metadata(metadata: Dict[str, Any], plan_task: PlanTask) -> Dict[str, Any]:
    """Write the hierarchy ids of a PlanTask into A2A task metadata.

    The dict is updated in place and returned. Dependencies are only
    written when there is at least one.
    """
    metadata[METADATA_OBJECTIVE_ID] = plan_task.objective_id
    metadata[METADATA_PLAN_ID] = plan_task.plan_id
    metadata[METADATA_TASK_INDEX] = plan_task.task_index
    if plan_task.dependencies:
        metadata[METADATA_DEPENDENCIES] = list(plan_task.dependencies)
    return metadata


def get_opt_metadata(metadata: Optional[Mapping[str, Any]]) -> Optional[OPTTaskLink]:
    """Read the hierarchy ids back from A2A task metadata.

    Returns:
        The link, or None unless both objective and plan ids are strings
    """
    if not metadata:
        return None

    objective_id = metadata.get(METADATA_OBJECTIVE_ID)
    plan_id = metadata.get(METADATA_PLAN_ID)
    if not isinstance(objective_id, str) or not isinstance(plan_id, str):
        return None

    task_index = metadata.get(METADATA_TASK_INDEX)
    if isinstance(task_index, bool) or not isinstance(task_index, int):
        task_index = 0

    dependencies = metadata.get(METADATA_DEPENDENCIES)
    if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
        dependencies = None

    return OPTTaskLink(
        objective_id=objective_id,
        plan_id=plan_id,
        task_index=task_index,
        dependencies=dependencies,
    )


def is_opt_task(metadata: Optional[Mapping[str, Any]]) -> bool:
    """Check whether metadata marks an OPT managed task."""
    return get_opt_metadata(metadata) is not None


def set_objective_in_metadata(metadata: Dict[str, Any], objective: Objective) -> Dict[str, Any]:
    metadata[METADATA_OBJECTIVE] = objective.to_wire()
    return metadata


def get_objective_from_metadata(metadata: Optional[Mapping[str, Any]]) -> Optional[Objective]:
    if not metadata:
        return None
    snapshot = metadata.get(METADATA_OBJECTIVE)
    if not isinstance(snapshot, Mapping):
        return None
    try:
        return Objective.model_validate(snapshot)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed objective snapshot in metadata: {e}")
        return None


def set_plan_in_metadata(metadata: Dict[str, Any], plan: Plan) -> Dict[str, Any]:
    metadata[METADATA_PLAN] = plan.to_wire()
    return metadata


def get_plan_from_metadata(metadata: Optional[Mapping[str, Any]]) -> Optional[Plan]:
    if not metadata:
        return None
    snapshot = metadata.get(METADATA_PLAN)
    if not isinstance(snapshot, Mapping):
        return None
    try:
        return Plan.model_validate(snapshot)
    except ValidationError as e:
        logger.debug(f"Ignoring malformed plan snapshot in metadata: {e}")
        return None
