"""OPT store provider base class.

This module defines the storage contract for the Objective -> Plan -> Task
hierarchy. Every method is a coroutine so that durable backends may suspend
on I/O; each call is expected to be atomic on its own, but no guarantee is
made across calls.

Lookups of unknown ids return None (or False for deletes) instead of
raising; turning a miss into a protocol error is the dispatch layer's job.
Status transition legality is also not checked here.
"""

from abc import abstractmethod
from typing import Any, List, Mapping, Optional

from pydantic import Field

from a2a_opt.core.models import StrictBaseModel
from a2a_opt.hierarchy.models import (
    CreateObjectiveRequest,
    CreatePlanRequest,
    ListObjectivesRequest,
    ListObjectivesResponse,
    Objective,
    Plan,
    PlanTask,
)
from a2a_opt.providers.core.base import Provider, ProviderSettings

DEFAULT_PAGE_SIZE = 10


class OPTStoreSettings(ProviderSettings):
    """Settings for OPT store providers.

    Attributes:
        default_page_size: Page size used by list_objectives when the caller omits one
    """

    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


class StoreCounts(StrictBaseModel):
    """Number of stored records per entity type."""

    objectives: int
    plans: int
    tasks: int


class OPTStore(Provider):
    """Base class for OPT store providers.

    Implement this to keep objectives and plans in your own backend.
    """

    def __init__(self, name: str = "opt-store", provider_type: str = "opt_store", settings: Optional[OPTStoreSettings] = None):
        """Initialize store provider.

        Args:
            name: Unique provider name
            provider_type: Provider type
            settings: Optional provider settings
        """
        super().__init__(name=name, provider_type=provider_type, settings=settings)

    # -- Objectives -------------------------------------------------------------

    @abstractmethod
    async def create_objective(self, request: CreateObjectiveRequest) -> Objective:
        """Create an objective in the initial status with an empty plan list.

        The name is assumed to have been validated by the caller.
        """
        raise NotImplementedError("Subclasses must implement create_objective()")

    @abstractmethod
    async def get_objective(self, objective_id: str) -> Optional[Objective]:
        """Get an objective with its plans (and their tasks) populated.

        Returns:
            The objective, or None if the id is unknown
        """
        raise NotImplementedError("Subclasses must implement get_objective()")

    @abstractmethod
    async def list_objectives(self, request: ListObjectivesRequest) -> ListObjectivesResponse:
        """List objectives newest first, optionally filtered by exact status.

        The page token is an opaque continuation value; next_page_token is
        omitted on the last page. Plans are not populated.

        Raises:
            InvalidParamsError: If the page token cannot be decoded
        """
        raise NotImplementedError("Subclasses must implement list_objectives()")

    @abstractmethod
    async def update_objective(self, objective_id: str, updates: Mapping[str, Any]) -> Optional[Objective]:
        """Apply a partial update to an objective.

        id and created_at are never overwritten; updated_at is always refreshed.

        Returns:
            The updated objective, or None if the id is unknown
        """
        raise NotImplementedError("Subclasses must implement update_objective()")

    @abstractmethod
    async def delete_objective(self, objective_id: str) -> bool:
        """Delete an objective together with all of its plans and tasks.

        Returns:
            False if the id is unknown, True otherwise
        """
        raise NotImplementedError("Subclasses must implement delete_objective()")

    # -- Plans ------------------------------------------------------------------

    @abstractmethod
    async def create_plan(self, request: CreatePlanRequest) -> Plan:
        """Create a plan and, atomically, its tasks.

        Task dependencies written as "task-<N>" are resolved to the id of the
        N-th task of the same request; out-of-range placeholders are dropped;
        any other string is kept as a literal task id. The objective is
        assumed to exist.
        """
        raise NotImplementedError("Subclasses must implement create_plan()")

    @abstractmethod
    async def get_plan(self, plan_id: str) -> Optional[Plan]:
        """Get a plan with its tasks populated in index order."""
        raise NotImplementedError("Subclasses must implement get_plan()")

    @abstractmethod
    async def get_plans_for_objective(self, objective_id: str) -> List[Plan]:
        """Get the plans of an objective oldest first, tasks populated."""
        raise NotImplementedError("Subclasses must implement get_plans_for_objective()")

    @abstractmethod
    async def update_plan(self, plan_id: str, updates: Mapping[str, Any]) -> Optional[Plan]:
        """Apply a partial update to a plan. objective_id is immutable."""
        raise NotImplementedError("Subclasses must implement update_plan()")

    @abstractmethod
    async def delete_plan(self, plan_id: str) -> bool:
        """Delete a plan and its tasks."""
        raise NotImplementedError("Subclasses must implement delete_plan()")

    # -- Tasks ------------------------------------------------------------------

    @abstractmethod
    async def get_tasks_for_plan(self, plan_id: str) -> List[PlanTask]:
        """Get the tasks of a plan in index order."""
        raise NotImplementedError("Subclasses must implement get_tasks_for_plan()")

    @abstractmethod
    async def update_plan_task(self, task_id: str, updates: Mapping[str, Any]) -> Optional[PlanTask]:
        """Apply a partial update to a task.

        id, plan_id, objective_id and task_index are immutable.
        """
        raise NotImplementedError("Subclasses must implement update_plan_task()")

    @abstractmethod
    async def link_external_task(self, task_id: str, a2a_task_id: str) -> None:
        """Link a plan task to an A2A task, replacing any previous link.

        Raises:
            NotFoundError: If the task id is unknown
        """
        raise NotImplementedError("Subclasses must implement link_external_task()")
