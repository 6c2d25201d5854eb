"""In-memory OPT store implementation.

This module provides the reference implementation of the OPTStore
interface. It is suitable for testing, development and single-process
agents where persistence is not required.

WARNING: All data is volatile and lost when the process terminates.
"""

import asyncio
import logging
import re
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, PrivateAttr

from a2a_opt.core.errors.errors import InvalidParamsError, NotFoundError
from a2a_opt.core.errors.models import ValidationErrorDetail
from a2a_opt.hierarchy.models import (
    CreateObjectiveRequest,
    CreatePlanRequest,
    ListObjectivesRequest,
    ListObjectivesResponse,
    Objective,
    ObjectiveStatus,
    Plan,
    PlanStatus,
    PlanTask,
)
from a2a_opt.providers.core.decorators import store_provider
from a2a_opt.providers.store.base import OPTStore, OPTStoreSettings, StoreCounts
from a2a_opt.utils.ids import generate_id, timestamp

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# "task-<N>" refers to the N-th task of the same plan creation request.
TASK_PLACEHOLDER_PATTERN = re.compile(r"^task-(\d+)$")

INITIAL_TASK_STATUS = "pending"

_OBJECTIVE_IMMUTABLE: FrozenSet[str] = frozenset({"id", "created_at", "updated_at", "plans"})
_PLAN_IMMUTABLE: FrozenSet[str] = frozenset({"id", "objective_id", "created_at", "updated_at", "tasks"})
_TASK_IMMUTABLE: FrozenSet[str] = frozenset({"id", "plan_id", "objective_id", "task_index"})


def resolve_task_dependencies(dependencies: Optional[List[str]], sibling_ids: List[str]) -> List[str]:
    """Resolve positional placeholders against the ids of sibling tasks.

    Placeholders whose index is out of range are dropped. Strings that are
    not placeholders are kept unchanged.
    """
    resolved: List[str] = []
    for dependency in dependencies or []:
        match = TASK_PLACEHOLDER_PATTERN.match(dependency)
        if match is None:
            resolved.append(dependency)
            continue
        index = int(match.group(1))
        if index < len(sibling_ids):
            resolved.append(sibling_ids[index])
        else:
            logger.debug(f"Dropping unresolvable task dependency '{dependency}'")
    return resolved


def _merge(record: M, updates: Mapping[str, Any], immutable: FrozenSet[str]) -> M:
    """Apply a partial update and re-validate the result.

    Keys may be python field names or wire aliases; unknown keys and
    immutable fields are ignored.
    """
    fields = type(record).model_fields
    aliases = {info.alias: name for name, info in fields.items() if info.alias}
    data = record.model_dump()
    for key, value in updates.items():
        name = key if key in fields else aliases.get(key)
        if name is None or name in immutable:
            continue
        data[name] = value
    return type(record).model_validate(data)


@store_provider("memory-opt", settings_class=OPTStoreSettings)
class InMemoryOPTStore(OPTStore):
    """OPT store keeping every record in ordered dicts.

    All public coroutines hold a single asyncio lock for their whole body,
    so a cascading delete is never observed half done. Records are copied
    on the way in and out.
    """

    _objectives: Dict[str, Objective] = PrivateAttr(default_factory=dict)
    _plans: Dict[str, Plan] = PrivateAttr(default_factory=dict)
    _tasks: Dict[str, PlanTask] = PrivateAttr(default_factory=dict)
    _lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)

    def __init__(self, name: str = "memory-opt", provider_type: str = "opt_store", settings: Optional[OPTStoreSettings] = None):
        settings = settings or OPTStoreSettings()
        super().__init__(name=name, provider_type=provider_type, settings=settings)

    async def _initialize(self) -> None:
        logger.info(f"In-memory OPT store '{self.name}' initialized (volatile storage)")

    async def _shutdown(self) -> None:
        self.clear()
        logger.info(f"In-memory OPT store '{self.name}' shutdown (all data lost)")

    # -- internal helpers (callers hold the lock) -----------------------------

    def _tasks_for_plan(self, plan_id: str) -> List[PlanTask]:
        tasks = [t.model_copy(deep=True) for t in self._tasks.values() if t.plan_id == plan_id]
        tasks.sort(key=lambda t: t.task_index)
        return tasks

    def _populated_plan(self, plan: Plan) -> Plan:
        return plan.model_copy(update={"tasks": self._tasks_for_plan(plan.id)}, deep=True)

    def _plans_for_objective(self, objective_id: str) -> List[Plan]:
        # Ties on created_at fall back to insertion order.
        plans = [
            (seq, plan) for seq, plan in enumerate(self._plans.values())
            if plan.objective_id == objective_id
        ]
        plans.sort(key=lambda item: (item[1].created_at, item[0]))
        return [self._populated_plan(plan) for _, plan in plans]

    def _populated_objective(self, objective: Objective) -> Objective:
        return objective.model_copy(
            update={"plans": self._plans_for_objective(objective.id)}, deep=True
        )

    def _remove_plan(self, plan_id: str) -> None:
        task_ids = [t.id for t in self._tasks.values() if t.plan_id == plan_id]
        for task_id in task_ids:
            del self._tasks[task_id]
        del self._plans[plan_id]

    @staticmethod
    def _decode_page_token(page_token: Optional[str]) -> int:
        if not page_token:
            return 0
        if not (page_token.isascii() and page_token.isdigit()):
            raise InvalidParamsError(
                f"Invalid pageToken: {page_token}",
                [ValidationErrorDetail(
                    location="pageToken",
                    message="Page token must be a value returned as nextPageToken",
                    error_type="value_error",
                )],
                operation="list_objectives",
            )
        return int(page_token)

    # -- Objectives -------------------------------------------------------------

    async def create_objective(self, request: CreateObjectiveRequest) -> Objective:
        async with self._lock:
            now = timestamp()
            objective = Objective(
                id=generate_id("obj"),
                name=request.name,
                description=request.description,
                status=ObjectiveStatus.SUBMITTED,
                metadata=dict(request.metadata or {}),
                created_at=now,
                updated_at=now,
            )
            self._objectives[objective.id] = objective
            logger.debug(f"Created objective {objective.id}")
            return objective.model_copy(update={"plans": []}, deep=True)

    async def get_objective(self, objective_id: str) -> Optional[Objective]:
        async with self._lock:
            objective = self._objectives.get(objective_id)
            if objective is None:
                return None
            return self._populated_objective(objective)

    async def list_objectives(self, request: ListObjectivesRequest) -> ListObjectivesResponse:
        async with self._lock:
            matches = [
                (seq, objective) for seq, objective in enumerate(self._objectives.values())
                if request.status is None or objective.status == request.status
            ]
            # Newest first; among equal timestamps the later insertion wins.
            matches.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)

            page_size = request.page_size or self.settings.default_page_size
            start = self._decode_page_token(request.page_token)
            end = start + page_size
            page = [objective.model_copy(deep=True) for _, objective in matches[start:end]]

            return ListObjectivesResponse(
                objectives=page,
                next_page_token=str(end) if end < len(matches) else None,
                total_size=len(matches),
            )

    async def update_objective(self, objective_id: str, updates: Mapping[str, Any]) -> Optional[Objective]:
        async with self._lock:
            objective = self._objectives.get(objective_id)
            if objective is None:
                return None
            updated = _merge(objective, updates, _OBJECTIVE_IMMUTABLE)
            updated.updated_at = timestamp()
            self._objectives[objective_id] = updated
            logger.debug(f"Updated objective {objective_id}")
            return self._populated_objective(updated)

    async def delete_objective(self, objective_id: str) -> bool:
        async with self._lock:
            if objective_id not in self._objectives:
                return False
            plan_ids = [p.id for p in self._plans.values() if p.objective_id == objective_id]
            for plan_id in plan_ids:
                self._remove_plan(plan_id)
            del self._objectives[objective_id]
            logger.info(f"Deleted objective {objective_id} with {len(plan_ids)} plan(s)")
            return True

    # -- Plans ------------------------------------------------------------------

    async def create_plan(self, request: CreatePlanRequest) -> Plan:
        async with self._lock:
            now = timestamp()
            plan = Plan(
                id=generate_id("plan"),
                objective_id=request.objective_id,
                name=request.name,
                description=request.description,
                status=PlanStatus.PENDING,
                dependencies=list(request.dependencies or []),
                metadata=dict(request.metadata or {}),
                created_at=now,
                updated_at=now,
            )

            specs = request.tasks or []
            task_ids = [generate_id("task") for _ in specs]
            tasks = [
                PlanTask(
                    id=task_ids[index],
                    plan_id=plan.id,
                    objective_id=request.objective_id,
                    name=spec.name,
                    description=spec.description,
                    task_index=index,
                    dependencies=resolve_task_dependencies(spec.dependencies, task_ids),
                    status=INITIAL_TASK_STATUS,
                    metadata={},
                )
                for index, spec in enumerate(specs)
            ]

            self._plans[plan.id] = plan
            for task in tasks:
                self._tasks[task.id] = task
            logger.debug(f"Created plan {plan.id} with {len(tasks)} task(s) for objective {request.objective_id}")
            return self._populated_plan(plan)

    async def get_plan(self, plan_id: str) -> Optional[Plan]:
        async with self._lock:
            plan = self._plans.get(plan_id)
            if plan is None:
                return None
            return self._populated_plan(plan)

    async def get_plans_for_objective(self, objective_id: str) -> List[Plan]:
        async with self._lock:
            return self._plans_for_objective(objective_id)

    async def update_plan(self, plan_id: str, updates: Mapping[str, Any]) -> Optional[Plan]:
        async with self._lock:
            plan = self._plans.get(plan_id)
            if plan is None:
                return None
            updated = _merge(plan, updates, _PLAN_IMMUTABLE)
            updated.updated_at = timestamp()
            self._plans[plan_id] = updated
            logger.debug(f"Updated plan {plan_id}")
            return self._populated_plan(updated)

    async def delete_plan(self, plan_id: str) -> bool:
        async with self._lock:
            if plan_id not in self._plans:
                return False
            self._remove_plan(plan_id)
            logger.info(f"Deleted plan {plan_id}")
            return True

    # -- Tasks ------------------------------------------------------------------

    async def get_tasks_for_plan(self, plan_id: str) -> List[PlanTask]:
        async with self._lock:
            return self._tasks_for_plan(plan_id)

    async def update_plan_task(self, task_id: str, updates: Mapping[str, Any]) -> Optional[PlanTask]:
        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            updated = _merge(task, updates, _TASK_IMMUTABLE)
            self._tasks[task_id] = updated
            return updated.model_copy(deep=True)

    async def link_external_task(self, task_id: str, a2a_task_id: str) -> None:
        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError("PlanTask", task_id, operation="link_external_task")
            task.a2a_task_id = a2a_task_id
            logger.debug(f"Linked plan task {task_id} to A2A task {a2a_task_id}")

    # -- Debug utilities --------------------------------------------------------

    def clear(self) -> None:
        """Clear all data. Useful for testing."""
        self._objectives.clear()
        self._plans.clear()
        self._tasks.clear()

    def get_counts(self) -> StoreCounts:
        """Get record counts for debugging."""
        return StoreCounts(
            objectives=len(self._objectives),
            plans=len(self._plans),
            tasks=len(self._tasks),
        )
