"""Tests for the in-memory OPT store."""

import asyncio
import re

import pytest
import pytest_asyncio
from pydantic import ValidationError

from a2a_opt.core.errors import InvalidParamsError, NotFoundError
from a2a_opt.hierarchy.models import (
    CreateObjectiveRequest,
    CreatePlanRequest,
    ListObjectivesRequest,
    ObjectiveStatus,
    PlanStatus,
    PlanTaskSpec,
)
from a2a_opt.providers.store.base import OPTStore, OPTStoreSettings, StoreCounts
from a2a_opt.providers.store.memory_store import InMemoryOPTStore, resolve_task_dependencies

TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestInMemoryOPTStoreSetup:
    """Test store construction and lifecycle."""

    def test_defaults(self):
        store = InMemoryOPTStore()

        assert isinstance(store, OPTStore)
        assert store.name == "memory-opt"
        assert store.provider_type == "opt_store"
        assert store.settings.default_page_size == 10

    @pytest.mark.asyncio
    async def test_shutdown_clears_data(self, store, make_objective):
        await make_objective()

        await store.shutdown()

        assert store.get_counts() == StoreCounts(objectives=0, plans=0, tasks=0)
        assert store.initialized is False


class TestObjectives:
    """Test objective operations."""

    @pytest.mark.asyncio
    async def test_create_objective(self, store):
        objective = await store.create_objective(
            CreateObjectiveRequest(name="Plan a trip", description="Two weeks", metadata={"owner": "ana"})
        )

        assert objective.id.startswith("obj-")
        assert objective.name == "Plan a trip"
        assert objective.description == "Two weeks"
        assert objective.status == ObjectiveStatus.SUBMITTED
        assert objective.plans == []
        assert objective.metadata == {"owner": "ana"}
        assert TIMESTAMP_PATTERN.match(objective.created_at)
        assert objective.created_at == objective.updated_at

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store, make_objective):
        objective = await make_objective(metadata={"k": "v"})

        objective.name = "mutated"
        objective.metadata["k"] = "changed"

        stored = await store.get_objective(objective.id)
        assert stored.name == "Plan a trip"
        assert stored.metadata == {"k": "v"}

    @pytest.mark.asyncio
    async def test_get_unknown_objective(self, store):
        assert await store.get_objective("obj-missing") is None

    @pytest.mark.asyncio
    async def test_get_objective_populates_plans_and_tasks(self, store, make_objective, make_plan):
        objective = await make_objective()
        plan = await make_plan(objective.id, task_names=["A", "B"])

        fetched = await store.get_objective(objective.id)

        assert [p.id for p in fetched.plans] == [plan.id]
        assert [t.name for t in fetched.plans[0].tasks] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_update_objective(self, store, make_objective):
        objective = await make_objective()

        updated = await store.update_objective(
            objective.id, {"name": "Plan a longer trip", "status": "planning", "metadata": {"x": 1}}
        )

        assert updated.name == "Plan a longer trip"
        assert updated.status == ObjectiveStatus.PLANNING
        assert updated.metadata == {"x": 1}
        assert updated.updated_at >= objective.updated_at
        assert updated.plans == []

    @pytest.mark.asyncio
    async def test_update_objective_ignores_immutable_fields(self, store, make_objective):
        objective = await make_objective()

        updated = await store.update_objective(
            objective.id, {"id": "obj-other", "createdAt": "1999-01-01T00:00:00.000Z", "created_at": "x"}
        )

        assert updated.id == objective.id
        assert updated.created_at == objective.created_at
        assert await store.get_objective("obj-other") is None

    @pytest.mark.asyncio
    async def test_update_objective_accepts_wire_names(self, store, make_objective):
        objective = await make_objective()

        updated = await store.update_objective(objective.id, {"description": "set", "unknownKey": 1})

        assert updated.description == "set"

    @pytest.mark.asyncio
    async def test_update_objective_revalidates(self, store, make_objective):
        objective = await make_objective()

        with pytest.raises(ValidationError):
            await store.update_objective(objective.id, {"status": "finished"})

        stored = await store.get_objective(objective.id)
        assert stored.status == ObjectiveStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_update_unknown_objective(self, store):
        assert await store.update_objective("obj-missing", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_delete_objective_cascades(self, store, make_objective, make_plan):
        objective = await make_objective()
        first = await make_plan(objective.id, task_names=["A", "B"])
        second = await make_plan(objective.id, name="Book hotels", task_names=["C"])
        other = await make_objective(name="Unrelated")
        kept = await make_plan(other.id, task_names=["D"])

        assert await store.delete_objective(objective.id) is True

        assert await store.get_objective(objective.id) is None
        assert await store.get_plan(first.id) is None
        assert await store.get_plan(second.id) is None
        assert await store.get_plans_for_objective(objective.id) == []
        assert await store.get_tasks_for_plan(first.id) == []
        assert store.get_counts() == StoreCounts(objectives=1, plans=1, tasks=1)
        assert (await store.get_plan(kept.id)).tasks[0].name == "D"

    @pytest.mark.asyncio
    async def test_delete_unknown_objective(self, store):
        assert await store.delete_objective("obj-missing") is False


class TestListObjectives:
    """Test listing, filtering and pagination."""

    @pytest_asyncio.fixture
    async def three_objectives(self, make_objective):
        return [await make_objective(name=name) for name in ("first", "second", "third")]

    @pytest.mark.asyncio
    async def test_newest_first(self, store, three_objectives):
        response = await store.list_objectives(ListObjectivesRequest())

        assert [o.name for o in response.objectives] == ["third", "second", "first"]
        assert response.total_size == 3
        assert response.next_page_token is None

    @pytest.mark.asyncio
    async def test_plans_not_populated(self, store, three_objectives, make_plan):
        await make_plan(three_objectives[0].id)

        response = await store.list_objectives(ListObjectivesRequest())

        assert all(o.plans is None for o in response.objectives)

    @pytest.mark.asyncio
    async def test_pagination(self, store, three_objectives):
        first_page = await store.list_objectives(ListObjectivesRequest(page_size=2))

        assert len(first_page.objectives) == 2
        assert first_page.next_page_token is not None
        assert first_page.total_size == 3

        second_page = await store.list_objectives(
            ListObjectivesRequest(page_size=2, page_token=first_page.next_page_token)
        )

        assert len(second_page.objectives) == 1
        assert second_page.next_page_token is None
        assert second_page.total_size == 3

        ids = [o.id for o in first_page.objectives + second_page.objectives]
        assert sorted(ids) == sorted(o.id for o in three_objectives)

    @pytest.mark.asyncio
    async def test_exact_page_has_no_token(self, store, three_objectives):
        response = await store.list_objectives(ListObjectivesRequest(page_size=3))

        assert len(response.objectives) == 3
        assert response.next_page_token is None

    @pytest.mark.asyncio
    async def test_status_filter(self, store, three_objectives):
        await store.update_objective(three_objectives[1].id, {"status": "working"})

        working = await store.list_objectives(ListObjectivesRequest(status=ObjectiveStatus.WORKING))
        submitted = await store.list_objectives(ListObjectivesRequest(status=ObjectiveStatus.SUBMITTED))

        assert [o.name for o in working.objectives] == ["second"]
        assert working.total_size == 1
        assert submitted.total_size == 2

    @pytest.mark.asyncio
    async def test_token_past_end(self, store, three_objectives):
        response = await store.list_objectives(ListObjectivesRequest(page_token="10"))

        assert response.objectives == []
        assert response.total_size == 3
        assert response.next_page_token is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["abc", "-1", "1.5"])
    async def test_invalid_token(self, store, token):
        with pytest.raises(InvalidParamsError):
            await store.list_objectives(ListObjectivesRequest(page_token=token))

    @pytest.mark.asyncio
    async def test_default_page_size_from_settings(self):
        store = InMemoryOPTStore(settings=OPTStoreSettings(default_page_size=2))
        for name in ("a", "b", "c"):
            await store.create_objective(CreateObjectiveRequest(name=name))

        response = await store.list_objectives(ListObjectivesRequest())

        assert len(response.objectives) == 2
        assert response.next_page_token == "2"


class TestPlans:
    """Test plan operations."""

    @pytest.mark.asyncio
    async def test_create_plan_assigns_contiguous_indices(self, store, make_objective):
        objective = await make_objective()

        plan = await store.create_plan(CreatePlanRequest(
            objective_id=objective.id,
            name="Approach",
            tasks=[
                PlanTaskSpec(name="A", dependencies=["task-2"]),
                PlanTaskSpec(name="B"),
                PlanTaskSpec(name="C", dependencies=["task-0"]),
            ],
        ))

        assert plan.id.startswith("plan-")
        assert plan.status == PlanStatus.PENDING
        assert [(t.name, t.task_index) for t in plan.tasks] == [("A", 0), ("B", 1), ("C", 2)]
        for task in plan.tasks:
            assert task.id.startswith("task-")
            assert task.plan_id == plan.id
            assert task.objective_id == objective.id
            assert task.status == "pending"
            assert task.metadata == {}

    @pytest.mark.asyncio
    async def test_dependency_placeholders_resolve_to_sibling_ids(self, store, make_objective):
        objective = await make_objective()

        plan = await store.create_plan(CreatePlanRequest(
            objective_id=objective.id,
            name="Approach",
            tasks=[
                PlanTaskSpec(name="T0"),
                PlanTaskSpec(name="T1", dependencies=["task-0"]),
                PlanTaskSpec(name="T2", dependencies=["task-0", "task-1"]),
            ],
        ))

        t0, t1, t2 = plan.tasks
        assert t0.dependencies == []
        assert t1.dependencies == [t0.id]
        assert set(t2.dependencies) == {t0.id, t1.id}

    @pytest.mark.asyncio
    async def test_literal_and_out_of_range_dependencies(self, store, make_objective):
        objective = await make_objective()

        plan = await store.create_plan(CreatePlanRequest(
            objective_id=objective.id,
            name="Approach",
            tasks=[PlanTaskSpec(name="T0", dependencies=["task-7", "task-existing", "task-0"])],
        ))

        task = plan.tasks[0]
        assert task.dependencies == ["task-existing", task.id]

    @pytest.mark.asyncio
    async def test_create_plan_without_tasks(self, store, make_objective):
        objective = await make_objective()

        plan = await store.create_plan(CreatePlanRequest(
            objective_id=objective.id, name="Approach", dependencies=["plan-x"], metadata={"k": 1}
        ))

        assert plan.tasks == []
        assert plan.dependencies == ["plan-x"]
        assert plan.metadata == {"k": 1}

    @pytest.mark.asyncio
    async def test_get_plan(self, store, make_objective, make_plan):
        objective = await make_objective()
        plan = await make_plan(objective.id, task_names=["A", "B", "C"])

        fetched = await store.get_plan(plan.id)

        assert [t.task_index for t in fetched.tasks] == [0, 1, 2]
        assert await store.get_plan("plan-missing") is None

    @pytest.mark.asyncio
    async def test_plans_for_objective_oldest_first(self, store, make_objective, make_plan):
        objective = await make_objective()
        names = ["one", "two", "three"]
        for name in names:
            await make_plan(objective.id, name=name)

        plans = await store.get_plans_for_objective(objective.id)

        assert [p.name for p in plans] == names
        assert all(p.tasks == [] for p in plans)

    @pytest.mark.asyncio
    async def test_update_plan(self, store, make_objective, make_plan):
        objective = await make_objective()
        plan = await make_plan(objective.id, task_names=["A"])

        updated = await store.update_plan(
            plan.id, {"status": "working", "objectiveId": "obj-other", "objective_id": "obj-other"}
        )

        assert updated.status == PlanStatus.WORKING
        assert updated.objective_id == objective.id
        assert [t.name for t in updated.tasks] == ["A"]
        assert await store.update_plan("plan-missing", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_delete_plan_leaves_siblings(self, store, make_objective, make_plan):
        objective = await make_objective()
        doomed = await make_plan(objective.id, task_names=["A", "B"])
        sibling = await make_plan(objective.id, name="Sibling", task_names=["C"])

        assert await store.delete_plan(doomed.id) is True

        assert await store.get_tasks_for_plan(doomed.id) == []
        assert [p.id for p in await store.get_plans_for_objective(objective.id)] == [sibling.id]
        assert await store.get_objective(objective.id) is not None
        assert store.get_counts() == StoreCounts(objectives=1, plans=1, tasks=1)
        assert await store.delete_plan(doomed.id) is False


class TestTasks:
    """Test plan task operations."""

    @pytest.mark.asyncio
    async def test_update_plan_task_keeps_identity(self, store, make_objective, make_plan):
        objective = await make_objective()
        plan = await make_plan(objective.id, task_names=["A", "B"])
        task = plan.tasks[1]

        updated = await store.update_plan_task(task.id, {
            "status": "working",
            "taskIndex": 9,
            "planId": "plan-other",
            "objective_id": "obj-other",
            "id": "task-other",
        })

        assert updated.id == task.id
        assert updated.task_index == 1
        assert updated.plan_id == plan.id
        assert updated.objective_id == objective.id
        assert updated.status == "working"
        assert await store.update_plan_task("task-missing", {"status": "x"}) is None

    @pytest.mark.asyncio
    async def test_link_external_task(self, store, make_objective, make_plan):
        objective = await make_objective()
        plan = await make_plan(objective.id, task_names=["A"])
        task_id = plan.tasks[0].id

        await store.link_external_task(task_id, "a2a-1")
        await store.link_external_task(task_id, "a2a-2")

        tasks = await store.get_tasks_for_plan(plan.id)
        assert tasks[0].a2a_task_id == "a2a-2"

    @pytest.mark.asyncio
    async def test_link_unknown_task(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await store.link_external_task("task-missing", "a2a-1")

        assert exc_info.value.message == "PlanTask not found: task-missing"


class TestDebugUtilities:
    """Test clear() and get_counts()."""

    @pytest.mark.asyncio
    async def test_counts_and_clear(self, store, make_objective, make_plan):
        objective = await make_objective()
        await make_plan(objective.id, task_names=["A", "B"])

        assert store.get_counts() == StoreCounts(objectives=1, plans=1, tasks=2)

        store.clear()

        assert store.get_counts() == StoreCounts(objectives=0, plans=0, tasks=0)

    @pytest.mark.asyncio
    async def test_concurrent_creates(self, store):
        await asyncio.gather(*[
            store.create_objective(CreateObjectiveRequest(name=f"objective {i}"))
            for i in range(25)
        ])

        assert store.get_counts().objectives == 25


class TestConcurrentCascadeDelete:
    """Test that a cascading delete is never observed half done."""

    @pytest_asyncio.fixture
    async def hierarchy(self, make_objective, make_plan):
        objective = await make_objective()
        plans = [
            await make_plan(objective.id, name=f"plan {i}", task_names=["A", "B", "C"])
            for i in range(3)
        ]
        return objective, plans

    @staticmethod
    def reads(store, objective_id, plan_ids):
        calls = [store.get_objective(objective_id), store.get_plans_for_objective(objective_id)]
        for plan_id in plan_ids:
            calls.append(store.get_plan(plan_id))
            calls.append(store.get_tasks_for_plan(plan_id))
        return calls

    @staticmethod
    def assert_whole_or_absent(results, plan_count, task_count):
        objective, plans, *per_plan = results
        if objective is not None:
            assert len(objective.plans) == plan_count
            assert all(len(p.tasks) == task_count for p in objective.plans)
        assert len(plans) in (0, plan_count)
        for plan, tasks in zip(per_plan[::2], per_plan[1::2]):
            if plan is not None:
                assert len(plan.tasks) == task_count
            assert len(tasks) in (0, task_count)

    @staticmethod
    def assert_absent(results):
        objective, plans, *per_plan = results
        assert objective is None
        assert plans == []
        for plan, tasks in zip(per_plan[::2], per_plan[1::2]):
            assert plan is None
            assert tasks == []

    @pytest.mark.asyncio
    async def test_readers_see_whole_hierarchy_or_nothing(self, store, hierarchy):
        objective, plans = hierarchy
        plan_ids = [p.id for p in plans]
        before = self.reads(store, objective.id, plan_ids)
        after = self.reads(store, objective.id, plan_ids)

        results = await asyncio.gather(*before, store.delete_objective(objective.id), *after)

        split = len(before)
        earlier, deleted, later = results[:split], results[split], results[split + 1:]
        assert deleted is True
        self.assert_whole_or_absent(earlier, plan_count=3, task_count=3)
        self.assert_absent(later)
        assert store.get_counts() == StoreCounts(objectives=0, plans=0, tasks=0)

    @pytest.mark.asyncio
    async def test_interleaved_readers_never_see_orphans(self, store, hierarchy):
        objective, plans = hierarchy
        plan_ids = [p.id for p in plans]
        calls = []
        for i in range(5):
            calls.extend(self.reads(store, objective.id, plan_ids))
            if i == 2:
                calls.append(store.delete_objective(objective.id))

        results = await asyncio.gather(*calls)

        group = 2 + 2 * len(plan_ids)
        deleted_at = results.index(True)
        groups = [r for r in results if r is not True]
        assert deleted_at == 3 * group
        for index in range(5):
            chunk = groups[index * group:(index + 1) * group]
            if index < 3:
                self.assert_whole_or_absent(chunk, plan_count=3, task_count=3)
            else:
                self.assert_absent(chunk)
        assert store.get_counts().plans == 0
        assert store.get_counts().tasks == 0


class TestResolveTaskDependencies:
    """Test the placeholder resolution helper."""

    def test_resolves_placeholders(self):
        assert resolve_task_dependencies(["task-1", "task-0"], ["id-a", "id-b"]) == ["id-b", "id-a"]

    def test_keeps_literals_and_drops_out_of_range(self):
        assert resolve_task_dependencies(["task-2", "task-abc", "other"], ["id-a"]) == ["task-abc", "other"]

    def test_none(self):
        assert resolve_task_dependencies(None, []) == []
