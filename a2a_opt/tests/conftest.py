"""Shared fixtures for the OPT test suite."""

import pytest
import pytest_asyncio

from a2a_opt.hierarchy.models import CreateObjectiveRequest, CreatePlanRequest, PlanTaskSpec
from a2a_opt.providers.store.memory_store import InMemoryOPTStore
from a2a_opt.rpc.handler import OPTHandler


@pytest_asyncio.fixture
async def store():
    """Create and initialize an in-memory store."""
    store = InMemoryOPTStore()
    await store.initialize()
    yield store
    await store.shutdown()


@pytest.fixture
def handler(store):
    """Create a handler bound to the test store."""
    return OPTHandler(store)


@pytest.fixture
def make_objective(store):
    """Factory creating objectives directly in the store."""
    async def _make(name: str = "Plan a trip", **kwargs):
        return await store.create_objective(CreateObjectiveRequest(name=name, **kwargs))
    return _make


@pytest.fixture
def make_plan(store):
    """Factory creating plans (with optional task names) directly in the store."""
    async def _make(objective_id: str, name: str = "Book flights", task_names=(), **kwargs):
        tasks = [PlanTaskSpec(name=task_name) for task_name in task_names]
        request = CreatePlanRequest(objective_id=objective_id, name=name, tasks=tasks or None, **kwargs)
        return await store.create_plan(request)
    return _make

