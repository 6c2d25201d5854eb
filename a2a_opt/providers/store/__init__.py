"""OPT store providers.

This package provides the storage contract for the Objective -> Plan -> Task
hierarchy and its in-memory reference implementation.
"""

from a2a_opt.providers.store.base import DEFAULT_PAGE_SIZE, OPTStore, OPTStoreSettings, StoreCounts
from a2a_opt.providers.store.factory import STORE_PROVIDER_TYPE, create_store
from a2a_opt.providers.store.memory_store import InMemoryOPTStore, resolve_task_dependencies

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "OPTStore",
    "OPTStoreSettings",
    "StoreCounts",
    "InMemoryOPTStore",
    "STORE_PROVIDER_TYPE",
    "create_store",
    "resolve_task_dependencies",
]
