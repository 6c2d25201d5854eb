"""Legal status transitions for objectives and plans.

Each table maps a status to the statuses it may move to. Staying in the
same status is always allowed and is not listed. Terminal statuses map to
an empty set.
"""

from typing import Dict, FrozenSet, Type, TypeVar, Union

from a2a_opt.hierarchy.models import ObjectiveStatus, PlanStatus

S = TypeVar("S", ObjectiveStatus, PlanStatus)

OBJECTIVE_TRANSITIONS: Dict[ObjectiveStatus, FrozenSet[ObjectiveStatus]] = {
    ObjectiveStatus.SUBMITTED: frozenset({
        ObjectiveStatus.PLANNING, ObjectiveStatus.WORKING, ObjectiveStatus.CANCELED,
    }),
    ObjectiveStatus.PLANNING: frozenset({
        ObjectiveStatus.WORKING, ObjectiveStatus.BLOCKED, ObjectiveStatus.FAILED, ObjectiveStatus.CANCELED,
    }),
    ObjectiveStatus.WORKING: frozenset({
        ObjectiveStatus.BLOCKED, ObjectiveStatus.COMPLETED, ObjectiveStatus.FAILED, ObjectiveStatus.CANCELED,
    }),
    ObjectiveStatus.BLOCKED: frozenset({
        ObjectiveStatus.PLANNING, ObjectiveStatus.WORKING, ObjectiveStatus.FAILED, ObjectiveStatus.CANCELED,
    }),
    ObjectiveStatus.COMPLETED: frozenset(),
    # retry
    ObjectiveStatus.FAILED: frozenset({ObjectiveStatus.SUBMITTED, ObjectiveStatus.PLANNING}),
    # restart
    ObjectiveStatus.CANCELED: frozenset({ObjectiveStatus.SUBMITTED}),
}

PLAN_TRANSITIONS: Dict[PlanStatus, FrozenSet[PlanStatus]] = {
    PlanStatus.PENDING: frozenset({PlanStatus.WORKING, PlanStatus.SKIPPED}),
    PlanStatus.WORKING: frozenset({PlanStatus.BLOCKED, PlanStatus.COMPLETED, PlanStatus.FAILED}),
    PlanStatus.BLOCKED: frozenset({PlanStatus.WORKING, PlanStatus.FAILED, PlanStatus.SKIPPED}),
    PlanStatus.COMPLETED: frozenset(),
    # retry
    PlanStatus.FAILED: frozenset({PlanStatus.PENDING, PlanStatus.WORKING}),
    PlanStatus.SKIPPED: frozenset(),
}


def _coerce(status_type: Type[S], value: Union[S, str]) -> S:
    return value if isinstance(value, status_type) else status_type(value)


def _is_valid(
    table: Dict[S, FrozenSet[S]],
    status_type: Type[S],
    from_status: Union[S, str],
    to_status: Union[S, str],
) -> bool:
    try:
        source = _coerce(status_type, from_status)
        target = _coerce(status_type, to_status)
    except ValueError:
        return False
    if source == target:
        return True
    return target in table.get(source, frozenset())


def is_valid_objective_transition(
    from_status: Union[ObjectiveStatus, str], to_status: Union[ObjectiveStatus, str]
) -> bool:
    """Check whether an objective may move from one status to another.

    Unknown status values are never valid.
    """
    return _is_valid(OBJECTIVE_TRANSITIONS, ObjectiveStatus, from_status, to_status)


def is_valid_plan_transition(
    from_status: Union[PlanStatus, str], to_status: Union[PlanStatus, str]
) -> bool:
    """Check whether a plan may move from one status to another."""
    return _is_valid(PLAN_TRANSITIONS, PlanStatus, from_status, to_status)


def is_terminal_objective_status(status: Union[ObjectiveStatus, str]) -> bool:
    return not OBJECTIVE_TRANSITIONS[_coerce(ObjectiveStatus, status)]


def is_terminal_plan_status(status: Union[PlanStatus, str]) -> bool:
    return not PLAN_TRANSITIONS[_coerce(PlanStatus, status)]
