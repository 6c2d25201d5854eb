"""RPC dispatch for the OPT methods.

OPTHandler routes JSON-RPC requests to the store. It validates params,
turns lookup misses into NOT_FOUND, checks status transitions before any
mutation, and reports every failure as a structured error response.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_snake

from a2a_opt.core.errors.errors import (
    InvalidParamsError,
    InvalidRequestError,
    InvalidStateError,
    MethodNotFoundError,
    NotFoundError,
    OPTError,
)
from a2a_opt.core.errors.models import ErrorCode, ValidationErrorDetail
from a2a_opt.hierarchy.models import (
    CreateObjectiveRequest,
    CreatePlanRequest,
    GetObjectiveRequest,
    GetPlanRequest,
    ListObjectivesRequest,
    ObjectiveResponse,
    PlanResponse,
    UpdateObjectiveRequest,
    UpdatePlanRequest,
)
from a2a_opt.hierarchy.transitions import is_valid_objective_transition, is_valid_plan_transition
from a2a_opt.providers.store.base import OPTStore
from a2a_opt.rpc.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse, RequestId, StatusChangeEvent

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)

StatusChangeHook = Callable[[StatusChangeEvent], Union[None, Awaitable[None]]]
RpcMethod = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


def validation_details(exc: ValidationError) -> List[ValidationErrorDetail]:
    """Flatten a pydantic ValidationError into error details."""
    return [
        ValidationErrorDetail(
            location=".".join(str(part) for part in error["loc"]) or "params",
            message=error["msg"],
            error_type=error["type"],
        )
        for error in exc.errors()
    ]


def echo_request_id(value: Any) -> RequestId:
    # Only ids of a legal type are echoed from an invalid envelope.
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        return value
    return None


class OPTHandler:
    """Dispatches OPT JSON-RPC methods to an OPTStore.

    Args:
        store: Store holding the hierarchy
        on_status_change: Optional callable, sync or async, invoked with a
            StatusChangeEvent after each update that carried a status
    """

    def __init__(self, store: OPTStore, on_status_change: Optional[StatusChangeHook] = None):
        self._store = store
        self._on_status_change = on_status_change
        self._methods: Dict[str, RpcMethod] = {
            "objectives/create": self._create_objective,
            "objectives/get": self._get_objective,
            "objectives/list": self._list_objectives,
            "objectives/update": self._update_objective,
            "plans/create": self._create_plan,
            "plans/get": self._get_plan,
            "plans/update": self._update_plan,
        }

    @property
    def store(self) -> OPTStore:
        return self._store

    def can_handle(self, method: str) -> bool:
        """Check whether a method name belongs to this handler."""
        return method in self._methods

    def get_supported_methods(self) -> List[str]:
        return list(self._methods)

    async def handle(self, request: Union[JsonRpcRequest, Mapping[str, Any]]) -> JsonRpcResponse:
        """Handle one request and build its response.

        Never raises; every failure becomes an error response.
        """
        if not isinstance(request, JsonRpcRequest):
            request_id = echo_request_id(request.get("id")) if isinstance(request, Mapping) else None
            try:
                request = JsonRpcRequest.model_validate(request)
            except ValidationError as e:
                details = [detail.model_dump() for detail in validation_details(e)]
                return self._error_response(request_id, InvalidRequestError("Invalid Request", data=details))

        method = self._methods.get(request.method)
        if method is None:
            logger.debug(f"Rejecting unknown method '{request.method}'")
            return self._error_response(request.id, MethodNotFoundError(request.method))

        try:
            result = await method(request.params or {})
            return JsonRpcResponse(id=request.id, result=result)
        except OPTError as e:
            logger.debug(f"{request.method} failed with {e.code.name}: {e.message}")
            return self._error_response(request.id, e)
        except Exception as e:
            logger.error(f"Internal error while handling '{request.method}': {e}", exc_info=True)
            return JsonRpcResponse(
                id=request.id,
                error=JsonRpcError(code=int(ErrorCode.INTERNAL_ERROR), message=str(e)),
            )

    @staticmethod
    def _error_response(request_id: RequestId, error: OPTError) -> JsonRpcResponse:
        return JsonRpcResponse(id=request_id, error=JsonRpcError(**error.to_rpc_error()))

    # -- Params -----------------------------------------------------------------

    @staticmethod
    def _parse_params(
        model: Type[P], params: Dict[str, Any], required: Sequence[str], operation: str
    ) -> P:
        """Validate params against a request model.

        Required params are checked first, by wire name or python name,
        so an omitted one is reported by name.
        """
        for name in required:
            value = params.get(name, params.get(to_snake(name)))
            if value is None or value == "":
                raise InvalidParamsError.missing(name, operation=operation)
        try:
            return model.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(
                f"Invalid params for {operation}", validation_details(e), operation=operation
            ) from e

    async def _notify(self, event: StatusChangeEvent) -> None:
        if self._on_status_change is None:
            return
        try:
            outcome = self._on_status_change(event)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(
                f"Status change hook failed for {event.entity_type} {event.entity_id}: {e}",
                exc_info=True,
            )

    # -- Objectives -------------------------------------------------------------

    async def _create_objective(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(CreateObjectiveRequest, params, ("name",), "objectives/create")
        objective = await self._store.create_objective(request)
        return ObjectiveResponse(objective=objective).to_wire()

    async def _get_objective(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(GetObjectiveRequest, params, ("id",), "objectives/get")
        objective = await self._store.get_objective(request.id)
        if objective is None:
            raise NotFoundError("Objective", request.id, operation="objectives/get")

        if request.include_plans is False:
            objective.plans = None
        elif request.include_tasks is False and objective.plans is not None:
            objective.plans = [plan.model_copy(update={"tasks": None}) for plan in objective.plans]
        return ObjectiveResponse(objective=objective).to_wire()

    async def _list_objectives(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(ListObjectivesRequest, params, (), "objectives/list")
        response = await self._store.list_objectives(request)
        return response.to_wire()

    async def _update_objective(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(UpdateObjectiveRequest, params, ("id",), "objectives/update")
        existing = await self._store.get_objective(request.id)
        if existing is None:
            raise NotFoundError("Objective", request.id, operation="objectives/update")

        if request.status is not None and not is_valid_objective_transition(existing.status, request.status):
            logger.warning(
                f"Rejected objective {request.id} transition {existing.status.value} -> {request.status.value}"
            )
            raise InvalidStateError("Objective", request.id, existing.status.value, request.status.value)

        updates = request.model_dump(exclude={"id"}, exclude_none=True)
        updated = await self._store.update_objective(request.id, updates)
        if updated is None:
            raise NotFoundError("Objective", request.id, operation="objectives/update")

        if request.status is not None:
            await self._notify(StatusChangeEvent(
                entity_type="objective",
                entity_id=updated.id,
                from_status=existing.status.value,
                to_status=updated.status.value,
            ))
        return ObjectiveResponse(objective=updated).to_wire()

    # -- Plans ------------------------------------------------------------------

    async def _create_plan(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(CreatePlanRequest, params, ("objectiveId", "name"), "plans/create")
        objective = await self._store.get_objective(request.objective_id)
        if objective is None:
            raise NotFoundError("Objective", request.objective_id, operation="plans/create")

        plan = await self._store.create_plan(request)
        return PlanResponse(plan=plan).to_wire()

    async def _get_plan(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(GetPlanRequest, params, ("id",), "plans/get")
        plan = await self._store.get_plan(request.id)
        if plan is None:
            raise NotFoundError("Plan", request.id, operation="plans/get")

        if request.include_tasks is False:
            plan.tasks = None
        return PlanResponse(plan=plan).to_wire()

    async def _update_plan(self, params: Dict[str, Any]) -> Dict[str, Any]:
        request = self._parse_params(UpdatePlanRequest, params, ("id",), "plans/update")
        existing = await self._store.get_plan(request.id)
        if existing is None:
            raise NotFoundError("Plan", request.id, operation="plans/update")

        if request.status is not None and not is_valid_plan_transition(existing.status, request.status):
            logger.warning(
                f"Rejected plan {request.id} transition {existing.status.value} -> {request.status.value}"
            )
            raise InvalidStateError("Plan", request.id, existing.status.value, request.status.value)

        updates = request.model_dump(exclude={"id"}, exclude_none=True)
        updated = await self._store.update_plan(request.id, updates)
        if updated is None:
            raise NotFoundError("Plan", request.id, operation="plans/update")

        if request.status is not None:
            await self._notify(StatusChangeEvent(
                entity_type="plan",
                entity_id=updated.id,
                from_status=existing.status.value,
                to_status=updated.status.value,
            ))
        return PlanResponse(plan=updated).to_wire()
