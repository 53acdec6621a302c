"""Lifecycle Executor - BEFORE -> DISPATCH|UNKNOWN -> AFTER around one invocation.

Invariants:
    - A fresh context is built per invocation and dropped when execute() returns
    - Arguments for the handler and both hooks are marshalled before any user
      code runs; an ArgumentError means no hook or handler ran
    - A context type that fails to construct becomes an error response
    - BEFORE error -> response is that error; handler and AFTER are skipped
    - Handler error -> response is that error; AFTER is skipped
    - Handler success + AFTER error -> response is the AFTER error
    - No matching function -> BEFORE still runs, then the UNKNOWN hook (or the
      default not-found) replaces DISPATCH; its result is final, AFTER does not run
    - execute() never raises for anything user code does

Design Decisions:
    - Stateless executor: everything per-call lives in locals and the context,
      so one executor serves concurrent invocations
"""

import logging
from typing import Any

from contractapi.core.contract import RegisteredGroup
from contractapi.core.domain_types import LifecycleStage
from contractapi.core.errors import ArgumentError, ContractAPIError, RoutingError
from contractapi.core.invocation import InvocationRequest, InvocationResponse
from contractapi.core.marshalling import marshal_arguments, marshal_prefix
from contractapi.core.result_encoder import encode_result, error_response
from contractapi.core.signature import HandlerDescriptor
from contractapi.core.store_protocols import StateStore
from contractapi.core.transaction_context import ChaincodeStub, TransactionContext

logger = logging.getLogger(__name__)


class LifecycleExecutor:
    """Runs one invocation against one registered contract group."""

    def execute(
        self, group: RegisteredGroup, request: InvocationRequest,
        store: StateStore, tx_id: str | None = None,
    ) -> InvocationResponse:
        args = list(request.args)
        stub = ChaincodeStub(store, request.qualified_name, args, tx_id)
        extra = {
            "namespace": group.namespace, "function": request.function,
            "tx_id": stub.tx_id,
        }
        self._trace(LifecycleStage.START, extra)
        try:
            ctx = group.context_factory.create(stub)
        except Exception as e:
            logger.error(
                f"Could not build {group.context_factory.context_type.__name__}: {e}",
                extra=extra, exc_info=True,
            )
            return self._done(error_response(e), extra)

        descriptor = group.handlers.get(request.function)
        try:
            before_args = marshal_prefix(group.before, args) if group.before else []
            if descriptor is not None:
                handler_args = marshal_arguments(descriptor, args)
                after_args = marshal_prefix(group.after, args) if group.after else []
        except ArgumentError as e:
            logger.warning(
                f"Argument error for {request.qualified_name}: {e.message}",
                extra={**extra, "error_code": e.code},
            )
            return self._done(error_response(e), extra)

        if group.before is not None:
            self._trace(LifecycleStage.BEFORE, extra)
            response = self._call(group.before, ctx, before_args, extra)
            if not response.ok:
                return self._done(response, extra)

        if descriptor is None:
            self._trace(LifecycleStage.UNKNOWN, extra)
            return self._run_unknown(group, ctx, request, args, extra)

        self._trace(LifecycleStage.DISPATCH, extra)
        response = self._call(descriptor, ctx, handler_args, extra)
        if not response.ok or group.after is None:
            return self._done(response, extra)

        self._trace(LifecycleStage.AFTER, extra)
        after = self._call(group.after, ctx, after_args, extra)
        return self._done(response if after.ok else after, extra)

    def _run_unknown(
        self, group: RegisteredGroup, ctx: TransactionContext,
        request: InvocationRequest, args: list[str], extra: dict,
    ) -> InvocationResponse:
        if group.unknown is None:
            return self._done(error_response(RoutingError(
                f"Function {request.function} not found in contract {group.name}",
            )), extra)
        values = marshal_prefix(group.unknown, args)
        return self._done(self._call(group.unknown, ctx, values, extra), extra)

    def _call(
        self, descriptor: HandlerDescriptor, ctx: TransactionContext,
        values: list[Any], extra: dict,
    ) -> InvocationResponse:
        call_args = [ctx, *values] if descriptor.takes_context else values
        try:
            result = descriptor.func(*call_args)
        except ContractAPIError as e:
            return error_response(e)
        except Exception as e:
            logger.warning(
                f"{descriptor.qualified_name} raised {type(e).__name__}: {e}",
                extra=extra, exc_info=True,
            )
            return error_response(e)
        return encode_result(descriptor, result)

    def _done(self, response: InvocationResponse, extra: dict) -> InvocationResponse:
        self._trace(LifecycleStage.DONE, extra)
        if not response.ok:
            logger.info(
                f"Invocation failed: {response.error}",
                extra={**extra, "error_code": response.error_code},
            )
        return response

    @staticmethod
    def _trace(stage: LifecycleStage, extra: dict) -> None:
        logger.debug(f"lifecycle {stage.value}", extra={**extra, "stage": stage.value})
