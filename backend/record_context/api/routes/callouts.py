from typing import Any

from fastapi import APIRouter, HTTPException

from record_context.api.deps import ClientDep, RegistryDep
from record_context.context.views import Notification, ViewModel
from record_context.core.config import settings
from record_context.pipeline.callout import CalloutResult, parse_int_input
from record_context.pipeline.errors import PipelineBusyError
from record_context.pipeline.state import PipelineState

router = APIRouter()


class CalloutRequest(ViewModel):
    # Raw input field values, parsed with parse_int_input.
    num1: Any = settings.CALLOUT_DEFAULT_NUM1
    num2: Any = settings.CALLOUT_DEFAULT_NUM2


class CalloutResponse(ViewModel):
    state: PipelineState
    notification: Notification | None = None


def _callout_response(state: PipelineState[CalloutResult]) -> CalloutResponse:
    notification = None
    if state.error:
        notification = Notification(
            title="Error",
            message=f"Error making callout: {state.error}",
            variant="error",
        )
    return CalloutResponse(state=state, notification=notification)


@router.post("/custom", response_model=CalloutResponse)
async def call_with_custom_values(body: CalloutRequest, registry: RegistryDep, client: ClientDep) -> Any:
    pipeline = registry.callout_pipeline(client)
    try:
        state = await pipeline.run_custom(parse_int_input(body.num1), parse_int_input(body.num2))
    except PipelineBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _callout_response(state)


@router.post("/default", response_model=CalloutResponse)
async def call_with_default_values(registry: RegistryDep, client: ClientDep) -> Any:
    pipeline = registry.callout_pipeline(client)
    try:
        state = await pipeline.run_default()
    except PipelineBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _callout_response(state)


@router.post("/full", response_model=CalloutResponse)
async def get_detailed_response(body: CalloutRequest, registry: RegistryDep, client: ClientDep) -> Any:
    pipeline = registry.callout_pipeline(client)
    try:
        state = await pipeline.run_full(parse_int_input(body.num1), parse_int_input(body.num2))
    except PipelineBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _callout_response(state)
