import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import Field
from sse_starlette.sse import EventSourceResponse

from record_context.api.deps import ClientDep, RegistryDep
from record_context.context.aggregator import aggregate
from record_context.context.errors import MalformedContextError
from record_context.context.feed import FeedEvent
from record_context.context.navigation import record_page_reference
from record_context.context.session import RecordContextSession
from record_context.context.views import Notification, PageReference, RecordContextView, ViewModel
from record_context.pipeline.errors import EmptyPromptError, PipelineBusyError
from record_context.pipeline.state import PipelineState

router = APIRouter()
logger = logging.getLogger(__name__)


class PromptRequest(ViewModel):
    prompt: str = ""


class PromptResponse(ViewModel):
    state: PipelineState
    response: str = ""
    notification: Notification | None = None


class RowAction(ViewModel):
    name: str


class RowActionRequest(ViewModel):
    action: RowAction
    row: dict[str, Any] = Field(default_factory=dict)


class FeedPushResult(ViewModel):
    applied: bool
    delivered: int


class RecordSessionPublic(ViewModel):
    record_id: str
    object_api_name: str | None = None
    view: RecordContextView | None = None
    has_data: bool = False
    is_loading: bool = False
    response: str = ""
    show_response: bool = False
    error: str | None = None
    url_params: dict[str, str] = Field(default_factory=dict)


def _error_notification(message: str) -> Notification:
    return Notification(title="Error", message=message, variant="error")


def _session_public(session: RecordContextSession) -> RecordSessionPublic:
    return RecordSessionPublic(
        record_id=session.record_id or "",
        object_api_name=session.object_api_name,
        view=session.view,
        has_data=session.has_data,
        is_loading=session.is_loading,
        response=session.response,
        show_response=session.show_response,
        error=session.slot.error,
        url_params=session.url_params,
    )


async def context_events(queue: asyncio.Queue[FeedEvent]) -> AsyncIterator[dict[str, str]]:
    """Turn feed events into SSE messages: normalized views or error text."""
    while True:
        event = await queue.get()
        if event.error is not None:
            yield {"event": "error", "data": event.error}
            continue
        try:
            view = aggregate(event.data)
        except MalformedContextError as exc:
            logger.warning("Skipping malformed feed event: %s", exc)
            yield {"event": "error", "data": str(exc)}
            continue
        yield {"event": "context", "data": view.model_dump_json(by_alias=True)}


@router.post("/row-action", response_model=PageReference)
async def handle_row_action(body: RowActionRequest) -> Any:
    if body.action.name != "view_record":
        raise HTTPException(status_code=400, detail=f"Unsupported row action: {body.action.name}")
    try:
        return record_page_reference(body.row)
    except MalformedContextError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/{record_id}/context", response_model=RecordSessionPublic)
async def read_record_context(
    record_id: str,
    request: Request,
    registry: RegistryDep,
    client: ClientDep,
) -> Any:
    session = registry.session(record_id, client, request.url.query)
    try:
        await session.load()
    except MalformedContextError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if session.slot.error is not None:
        raise HTTPException(
            status_code=502,
            detail=_error_notification(session.slot.error).model_dump(by_alias=True),
        )
    return _session_public(session)


@router.post("/{record_id}/prompt", response_model=PromptResponse)
async def submit_record_prompt(
    record_id: str,
    body: PromptRequest,
    registry: RegistryDep,
    client: ClientDep,
) -> Any:
    session = registry.session(record_id, client)
    try:
        state = await session.submit_prompt(body.prompt)
    except EmptyPromptError as exc:
        raise HTTPException(
            status_code=422,
            detail=_error_notification(str(exc)).model_dump(by_alias=True),
        ) from exc
    except PipelineBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    notification = _error_notification(state.error) if state.error else None
    return PromptResponse(state=state, response=session.response, notification=notification)


@router.post("/{record_id}/context/push", response_model=FeedPushResult)
async def push_record_context(
    record_id: str,
    event: FeedEvent,
    registry: RegistryDep,
    client: ClientDep,
) -> Any:
    session = registry.session(record_id, client)
    try:
        applied = session.apply_feed_event(event)
    except MalformedContextError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    delivered = registry.feed.publish(record_id, event)
    return FeedPushResult(applied=applied, delivered=delivered)


@router.get("/{record_id}/context/stream")
async def stream_record_context(record_id: str, registry: RegistryDep) -> EventSourceResponse:
    async def event_generator():
        async with registry.feed.subscribe(record_id) as queue:
            async for message in context_events(queue):
                yield message

    return EventSourceResponse(event_generator())
