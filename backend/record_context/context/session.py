import logging
from collections.abc import Mapping

from record_context.context.aggregator import aggregate
from record_context.context.feed import FeedEvent
from record_context.context.snapshot import ContextSlot
from record_context.context.views import RecordContextView
from record_context.pipeline.prompt import PromptPipeline
from record_context.pipeline.state import PipelineState
from record_context.remote.client import RemoteClient
from record_context.remote.errors import error_message

logger = logging.getLogger(__name__)


class RecordContextSession:
    """
    Record-scoped controller: loads and normalizes the record context, applies
    pushes from the feed, and owns the prompt pipeline for the record.
    """

    def __init__(
        self,
        record_id: str | None,
        client: RemoteClient,
        *,
        url_params: Mapping[str, str] | None = None,
    ):
        self.record_id = record_id
        self.client = client
        self.url_params: dict[str, str] = dict(url_params or {})
        self.slot = ContextSlot()
        self.prompt = PromptPipeline(client, record_id or "")
        self.response = ""
        self._loads_in_flight = 0

    @property
    def view(self) -> RecordContextView | None:
        return self.slot.view

    @property
    def object_api_name(self) -> str | None:
        return self.slot.view.object_api_name if self.slot.view else None

    @property
    def has_data(self) -> bool:
        return self.slot.view is not None and self.slot.view.has_data

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def show_response(self) -> bool:
        return bool(self.response) and not self.is_loading

    def _record_error(self, token: int, message: str) -> None:
        if self.slot.fail(token, message):
            self.response = f"Error: {message}"

    async def load(self) -> RecordContextView | None:
        """Fetch and normalize the record context. A malformed payload propagates."""
        if not self.record_id:
            return None

        token = self.slot.issue()
        self._loads_in_flight += 1
        try:
            try:
                data = await self.client.fetch_context(self.record_id)
            except Exception as exc:
                message = error_message(exc)
                logger.warning("Failed to load context for record %s: %s", self.record_id, message)
                self._record_error(token, message)
                return self.slot.view
            if data:
                self.slot.commit(token, aggregate(data))
        finally:
            self._loads_in_flight -= 1
        return self.slot.view

    def apply_feed_event(self, event: FeedEvent) -> bool:
        """Apply a pushed context or error. Returns whether it was written."""
        if event.error is not None:
            logger.warning("Feed error for record %s: %s", self.record_id, event.error)
            if not self.slot.fail(self.slot.issue(), event.error):
                return False
            self.response = f"Error: {event.error}"
            return True
        # A malformed push raises here, before a token is issued.
        view = aggregate(event.data)
        return self.slot.commit(self.slot.issue(), view)

    async def submit_prompt(self, prompt: str | None) -> PipelineState[str]:
        state = await self.prompt.submit(prompt)
        if state.error is not None:
            self.response = f"Error: {state.error}"
        elif not state.is_busy:
            self.response = state.result or ""
        return state
