from record_context.pipeline.base import AsyncPipeline
from record_context.pipeline.errors import EmptyPromptError
from record_context.pipeline.state import PipelineState
from record_context.remote.client import RemoteClient


class PromptPipeline(AsyncPipeline[str]):
    """Submits a free-text prompt scoped to one record."""

    name = "prompt"

    def __init__(self, client: RemoteClient, record_id: str):
        super().__init__()
        self.client = client
        self.record_id = record_id

    async def submit(self, prompt: str | None) -> PipelineState[str]:
        if not prompt or not prompt.strip():
            raise EmptyPromptError("Please enter a prompt")
        return await self._run(lambda: self.client.fetch_prompt_result(self.record_id, prompt))
