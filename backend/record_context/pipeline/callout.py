import re
from typing import Any

from record_context.context.views import ViewModel
from record_context.core.config import settings
from record_context.pipeline.base import AsyncPipeline
from record_context.pipeline.state import PipelineState
from record_context.remote.client import RemoteClient

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int_input(value: Any) -> int:
    """Parse a numeric input field; anything without a leading integer becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else 0


class CalloutResult(ViewModel):
    sum: Any = None
    message: str | None = None
    full_response: Any = None


class CalloutPipeline(AsyncPipeline[CalloutResult]):
    """
    Compute-then-describe callouts.

    The describe step is only issued after the compute step resolves; it takes
    the same inputs, not the computed value.
    """

    name = "callout"

    def __init__(self, client: RemoteClient):
        super().__init__()
        self.client = client

    async def run_custom(self, num1: int, num2: int) -> PipelineState[CalloutResult]:
        async def steps() -> CalloutResult:
            total = await self.client.compute_a(num1, num2)
            message = await self.client.compute_message(num1, num2)
            return CalloutResult(sum=total, message=message)

        return await self._run(steps)

    async def run_default(self) -> PipelineState[CalloutResult]:
        async def steps() -> CalloutResult:
            total = await self.client.compute_a_default()
            message = await self.client.compute_message(
                settings.CALLOUT_DEFAULT_NUM1, settings.CALLOUT_DEFAULT_NUM2
            )
            return CalloutResult(sum=total, message=message)

        return await self._run(steps)

    async def run_full(self, num1: int, num2: int) -> PipelineState[CalloutResult]:
        async def steps() -> CalloutResult:
            return CalloutResult(full_response=await self.client.compute_full(num1, num2))

        return await self._run(steps)
