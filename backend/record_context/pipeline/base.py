import asyncio
import logging
from abc import ABC
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from record_context.pipeline.errors import PipelineBusyError
from record_context.pipeline.state import PipelineState
from record_context.remote.errors import error_message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncPipeline(ABC, Generic[T]):
    """
    Base class for user-triggered chains of remote calls sharing one state.

    A trigger while a run is in flight is rejected with PipelineBusyError.
    Every run takes a generation token; `cancel()` invalidates it, so a run
    that settles afterwards leaves the state alone.
    """

    name = "pipeline"

    def __init__(self) -> None:
        self.state: PipelineState[T] = PipelineState()
        self._generation = 0

    @property
    def is_busy(self) -> bool:
        return self.state.is_busy

    def cancel(self) -> None:
        if self.state.is_busy:
            logger.info("Cancelling in-flight %s run %s", self.name, self._generation)
        self._generation += 1
        self.state = PipelineState()

    async def _run(self, steps: Callable[[], Awaitable[T]]) -> PipelineState[T]:
        if self.state.is_busy:
            logger.warning("Rejected %s trigger: previous run still in flight", self.name)
            raise PipelineBusyError(f"{self.name} is already running")

        self._generation += 1
        token = self._generation
        self.state = PipelineState(is_busy=True)

        try:
            result = await steps()
        except asyncio.CancelledError:
            if token == self._generation:
                logger.info("%s run %s cancelled", self.name, token)
                self.state = PipelineState()
            raise
        except Exception as e:
            message = error_message(e)
            logger.error(f"{self.name} run {token} failed: {message}", exc_info=True)
            settled = PipelineState(error=message)
        else:
            settled = PipelineState(result=result)

        if token != self._generation:
            logger.info("Discarding settled %s run %s (superseded)", self.name, token)
            return self.state
        self.state = settled
        return self.state
