from typing import Generic, TypeVar

from record_context.context.views import ViewModel

T = TypeVar("T")


class PipelineState(ViewModel, Generic[T]):
    """
    Busy/result/error state of one pipeline.

    Idle is `is_busy=False`; a run replaces the whole state on entry (busy, no
    result, no error) and again when it settles (result or error, not busy).
    """

    is_busy: bool = False
    result: T | None = None
    error: str | None = None
