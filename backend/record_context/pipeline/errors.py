class PipelineBusyError(RuntimeError):
    """Raised when a pipeline is triggered while a previous run is still in flight."""


class EmptyPromptError(ValueError):
    """Raised for a blank prompt, before any remote call is issued."""
