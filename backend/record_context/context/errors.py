class MalformedContextError(ValueError):
    """Raised when a context payload or row does not have the expected shape."""
