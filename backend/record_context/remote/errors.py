from typing import Any


class RemoteCallError(Exception):
    """A remote call failed in transport or was rejected by the remote application."""

    def __init__(self, message: str, *, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def error_message(error: BaseException) -> str:
    """
    Reduce a failure to one display string.

    Order: structured body `message`, a plain string body, the first `message`
    of a list body, the exception's own message, then "Unknown error".
    """
    body = getattr(error, "body", None)
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if isinstance(body, str) and body.strip():
        return body.strip()
    if isinstance(body, list):
        for item in body:
            if isinstance(item, dict) and item.get("message"):
                return str(item["message"])
    message = getattr(error, "message", None) or str(error)
    return message or "Unknown error"
