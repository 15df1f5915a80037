import logging

from record_context.context.views import RecordContextView

logger = logging.getLogger(__name__)


class ContextSlot:
    """
    Holds the current record view, written by more than one producer.

    Each producer calls `issue()` when it starts and passes the token back on
    `commit()` / `fail()`. Only the most recently issued token may write, so a
    slow fetch that settles after a newer push cannot overwrite it.
    """

    def __init__(self) -> None:
        self._issued = 0
        self.view: RecordContextView | None = None
        self.error: str | None = None

    @property
    def generation(self) -> int:
        return self._issued

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def is_current(self, token: int) -> bool:
        return token == self._issued

    def commit(self, token: int, view: RecordContextView) -> bool:
        if not self.is_current(token):
            logger.warning(
                "Discarding stale context write (token %s, latest %s)", token, self._issued
            )
            return False
        self.view = view
        self.error = None
        return True

    def fail(self, token: int, message: str) -> bool:
        if not self.is_current(token):
            logger.warning(
                "Discarding stale context error (token %s, latest %s): %s",
                token,
                self._issued,
                message,
            )
            return False
        self.error = message
        return True
