import logging
from typing import Any

import httpx

from record_context.core.config import settings
from record_context.remote.errors import RemoteCallError

logger = logging.getLogger(__name__)

RECORD_CONTROLLER = "RecordContextController"
CALLOUT_CONTROLLER = "AWSLambdaActualCallout"


def _response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RemoteClient:
    """Async client for the remote record, prompt and callout operations."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        token = access_token or settings.REMOTE_ACCESS_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url or settings.REMOTE_BASE_URL,
            timeout=timeout or settings.REMOTE_TIMEOUT_SECONDS,
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _invoke(self, controller: str, method: str, params: dict[str, Any] | None = None) -> Any:
        path = f"/{controller}/{method}"
        logger.info("Calling remote %s", path)
        try:
            response = await self.client.post(path, json=params or {})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Remote %s returned %s", path, status)
            raise RemoteCallError(
                f"{method} returned {status}",
                status_code=status,
                body=_response_body(exc.response),
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Failed to contact remote %s: %s", path, exc)
            raise RemoteCallError(f"Failed to contact the remote service: {exc}") from exc
        return _response_body(response)

    async def fetch_context(self, record_id: str) -> Any:
        return await self._invoke(RECORD_CONTROLLER, "getRecordContext", {"recordId": record_id})

    async def fetch_prompt_result(self, record_id: str, prompt: str) -> str:
        result = await self._invoke(
            RECORD_CONTROLLER, "processPrompt", {"recordId": record_id, "prompt": prompt}
        )
        return "" if result is None else str(result)

    async def compute_a(self, num1: int, num2: int) -> Any:
        return await self._invoke(CALLOUT_CONTROLLER, "makeRealCallout", {"num1": num1, "num2": num2})

    async def compute_a_default(self) -> Any:
        return await self._invoke(CALLOUT_CONTROLLER, "makeDefaultCallout")

    async def compute_message(self, num1: int, num2: int) -> str:
        result = await self._invoke(
            CALLOUT_CONTROLLER, "getResponseMessage", {"num1": num1, "num2": num2}
        )
        return "" if result is None else str(result)

    async def compute_full(self, num1: int, num2: int) -> Any:
        return await self._invoke(CALLOUT_CONTROLLER, "getFullResponse", {"num1": num1, "num2": num2})
