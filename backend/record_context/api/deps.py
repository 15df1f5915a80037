from typing import Annotated

from fastapi import Depends

from record_context.context.feed import ContextFeed
from record_context.context.query_params import parse_query_params
from record_context.context.session import RecordContextSession
from record_context.pipeline.callout import CalloutPipeline
from record_context.remote.client import RemoteClient


class SessionRegistry:
    """In-memory record sessions plus the shared callout pipeline."""

    def __init__(self) -> None:
        self.sessions: dict[str, RecordContextSession] = {}
        self.callouts: CalloutPipeline | None = None
        self.feed = ContextFeed()

    def session(self, record_id: str, client: RemoteClient, query: str | None = None) -> RecordContextSession:
        session = self.sessions.get(record_id)
        if session is None:
            # URL parameters are read once, when the session is opened.
            session = RecordContextSession(record_id, client, url_params=parse_query_params(query))
            self.sessions[record_id] = session
        return session

    def callout_pipeline(self, client: RemoteClient) -> CalloutPipeline:
        if self.callouts is None:
            self.callouts = CalloutPipeline(client)
        return self.callouts


_client: RemoteClient | None = None
_registry = SessionRegistry()


def get_remote_client() -> RemoteClient:
    global _client
    if _client is None:
        _client = RemoteClient()
    return _client


async def close_remote_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def get_registry() -> SessionRegistry:
    return _registry


ClientDep = Annotated[RemoteClient, Depends(get_remote_client)]
RegistryDep = Annotated[SessionRegistry, Depends(get_registry)]
