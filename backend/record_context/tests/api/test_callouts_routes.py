from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from record_context.api.deps import SessionRegistry, get_registry, get_remote_client
from record_context.main import app
from record_context.remote.client import RemoteClient
from record_context.remote.errors import RemoteCallError


@pytest.fixture
def remote():
    return AsyncMock(spec=RemoteClient)


@pytest.fixture
def client(remote):
    registry = SessionRegistry()
    app.dependency_overrides[get_remote_client] = lambda: remote
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_custom_values_parse_inputs(client, remote):
    remote.compute_a.return_value = 42
    remote.compute_message.return_value = "The sum of 12 and 30 is 42"

    response = client.post("/api/v1/callouts/custom", json={"num1": "12abc", "num2": 30})

    assert response.status_code == 200
    remote.compute_a.assert_awaited_once_with(12, 30)
    remote.compute_message.assert_awaited_once_with(12, 30)
    state = response.json()["state"]
    assert state["isBusy"] is False
    assert state["result"]["sum"] == 42
    assert state["result"]["message"] == "The sum of 12 and 30 is 42"


def test_default_values(client, remote):
    remote.compute_a_default.return_value = 35
    remote.compute_message.return_value = "The sum of 15 and 20 is 35"

    body = client.post("/api/v1/callouts/default").json()

    remote.compute_message.assert_awaited_once_with(15, 20)
    assert body["state"]["result"]["sum"] == 35


def test_full_response_defaults_missing_inputs(client, remote):
    remote.compute_full.return_value = {"statusCode": 200, "body": "{\"sum\":35}"}

    body = client.post("/api/v1/callouts/full", json={}).json()

    remote.compute_full.assert_awaited_once_with(15, 20)
    assert body["state"]["result"]["fullResponse"] == {"statusCode": 200, "body": "{\"sum\":35}"}


def test_callout_error_notification(client, remote):
    remote.compute_a.side_effect = RemoteCallError("HTTP 500", body={"message": "Unauthorized endpoint"})

    body = client.post("/api/v1/callouts/custom", json={"num1": 1, "num2": 2}).json()

    assert body["state"]["error"] == "Unauthorized endpoint"
    assert body["notification"]["message"] == "Error making callout: Unauthorized endpoint"
    remote.compute_message.assert_not_called()
