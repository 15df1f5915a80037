import asyncio
import unittest
from unittest.mock import AsyncMock

from record_context.context.errors import MalformedContextError
from record_context.context.feed import FeedEvent
from record_context.context.session import RecordContextSession
from record_context.pipeline.errors import EmptyPromptError
from record_context.remote.client import RemoteClient
from record_context.remote.errors import RemoteCallError

ACCOUNT_CONTEXT = {
    "objectApiName": "Account",
    "record": {"attributes": {"type": "Account"}, "Id": "001", "Name": "Acme"},
    "relatedRecords": {
        "Contacts": [],
        "Opportunities": [{"Id": "006", "Amount": 100}],
    },
}


class RecordContextSessionTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = AsyncMock(spec=RemoteClient)
        self.session = RecordContextSession("001", self.client, url_params={"c__mode": "full"})

    async def test_load_normalizes_context(self):
        self.client.fetch_context.return_value = ACCOUNT_CONTEXT

        view = await self.session.load()

        self.client.fetch_context.assert_awaited_once_with("001")
        self.assertEqual(self.session.object_api_name, "Account")
        self.assertEqual([f.key for f in view.display_fields], ["Id", "Name"])
        self.assertEqual([r.name for r in view.related_lists], ["Opportunities"])
        self.assertEqual(view.related_lists[0].count, 1)
        self.assertEqual(len(view.related_lists[0].columns), 2)
        self.assertTrue(self.session.has_data)
        self.assertFalse(self.session.is_loading)
        self.assertEqual(self.session.url_params, {"c__mode": "full"})

    async def test_load_without_record_id_is_a_no_op(self):
        session = RecordContextSession(None, self.client)

        self.assertIsNone(await session.load())
        self.client.fetch_context.assert_not_called()

    async def test_load_failure_sets_error_response(self):
        self.client.fetch_context.side_effect = RemoteCallError(
            "getRecordContext returned 404", status_code=404, body={"message": "List has no rows"}
        )

        await self.session.load()

        self.assertEqual(self.session.slot.error, "List has no rows")
        self.assertEqual(self.session.response, "Error: List has no rows")
        self.assertTrue(self.session.show_response)
        self.assertFalse(self.session.is_loading)

    async def test_malformed_payload_propagates_and_clears_loading(self):
        self.client.fetch_context.return_value = {"objectApiName": "Account", "record": []}

        with self.assertRaises(MalformedContextError):
            await self.session.load()
        self.assertFalse(self.session.is_loading)

    async def test_push_during_fetch_wins_over_late_fetch(self):
        release = asyncio.Event()

        async def slow_fetch(record_id):
            await release.wait()
            return ACCOUNT_CONTEXT

        self.client.fetch_context.side_effect = slow_fetch
        load = asyncio.create_task(self.session.load())
        await asyncio.sleep(0)

        pushed = dict(ACCOUNT_CONTEXT, objectApiName="PushedAccount")
        self.assertTrue(self.session.apply_feed_event(FeedEvent(data=pushed)))

        release.set()
        await load
        self.assertEqual(self.session.object_api_name, "PushedAccount")

    async def test_malformed_push_does_not_discard_fetch_in_flight(self):
        release = asyncio.Event()

        async def slow_fetch(record_id):
            await release.wait()
            return ACCOUNT_CONTEXT

        self.client.fetch_context.side_effect = slow_fetch
        load = asyncio.create_task(self.session.load())
        await asyncio.sleep(0)

        with self.assertRaises(MalformedContextError):
            self.session.apply_feed_event(FeedEvent(data={"record": {}}))

        release.set()
        await load
        self.assertEqual(self.session.object_api_name, "Account")
        self.assertIsNone(self.session.slot.error)

    async def test_overlapping_loads_stay_loading_until_both_settle(self):
        first_done = asyncio.Event()
        second_done = asyncio.Event()
        gates = [first_done, second_done]

        async def gated_fetch(record_id):
            await gates.pop(0).wait()
            return ACCOUNT_CONTEXT

        self.client.fetch_context.side_effect = gated_fetch
        first = asyncio.create_task(self.session.load())
        await asyncio.sleep(0)
        second = asyncio.create_task(self.session.load())
        await asyncio.sleep(0)

        first_done.set()
        await first
        self.assertTrue(self.session.is_loading)

        second_done.set()
        await second
        self.assertFalse(self.session.is_loading)
        self.assertEqual(self.session.object_api_name, "Account")

    async def test_feed_error_is_reported(self):
        self.assertTrue(self.session.apply_feed_event(FeedEvent(error="Stream closed")))
        self.assertEqual(self.session.slot.error, "Stream closed")
        self.assertEqual(self.session.response, "Error: Stream closed")

    async def test_submit_prompt_updates_response(self):
        self.client.fetch_prompt_result.return_value = "Acme is a key account."

        state = await self.session.submit_prompt("Who is this?")

        self.assertEqual(state.result, "Acme is a key account.")
        self.assertEqual(self.session.response, "Acme is a key account.")

    async def test_submit_prompt_failure_and_blank_prompt(self):
        self.client.fetch_prompt_result.side_effect = RemoteCallError(
            "HTTP 400", body={"message": "Limit exceeded"}
        )

        state = await self.session.submit_prompt("Summarize")
        self.assertEqual(state.error, "Limit exceeded")
        self.assertEqual(self.session.response, "Error: Limit exceeded")

        with self.assertRaises(EmptyPromptError):
            await self.session.submit_prompt("  ")
        self.assertEqual(self.client.fetch_prompt_result.await_count, 1)
