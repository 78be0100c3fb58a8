"""Asynchronous request handle tests using httpx MockTransport."""

import asyncio

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from waas.errors import (
    AuthenticationError,
    ConflictError,
    GeneralError,
    NotFoundError,
    OperationTimeoutError,
)
from waas.models import RequestStatus
from waas.request import Request, extract_request_id

from tests.conftest import REQUEST_ID, make_client, status_body


def sequence_handler(responses: list[tuple[int, object]], calls: list[str]):
    """Serve ``responses`` in order, repeating the last one; record each path."""

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.raw_path.decode())
        status, body = responses[min(len(calls), len(responses)) - 1]
        return httpx.Response(status, json=body)

    return handler


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_holds_id(self):
        client = make_client(sequence_handler([], []))
        req = Request(client, "job-42")
        assert req.id == "job-42"
        assert repr(req) == "Request(id='job-42')"

    @pytest.mark.parametrize("bad_id", ["", None, 42])
    def test_rejects_invalid_id(self, bad_id):
        client = make_client(sequence_handler([], []))
        with pytest.raises(ValueError):
            Request(client, bad_id)

    def test_reattach_by_id(self):
        client = make_client(sequence_handler([], []))
        req = client.request_handle(REQUEST_ID)
        assert isinstance(req, Request)
        assert req.id == REQUEST_ID


class TestExtractRequestId:
    def test_relative_status_uri(self):
        assert extract_request_id({"statusUri": f"/v1.0/request/{REQUEST_ID}"}) == REQUEST_ID

    def test_absolute_status_uri(self):
        body = {"statusUri": f"https://api.tangany.com/v1.0/request/{REQUEST_ID}?code=x"}
        assert extract_request_id(body) == REQUEST_ID

    def test_trailing_slash(self):
        assert extract_request_id({"statusUri": "/request/job-42/"}) == "job-42"

    @pytest.mark.parametrize(
        "body",
        [{}, {"statusUri": ""}, None, "accepted", {"statusUri": "/"}, {"statusUri": 42}],
    )
    def test_missing_or_empty_reference(self, body):
        with pytest.raises(GeneralError):
            extract_request_id(body)


# ---------------------------------------------------------------------------
# get()
# ---------------------------------------------------------------------------


class TestGet:
    async def test_returns_pending_snapshot_verbatim(self):
        calls: list[str] = []
        client = make_client(
            sequence_handler([(200, status_body("pending", txHash="none"))], calls)
        )
        status = await Request(client, "job-42").get()
        assert isinstance(status, RequestStatus)
        assert status.stage == "pending"
        assert status.process == REQUEST_ID
        assert status.output is None
        assert status.is_terminal is False
        assert status.status.model_extra == {"txHash": "none"}
        assert calls == ["/request/job-42"]

    async def test_terminal_get_is_idempotent(self):
        calls: list[str] = []
        client = make_client(
            sequence_handler([(200, status_body("confirmed", {"hash": "0xabc"}))], calls)
        )
        req = Request(client, "job-42")
        first = await req.get()
        second = await req.get()
        assert first.output == second.output == {"hash": "0xabc"}
        assert len(calls) == 2

    async def test_not_found(self):
        client = make_client(sequence_handler([(404, {"message": "unknown request"})], []))
        with pytest.raises(NotFoundError) as exc_info:
            await Request(client, "job-42").get()
        assert exc_info.value.message == "unknown request"

    @pytest.mark.parametrize(
        "body",
        [
            None,
            {"process": "x"},
            {"status": {"stage": "pending"}, "output": [1]},
        ],
    )
    async def test_malformed_status_body_is_general_error(self, body):
        client = make_client(sequence_handler([(200, body)], []))
        with pytest.raises(GeneralError) as exc_info:
            await Request(client, "job-42").get()
        assert exc_info.value.status_code == 200
        assert exc_info.value.message == "Invalid response body"
        assert exc_info.value.body == body


# ---------------------------------------------------------------------------
# wait()
# ---------------------------------------------------------------------------


class TestWait:
    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_pending_then_confirmed(self, mock_sleep):
        calls: list[str] = []
        client = make_client(
            sequence_handler(
                [
                    (200, status_body("pending")),
                    (200, status_body("confirmed", {"hash": "0xabc"})),
                ],
                calls,
            )
        )
        output = await Request(client, "job-42").wait(interval=1.0)
        assert output == {"hash": "0xabc"}
        assert len(calls) == 2
        mock_sleep.assert_called_once_with(1.0)

    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_already_terminal_returns_without_sleeping(self, mock_sleep):
        calls: list[str] = []
        client = make_client(
            sequence_handler([(200, status_body("completed", {"hash": "0x1"}))], calls)
        )
        output = await Request(client, "job-42").wait()
        assert output == {"hash": "0x1"}
        assert len(calls) == 1
        mock_sleep.assert_not_called()

    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_remote_failure_is_returned_not_raised(self, mock_sleep):
        client = make_client(
            sequence_handler(
                [
                    (200, status_body("processing")),
                    (200, status_body("failed", {"error": "insufficient funds"})),
                ],
                [],
            )
        )
        req = Request(client, "job-42")
        output = await req.wait()
        assert output == {"error": "insufficient funds"}

        status = await req.wait_status()
        assert status.is_terminal is True
        assert status.is_failed is True

    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_terminal_stage_without_output_is_general_error(self, mock_sleep):
        client = make_client(sequence_handler([(200, status_body("confirmed"))], []))
        req = Request(client, "job-42")
        with pytest.raises(GeneralError) as exc_info:
            await req.wait()
        assert "confirmed" in exc_info.value.message
        assert exc_info.value.body["output"] is None

        status = await req.wait_status()
        assert status.is_terminal is True
        assert status.output is None

    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_conflict_during_poll_propagates(self, mock_sleep):
        calls: list[str] = []
        client = make_client(sequence_handler([(409, {"message": "ramirez"})], calls))
        with pytest.raises(ConflictError) as exc_info:
            await Request(client, "job-42").wait()
        assert exc_info.value.message == "ramirez"
        assert len(calls) == 1
        mock_sleep.assert_not_called()

    @patch("waas.polling.asyncio.sleep", new_callable=AsyncMock)
    async def test_server_error_after_pending_is_not_retried(self, mock_sleep):
        calls: list[str] = []
        client = make_client(
            sequence_handler(
                [
                    (200, status_body("pending")),
                    (500, {"message": "boom", "activityId": "abc-1"}),
                    (200, status_body("confirmed", {"hash": "0xabc"})),
                ],
                calls,
            )
        )
        with pytest.raises(GeneralError) as exc_info:
            await Request(client, "job-42").wait()
        err = exc_info.value
        assert err.status_code == 500
        assert err.message == "boom"
        assert err.activity_id == "abc-1"
        assert len(calls) == 2

    async def test_authentication_error_propagates(self):
        client = make_client(sequence_handler([(401, {"message": "bad secret"})], []))
        with pytest.raises(AuthenticationError):
            await Request(client, "job-42").wait()

    async def test_connection_failure_is_general_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(GeneralError) as exc_info:
            await Request(client, "job-42").wait()
        assert exc_info.value.status_code == 0
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_times_out_near_deadline(self):
        calls: list[str] = []
        client = make_client(sequence_handler([(200, status_body("pending"))], calls))
        loop = asyncio.get_running_loop()
        started = loop.time()
        with pytest.raises(OperationTimeoutError) as exc_info:
            await Request(client, "job-42").wait(interval=0.02, timeout=0.1)
        elapsed = loop.time() - started
        assert exc_info.value.request_id == "job-42"
        assert exc_info.value.timeout == 0.1
        assert elapsed >= 0.1
        assert elapsed < 0.1 + 0.02 + 0.2
        assert len(calls) >= 2

    async def test_no_polls_after_timeout(self):
        calls: list[str] = []
        client = make_client(sequence_handler([(200, status_body("pending"))], calls))
        with pytest.raises(OperationTimeoutError):
            await Request(client, "job-42").wait(interval=0.01, timeout=0.03)
        polls = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == polls

    async def test_unknown_stage_with_output_is_terminal(self):
        client = make_client(
            sequence_handler([(200, status_body("archived", {"hash": "0xdef"}))], [])
        )
        assert await Request(client, "job-42").wait() == {"hash": "0xdef"}

    @pytest.mark.parametrize("kwargs", [{"interval": 0}, {"interval": -1}, {"timeout": 0}])
    async def test_rejects_invalid_durations(self, kwargs):
        calls: list[str] = []
        client = make_client(sequence_handler([(200, status_body("pending"))], calls))
        with pytest.raises(ValueError):
            await Request(client, "job-42").wait(**kwargs)
        assert calls == []

    async def test_cancellation_stops_polling(self):
        calls: list[str] = []
        client = make_client(sequence_handler([(200, status_body("pending"))], calls))
        task = asyncio.create_task(
            Request(client, "job-42").wait(interval=0.01, timeout=None)
        )
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        polls = len(calls)
        await asyncio.sleep(0.05)
        assert len(calls) == polls

    async def test_concurrent_waiters_never_overlap_polls(self):
        in_flight = 0
        max_in_flight = 0
        count = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal in_flight, max_in_flight, count
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.005)
            count += 1
            in_flight -= 1
            if count < 4:
                return httpx.Response(200, json=status_body("pending"))
            return httpx.Response(200, json=status_body("confirmed", {"hash": "0xabc"}))

        client = make_client(handler)
        req = Request(client, "job-42")
        results = await asyncio.gather(
            req.wait(interval=0.001),
            req.wait(interval=0.001),
            req.wait(interval=0.001),
        )
        assert results == [{"hash": "0xabc"}] * 3
        assert max_in_flight == 1
