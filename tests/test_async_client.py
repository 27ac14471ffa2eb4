"""Tests for cronhost.async_client -- same surface as the sync client, awaited."""

import json

import httpx
import pytest

from conftest import API_ROOT, JOB, SCHEDULE, envelope, make_async_client, reply
from cronhost import (
    AsyncCronhost,
    BulkCreateResponse,
    CronhostAPIError,
    CronhostNetworkError,
    CronhostValidationError,
    Schedule,
)

NEW_SCHEDULE = {
    "name": "ping",
    "cronExpression": "*/5 * * * *",
    "timezone": "UTC",
    "endpoint": "https://example.com/ping",
    "httpMethod": "GET",
}


class TestAsyncCronhost:
    @pytest.mark.asyncio
    async def test_get_schedules(self):
        client, rec, http = make_async_client(reply([SCHEDULE]))
        async with http:
            schedules = await client.get_schedules()

        assert schedules[0].id == "sch_1"
        assert str(rec.last.url) == f"{API_ROOT}/schedules"

    @pytest.mark.asyncio
    async def test_single_vs_bulk_dispatch(self):
        def handler(request):
            if request.url.path.endswith("/bulk"):
                return httpx.Response(200, json=envelope({"count": 1, "schedules": [{"id": "a", "name": "ping"}]}))
            return httpx.Response(200, json=envelope(SCHEDULE))

        client, rec, http = make_async_client(handler)
        async with http:
            single = await client.create_schedule(NEW_SCHEDULE)
            bulk = await client.create_schedule([NEW_SCHEDULE])

        assert isinstance(single, Schedule)
        assert isinstance(bulk, BulkCreateResponse)
        assert [r.url.path for r in rec.requests] == ["/api/v1/schedules", "/api/v1/schedules/bulk"]
        assert "headers" not in json.loads(rec.requests[0].content)

    @pytest.mark.asyncio
    async def test_empty_bulk_rejected_without_request(self):
        client, rec, http = make_async_client(reply(None))
        async with http:
            with pytest.raises(CronhostValidationError):
                await client.create_schedule([])
        assert rec.requests == []

    @pytest.mark.asyncio
    async def test_toggle_trigger_delete(self):
        def handler(request):
            if request.url.path.endswith("/trigger"):
                return httpx.Response(200, json=envelope(JOB))
            if request.method == "DELETE":
                return httpx.Response(200, json=envelope(None))
            return httpx.Response(200, json=envelope(dict(SCHEDULE, isEnabled=False)))

        client, rec, http = make_async_client(handler)
        async with http:
            toggled = await client.toggle_schedule("sch_1", False)
            job = await client.trigger_schedule("sch_1")
            deleted = await client.delete_schedule("sch_1")

        assert toggled.is_enabled is False
        assert json.loads(rec.requests[0].content) == {"enabled": False}
        assert job.id == "job_1"
        assert deleted is None
        assert [r.method for r in rec.requests] == ["PATCH", "POST", "DELETE"]

    @pytest.mark.asyncio
    async def test_get_jobs_query(self):
        client, rec, http = make_async_client(reply([JOB]))
        async with http:
            jobs = await client.get_jobs(schedule_id="sch_1", limit=5)

        assert str(rec.last.url) == f"{API_ROOT}/jobs?scheduleId=sch_1&limit=5"
        assert jobs[0].schedule_id == "sch_1"

    @pytest.mark.asyncio
    async def test_api_error(self):
        client, _, http = make_async_client(
            lambda request: httpx.Response(404, json={"error": {"message": "not found", "code": "NOT_FOUND"}})
        )
        async with http:
            with pytest.raises(CronhostAPIError) as exc:
                await client.get_job("nope")

        assert exc.value.code == "NOT_FOUND"
        assert exc.value.message == "not found"

    @pytest.mark.asyncio
    async def test_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        client, _, http = make_async_client(refuse)
        async with http:
            with pytest.raises(CronhostNetworkError):
                await client.get_schedules()

    @pytest.mark.asyncio
    async def test_owned_client_closed_on_exit(self):
        async with AsyncCronhost(api_key="k") as client:
            inner = client._client
        assert inner.is_closed
