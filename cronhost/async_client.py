"""
Asyncio cronhost API client.

Mirrors ``cronhost.client.Cronhost`` method for method; every operation is a
coroutine awaiting a single ``httpx.AsyncClient`` request.

    async with AsyncCronhost(api_key="ch_...") as cron:
        failed = await cron.get_jobs(status="FAILED", limit=20)
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Union, overload

import httpx

from cronhost import pipeline
from cronhost.config import CronhostConfig, resolve_config
from cronhost.types import (
    BulkCreateResponse,
    GetJobsParams,
    Job,
    Schedule,
    ScheduleInput,
    UpdateScheduleData,
)


class AsyncCronhost:
    """Asynchronous client for the cronhost scheduling API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        config: Optional[CronhostConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = resolve_config(api_key, base_url, config)
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient(timeout=None)

    def __repr__(self) -> str:
        return f"AsyncCronhost({self.config!r})"

    async def __aenter__(self) -> "AsyncCronhost":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Send one request under the versioned API root and return parsed JSON."""
        method, url, merged, content = pipeline.request_args(self.config, path, method, body, headers)
        try:
            response = await self._client.request(method, url, headers=merged, content=content)
        except httpx.RequestError as exc:
            raise pipeline.network_error(exc, url) from exc
        return pipeline.parse_response(response, url)

    async def _call(self, path: str, decode, method: str = "GET", body: Any = None):
        url = pipeline.build_url(self.config, path)
        return pipeline.unwrap(await self.request(path, method, body), url, decode)

    # Schedules

    async def get_schedules(self) -> List[Schedule]:
        return await self._call(pipeline.schedule_path(), pipeline.decode_list(Schedule.from_dict))

    async def get_schedule(self, schedule_id: str) -> Schedule:
        return await self._call(pipeline.schedule_path(schedule_id), Schedule.from_dict)

    @overload
    async def create_schedule(self, data: ScheduleInput) -> Schedule: ...

    @overload
    async def create_schedule(self, data: Sequence[ScheduleInput]) -> BulkCreateResponse: ...

    async def create_schedule(
        self, data: Union[ScheduleInput, Sequence[ScheduleInput]]
    ) -> Union[Schedule, BulkCreateResponse]:
        if pipeline.is_bulk_input(data):
            return await self.create_schedules_bulk(data)
        return await self._call(
            pipeline.schedule_path(), Schedule.from_dict, "POST", pipeline.create_payload(data)
        )

    async def create_schedules_bulk(self, data: Sequence[ScheduleInput]) -> BulkCreateResponse:
        payload = pipeline.bulk_payload(data)
        return await self._call(
            pipeline.schedule_path(action="bulk"), BulkCreateResponse.from_dict, "POST", payload
        )

    async def update_schedule(
        self, schedule_id: str, data: Union[UpdateScheduleData, Mapping[str, Any]]
    ) -> Schedule:
        return await self._call(
            pipeline.schedule_path(schedule_id), Schedule.from_dict, "PUT", pipeline.update_payload(data)
        )

    async def delete_schedule(self, schedule_id: str) -> None:
        await self.request(pipeline.schedule_path(schedule_id), "DELETE")

    async def trigger_schedule(self, schedule_id: str) -> Job:
        return await self._call(pipeline.schedule_path(schedule_id, "trigger"), Job.from_dict, "POST")

    async def toggle_schedule(self, schedule_id: str, enabled: bool) -> Schedule:
        return await self._call(
            pipeline.schedule_path(schedule_id, "toggle"),
            Schedule.from_dict,
            "PATCH",
            {"enabled": bool(enabled)},
        )

    # Jobs

    async def get_jobs(
        self,
        params: Union[GetJobsParams, Mapping[str, Any], None] = None,
        **filters: Any,
    ) -> List[Job]:
        path = pipeline.jobs_path(pipeline.resolve_jobs_params(params, **filters))
        return await self._call(path, pipeline.decode_list(Job.from_dict))

    async def get_job(self, job_id: str) -> Job:
        return await self._call(pipeline.job_path(job_id), Job.from_dict)
