"""
Blocking cronhost API client.

Usage:
    with Cronhost(api_key="ch_...") as cron:
        schedule = cron.create_schedule(CreateScheduleData(
            name="nightly report",
            cron_expression="0 2 * * *",
            timezone="UTC",
            endpoint="https://example.com/report",
            http_method="POST",
        ))
        cron.trigger_schedule(schedule.id)

Each method performs exactly one HTTP call. Nothing is retried and no timeout
is applied unless the caller passes an ``httpx.Client`` configured with one.
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


class Cronhost:
    """Synchronous client for the cronhost scheduling API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        config: Optional[CronhostConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = resolve_config(api_key, base_url, config)
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(timeout=None)

    def __repr__(self) -> str:
        return f"Cronhost({self.config!r})"

    def __enter__(self) -> "Cronhost":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport if this client created it."""
        if self._owns_client:
            self._client.close()

    # =========================================================================
    # Request pipeline
    # =========================================================================

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Send one request under the versioned API root and return parsed JSON.

        Raises CronhostNetworkError, CronhostParseError or CronhostAPIError.
        """
        method, url, merged, content = pipeline.request_args(self.config, path, method, body, headers)
        try:
            response = self._client.request(method, url, headers=merged, content=content)
        except httpx.RequestError as exc:
            raise pipeline.network_error(exc, url) from exc
        return pipeline.parse_response(response, url)

    def _call(self, path: str, decode, method: str = "GET", body: Any = None):
        url = pipeline.build_url(self.config, path)
        return pipeline.unwrap(self.request(path, method, body), url, decode)

    # =========================================================================
    # Schedules
    # =========================================================================

    def get_schedules(self) -> List[Schedule]:
        return self._call(pipeline.schedule_path(), pipeline.decode_list(Schedule.from_dict))

    def get_schedule(self, schedule_id: str) -> Schedule:
        return self._call(pipeline.schedule_path(schedule_id), Schedule.from_dict)

    @overload
    def create_schedule(self, data: ScheduleInput) -> Schedule: ...

    @overload
    def create_schedule(self, data: Sequence[ScheduleInput]) -> BulkCreateResponse: ...

    def create_schedule(
        self, data: Union[ScheduleInput, Sequence[ScheduleInput]]
    ) -> Union[Schedule, BulkCreateResponse]:
        """Create one schedule, or many when given a list or tuple.

        A sequence always goes to the bulk endpoint, even with one element.
        """
        if pipeline.is_bulk_input(data):
            return self.create_schedules_bulk(data)
        return self._call(
            pipeline.schedule_path(), Schedule.from_dict, "POST", pipeline.create_payload(data)
        )

    def create_schedules_bulk(self, data: Sequence[ScheduleInput]) -> BulkCreateResponse:
        """Create up to 1000 schedules in one all-or-nothing request."""
        payload = pipeline.bulk_payload(data)
        return self._call(
            pipeline.schedule_path(action="bulk"), BulkCreateResponse.from_dict, "POST", payload
        )

    def update_schedule(
        self, schedule_id: str, data: Union[UpdateScheduleData, Mapping[str, Any]]
    ) -> Schedule:
        return self._call(
            pipeline.schedule_path(schedule_id), Schedule.from_dict, "PUT", pipeline.update_payload(data)
        )

    def delete_schedule(self, schedule_id: str) -> None:
        self.request(pipeline.schedule_path(schedule_id), "DELETE")

    def trigger_schedule(self, schedule_id: str) -> Job:
        """Run a schedule now; returns the job the service created."""
        return self._call(pipeline.schedule_path(schedule_id, "trigger"), Job.from_dict, "POST")

    def toggle_schedule(self, schedule_id: str, enabled: bool) -> Schedule:
        return self._call(
            pipeline.schedule_path(schedule_id, "toggle"),
            Schedule.from_dict,
            "PATCH",
            {"enabled": bool(enabled)},
        )

    # =========================================================================
    # Jobs
    # =========================================================================

    def get_jobs(
        self,
        params: Union[GetJobsParams, Mapping[str, Any], None] = None,
        **filters: Any,
    ) -> List[Job]:
        """List jobs, optionally filtered by schedule_id, status, page and limit."""
        path = pipeline.jobs_path(pipeline.resolve_jobs_params(params, **filters))
        return self._call(path, pipeline.decode_list(Job.from_dict))

    def get_job(self, job_id: str) -> Job:
        return self._call(pipeline.job_path(job_id), Job.from_dict)
