"""
Python client for the cronhost scheduling service.

cronhost runs HTTP calls on cron schedules. This package lets you:
- Create, update, delete, enable/disable and trigger schedules
- Create up to 1000 schedules in one bulk request
- Inspect the jobs (execution attempts) those schedules produce

Scheduling, retries and persistence all happen server-side; the client is a
stateless mapper over the HTTP API:
    from cronhost import Cronhost
    cron = Cronhost(api_key="ch_...")
    for schedule in cron.get_schedules():
        print(schedule.name, schedule.next_run_at_utc)
"""

from cronhost.async_client import AsyncCronhost
from cronhost.client import Cronhost
from cronhost.config import DEFAULT_BASE_URL, MAX_BULK_SCHEDULES, CronhostConfig
from cronhost.errors import (
    ApiErrorDetail,
    BulkValidationError,
    CronhostAPIError,
    CronhostError,
    CronhostNetworkError,
    CronhostParseError,
    CronhostValidationError,
    format_error,
)
from cronhost.types import (
    ApiResponse,
    BulkCreatedSchedule,
    BulkCreateResponse,
    CreateScheduleData,
    GetJobsParams,
    HttpMethod,
    Job,
    JobStatus,
    Schedule,
    UpdateScheduleData,
)

__version__ = "0.1.0"

__all__ = [
    "Cronhost",
    "AsyncCronhost",
    "CronhostConfig",
    "DEFAULT_BASE_URL",
    "MAX_BULK_SCHEDULES",
    "CronhostError",
    "CronhostNetworkError",
    "CronhostParseError",
    "CronhostAPIError",
    "CronhostValidationError",
    "ApiErrorDetail",
    "BulkValidationError",
    "format_error",
    "Schedule",
    "Job",
    "HttpMethod",
    "JobStatus",
    "CreateScheduleData",
    "UpdateScheduleData",
    "GetJobsParams",
    "ApiResponse",
    "BulkCreateResponse",
    "BulkCreatedSchedule",
]
