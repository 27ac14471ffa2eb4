"""
Data shapes exchanged with the cronhost API.

Resources (Schedule, Job) are read from responses and never mutated locally.
Inputs (CreateScheduleData, UpdateScheduleData, GetJobsParams) are built by
the caller and turned into wire payloads here.

Wire keys are camelCase; attributes are snake_case. ``to_dict`` omits
optional fields that are absent rather than emitting ``null``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from cronhost.errors import CronhostValidationError


class HttpMethod(str, Enum):
    """HTTP verbs a schedule may call its endpoint with."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class JobStatus(str, Enum):
    """Lifecycle of a job. Transitions happen server-side only."""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


# =============================================================================
# Helpers
# =============================================================================

def dumps_compact(value: Any) -> str:
    """Serialize to JSON without insignificant whitespace."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _coerce_method(value: Union[str, HttpMethod]) -> HttpMethod:
    try:
        return HttpMethod(str(getattr(value, "value", value)).upper())
    except ValueError:
        allowed = ", ".join(m.value for m in HttpMethod)
        raise CronhostValidationError(
            f"Invalid httpMethod '{value}'. Expected one of: {allowed}"
        ) from None


def _coerce_status(value: Union[str, JobStatus]) -> JobStatus:
    try:
        return JobStatus(str(getattr(value, "value", value)).upper())
    except ValueError:
        allowed = ", ".join(s.value for s in JobStatus)
        raise CronhostValidationError(
            f"Invalid job status '{value}'. Expected one of: {allowed}"
        ) from None


def _check_headers(headers: Optional[Mapping[str, str]]) -> Optional[Dict[str, str]]:
    if headers is None:
        return None
    if not isinstance(headers, Mapping):
        raise CronhostValidationError("headers must be a mapping of header names to values")
    for name, value in headers.items():
        if not isinstance(name, str) or not isinstance(value, str):
            raise CronhostValidationError(
                f"Header {name!r} must map a string name to a string value"
            )
    return dict(headers)


def _put(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


# =============================================================================
# Resources
# =============================================================================

@dataclass
class Schedule:
    """A recurring rule describing when to call a configured HTTP endpoint."""
    id: str
    name: str
    cron_expression: str
    timezone: str
    endpoint: str
    http_method: HttpMethod
    is_enabled: bool
    next_run_at_utc: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    max_retries: int = 0
    timeout_seconds: int = 0
    description: Optional[str] = None
    body: Optional[str] = None
    headers: Optional[str] = None  # JSON-encoded mapping, opaque on the wire
    last_run_at_utc: Optional[datetime] = None

    def headers_dict(self) -> Dict[str, str]:
        """Decode the stored header string; empty when none are set."""
        if not self.headers:
            return {}
        decoded = json.loads(self.headers)
        return {str(k): str(v) for k, v in decoded.items()}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "cronExpression": self.cron_expression,
            "timezone": self.timezone,
            "endpoint": self.endpoint,
            "httpMethod": self.http_method.value,
            "isEnabled": self.is_enabled,
            "nextRunAtUtc": format_timestamp(self.next_run_at_utc),
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "maxRetries": self.max_retries,
            "timeoutSeconds": self.timeout_seconds,
        }
        _put(result, "description", self.description)
        _put(result, "body", self.body)
        _put(result, "headers", self.headers)
        _put(result, "lastRunAtUtc", format_timestamp(self.last_run_at_utc))
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schedule":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            cron_expression=data["cronExpression"],
            timezone=data["timezone"],
            endpoint=data["endpoint"],
            http_method=_coerce_method(data["httpMethod"]),
            is_enabled=bool(data.get("isEnabled", True)),
            next_run_at_utc=parse_timestamp(data.get("nextRunAtUtc")),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            max_retries=int(data.get("maxRetries") or 0),
            timeout_seconds=int(data.get("timeoutSeconds") or 0),
            description=data.get("description"),
            body=data.get("body"),
            headers=data.get("headers"),
            last_run_at_utc=parse_timestamp(data.get("lastRunAtUtc")),
        )


@dataclass
class Job:
    """One execution attempt produced by a schedule."""
    id: str
    schedule_id: str
    status: JobStatus
    scheduled_run_at_utc: Optional[datetime]
    attempt_number: int
    http_method: HttpMethod
    endpoint: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    body: Optional[str] = None
    headers: Optional[str] = None
    status_code: Optional[int] = None
    response: Optional[str] = None
    started_at_utc: Optional[datetime] = None
    completed_at_utc: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.SUCCESS, JobStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "scheduleId": self.schedule_id,
            "status": self.status.value,
            "scheduledRunAtUtc": format_timestamp(self.scheduled_run_at_utc),
            "attemptNumber": self.attempt_number,
            "httpMethod": self.http_method.value,
            "endpoint": self.endpoint,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
        _put(result, "body", self.body)
        _put(result, "headers", self.headers)
        _put(result, "statusCode", self.status_code)
        _put(result, "response", self.response)
        _put(result, "startedAtUtc", format_timestamp(self.started_at_utc))
        _put(result, "completedAtUtc", format_timestamp(self.completed_at_utc))
        _put(result, "errorMessage", self.error_message)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        status_code = data.get("statusCode")
        return cls(
            id=str(data["id"]),
            schedule_id=str(data["scheduleId"]),
            status=_coerce_status(data["status"]),
            scheduled_run_at_utc=parse_timestamp(data.get("scheduledRunAtUtc")),
            attempt_number=int(data.get("attemptNumber") or 1),
            http_method=_coerce_method(data["httpMethod"]),
            endpoint=data["endpoint"],
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            body=data.get("body"),
            headers=data.get("headers"),
            status_code=int(status_code) if status_code is not None else None,
            response=data.get("response"),
            started_at_utc=parse_timestamp(data.get("startedAtUtc")),
            completed_at_utc=parse_timestamp(data.get("completedAtUtc")),
            error_message=data.get("errorMessage"),
        )


# =============================================================================
# Inputs
# =============================================================================

# attribute -> wire key, in the order fields are emitted
_SCHEDULE_INPUT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("description", "description"),
    ("cron_expression", "cronExpression"),
    ("timezone", "timezone"),
    ("endpoint", "endpoint"),
    ("http_method", "httpMethod"),
    ("body", "body"),
    ("headers", "headers"),
    ("max_retries", "maxRetries"),
    ("timeout_seconds", "timeoutSeconds"),
)


def _input_kwargs(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept wire (camelCase) or attribute (snake_case) keys."""
    kwargs: Dict[str, Any] = {}
    for attr, wire in _SCHEDULE_INPUT_FIELDS:
        if wire in data:
            kwargs[attr] = data[wire]
        elif attr in data:
            kwargs[attr] = data[attr]
    unknown = set(data) - {k for pair in _SCHEDULE_INPUT_FIELDS for k in pair}
    if unknown:
        raise CronhostValidationError(f"Unknown schedule field(s): {', '.join(sorted(unknown))}")
    return kwargs


def _input_payload(obj: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for attr, wire in _SCHEDULE_INPUT_FIELDS:
        value = getattr(obj, attr)
        if value is None:
            continue
        if attr == "http_method":
            value = value.value
        elif attr == "headers":
            # The service stores headers as an opaque string field
            value = dumps_compact(value)
        payload[wire] = value
    return payload


@dataclass
class CreateScheduleData:
    """Fields for a new schedule."""
    name: str
    cron_expression: str
    timezone: str
    endpoint: str
    http_method: Union[HttpMethod, str]
    description: Optional[str] = None
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    max_retries: Optional[int] = None
    timeout_seconds: Optional[int] = None

    def __post_init__(self) -> None:
        self.http_method = _coerce_method(self.http_method)
        self.headers = _check_headers(self.headers)

    def to_payload(self) -> Dict[str, Any]:
        """Wire body for POST /schedules (or one element of a bulk body)."""
        return _input_payload(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CreateScheduleData":
        kwargs = _input_kwargs(data)
        missing = [
            wire for attr, wire in _SCHEDULE_INPUT_FIELDS[:6]
            if attr != "description" and attr not in kwargs
        ]
        if missing:
            raise CronhostValidationError(f"Missing required schedule field(s): {', '.join(missing)}")
        return cls(**kwargs)


@dataclass
class UpdateScheduleData:
    """Partial update; only fields that are set are sent."""
    name: Optional[str] = None
    description: Optional[str] = None
    cron_expression: Optional[str] = None
    timezone: Optional[str] = None
    endpoint: Optional[str] = None
    http_method: Optional[Union[HttpMethod, str]] = None
    body: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    max_retries: Optional[int] = None
    timeout_seconds: Optional[int] = None

    def __post_init__(self) -> None:
        if self.http_method is not None:
            self.http_method = _coerce_method(self.http_method)
        self.headers = _check_headers(self.headers)

    def to_payload(self) -> Dict[str, Any]:
        """Wire body for PUT /schedules/{id}."""
        return _input_payload(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UpdateScheduleData":
        return cls(**_input_kwargs(data))


@dataclass
class GetJobsParams:
    """Filters for the job listing. Unset filters are left out of the query."""
    schedule_id: Optional[str] = None
    status: Optional[Union[JobStatus, str]] = None
    page: Optional[int] = None
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.status is not None:
            self.status = _coerce_status(self.status)

    def to_query(self) -> List[Tuple[str, str]]:
        query: List[Tuple[str, str]] = []
        if self.schedule_id is not None:
            query.append(("scheduleId", self.schedule_id))
        if self.status is not None:
            query.append(("status", self.status.value))
        if self.page is not None:
            query.append(("page", str(int(self.page))))
        if self.limit is not None:
            query.append(("limit", str(int(self.limit))))
        return query


# =============================================================================
# Envelopes
# =============================================================================

@dataclass
class ApiResponse:
    """The ``{data, success, message}`` wrapper of every successful response."""
    data: Any
    success: bool = True
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ApiResponse":
        return cls(
            data=payload["data"],
            success=bool(payload.get("success", True)),
            message=payload.get("message"),
        )


@dataclass
class BulkCreatedSchedule:
    id: str
    name: str


@dataclass
class BulkCreateResponse:
    """Result of POST /schedules/bulk."""
    count: int
    schedules: List[BulkCreatedSchedule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkCreateResponse":
        schedules = [
            BulkCreatedSchedule(id=str(item["id"]), name=item["name"])
            for item in data.get("schedules") or []
        ]
        return cls(count=int(data.get("count", len(schedules))), schedules=schedules)


ScheduleInput = Union[CreateScheduleData, Mapping[str, Any]]
