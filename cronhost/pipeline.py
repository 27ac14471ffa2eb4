"""
Request pipeline shared by the sync and async clients.

Everything here is pure: building URLs, headers and bodies, and turning an
``httpx.Response`` into either parsed JSON or a typed error. The clients only
add the I/O around these functions, so both behave identically.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar
from urllib.parse import quote, urlencode

import httpx

from cronhost.config import API_KEY_HEADER, JSON_CONTENT_TYPE, MAX_BULK_SCHEDULES, CronhostConfig
from cronhost.errors import (
    ApiErrorDetail,
    CronhostAPIError,
    CronhostNetworkError,
    CronhostParseError,
    CronhostValidationError,
)
from cronhost.redact import redact_headers, redact_sensitive_text
from cronhost.types import (
    ApiResponse,
    CreateScheduleData,
    GetJobsParams,
    ScheduleInput,
    UpdateScheduleData,
    dumps_compact,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Request building
# =============================================================================

def build_url(config: CronhostConfig, path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    return f"{config.api_root}{path}"


def build_headers(config: CronhostConfig, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Default headers, with caller values taking precedence.

    Matching is case-insensitive so an override replaces the default rather
    than sending the header twice.
    """
    headers = {"Content-Type": JSON_CONTENT_TYPE, API_KEY_HEADER: config.api_key}
    for name, value in (extra or {}).items():
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value
    return headers


def encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    return dumps_compact(body).encode("utf-8")


def log_request(method: str, url: str, headers: Mapping[str, str]) -> None:
    logger.debug("%s %s headers=%s", method, url, redact_headers(headers))


def network_error(exc: httpx.RequestError, url: str) -> CronhostNetworkError:
    logger.debug("Network failure contacting %s: %s", url, exc)
    return CronhostNetworkError(exc, url=url)


# =============================================================================
# Paths
# =============================================================================

def schedule_path(schedule_id: Optional[str] = None, action: Optional[str] = None) -> str:
    path = "/schedules"
    if schedule_id is not None:
        path += "/" + quote(str(schedule_id), safe="")
    if action:
        path += "/" + action
    return path


def job_path(job_id: str) -> str:
    return "/jobs/" + quote(str(job_id), safe="")


def jobs_path(params: Optional[GetJobsParams] = None) -> str:
    query = params.to_query() if params else []
    if not query:
        return "/jobs"
    return "/jobs?" + urlencode(query)


def resolve_jobs_params(params: Any = None, **filters: Any) -> GetJobsParams:
    """Accept a GetJobsParams, a mapping (wire or snake_case keys) or kwargs."""
    if isinstance(params, GetJobsParams):
        if filters:
            raise CronhostValidationError("Pass either a GetJobsParams or keyword filters, not both")
        return params
    merged: Dict[str, Any] = {}
    aliases = {"scheduleId": "schedule_id"}
    for key, value in dict(params or {}).items():
        merged[aliases.get(key, key)] = value
    merged.update(filters)
    unknown = set(merged) - {"schedule_id", "status", "page", "limit"}
    if unknown:
        raise CronhostValidationError(f"Unknown job filter(s): {', '.join(sorted(unknown))}")
    return GetJobsParams(**merged)


# =============================================================================
# Payloads
# =============================================================================

def is_bulk_input(data: Any) -> bool:
    """True when ``data`` is a sequence of schedules rather than one schedule."""
    return isinstance(data, (list, tuple))


def create_payload(data: ScheduleInput) -> Dict[str, Any]:
    if isinstance(data, CreateScheduleData):
        return data.to_payload()
    if isinstance(data, Mapping):
        return CreateScheduleData.from_dict(data).to_payload()
    raise CronhostValidationError(
        f"Expected CreateScheduleData or a mapping, got {type(data).__name__}"
    )


def bulk_payload(items: Sequence[ScheduleInput]) -> List[Dict[str, Any]]:
    if len(items) == 0:
        raise CronhostValidationError("At least one schedule is required for bulk creation")
    if len(items) > MAX_BULK_SCHEDULES:
        raise CronhostValidationError(
            f"Cannot create more than {MAX_BULK_SCHEDULES} schedules at once"
        )
    return [create_payload(item) for item in items]


def update_payload(data: Any) -> Dict[str, Any]:
    if isinstance(data, UpdateScheduleData):
        return data.to_payload()
    if isinstance(data, Mapping):
        return UpdateScheduleData.from_dict(data).to_payload()
    raise CronhostValidationError(
        f"Expected UpdateScheduleData or a mapping, got {type(data).__name__}"
    )


# =============================================================================
# Response handling
# =============================================================================

def _error_message(data: Any, text: str, response: httpx.Response) -> str:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
    if text:
        return text
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def parse_response(response: httpx.Response, url: str) -> Any:
    """Return the parsed body of a successful response or raise a typed error."""
    content_type = response.headers.get("content-type", "")
    text = ""
    data: Any = None

    if JSON_CONTENT_TYPE in content_type.lower():
        if response.content:
            try:
                data = response.json()
            except ValueError as exc:
                logger.debug("Invalid JSON from %s: %s (body: %s)", url, exc, redact_sensitive_text(response.text[:200]))
                raise CronhostParseError(
                    str(exc), url=url, status_code=response.status_code, body=response.text
                ) from exc
    else:
        text = response.text
        # Some servers mislabel JSON; try it before treating the body as text
        if text.strip():
            try:
                data = json.loads(text)
            except ValueError as exc:
                if response.is_success:
                    logger.debug("Non-JSON success body from %s: %s", url, redact_sensitive_text(text[:200]))
                    raise CronhostParseError(
                        f"expected JSON but received {content_type or 'an untyped body'}",
                        url=url,
                        status_code=response.status_code,
                        body=text,
                    ) from exc

    if not response.is_success:
        message = _error_message(data, text, response)
        error = data.get("error") if isinstance(data, dict) else None
        logger.debug("API error %s from %s: %s", response.status_code, url, message)
        raise CronhostAPIError(
            message,
            status_code=response.status_code,
            status_text=response.reason_phrase,
            url=url,
            error=ApiErrorDetail.from_dict(error) if isinstance(error, dict) else None,
        )

    logger.debug("%s -> %s", url, response.status_code)
    return data


def unwrap(payload: Any, url: str, decode: Callable[[Any], T]) -> T:
    """Pull ``data`` out of the success envelope and decode it."""
    if not isinstance(payload, dict) or "data" not in payload:
        raise CronhostParseError("response envelope has no 'data' field", url=url)
    try:
        return decode(ApiResponse.from_dict(payload).data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise CronhostParseError(f"unexpected response shape ({exc!r})", url=url) from exc


def decode_list(decode: Callable[[Dict[str, Any]], T]) -> Callable[[Any], List[T]]:
    def _decode(items: Any) -> List[T]:
        if not isinstance(items, list):
            raise TypeError(f"expected a list, got {type(items).__name__}")
        return [decode(item) for item in items]
    return _decode


def request_args(
    config: CronhostConfig,
    path: str,
    method: str,
    body: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Tuple[str, str, Dict[str, str], Optional[bytes]]:
    """Everything a transport needs for one call: (method, url, headers, content)."""
    method = method.upper()
    url = build_url(config, path)
    merged = build_headers(config, headers)
    log_request(method, url, merged)
    return method, url, merged, encode_body(body)
