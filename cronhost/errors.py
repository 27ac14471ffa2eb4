"""
Error types raised by the cronhost clients.

Every failure surfaces as a subclass of ``CronhostError`` so callers can tell
categories apart by type instead of by message text:

- CronhostNetworkError    - no response was received (DNS, refused, timeout)
- CronhostParseError      - a response arrived but could not be interpreted
- CronhostAPIError        - the service answered with a non-success status
- CronhostValidationError - input rejected locally, before any request
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# =============================================================================
# Error payloads
# =============================================================================

@dataclass
class ApiErrorDetail:
    """The ``error`` object of a failed response body."""
    message: str
    code: str = ""
    details: Any = None
    index: Optional[int] = None  # bulk creation: offending element
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            result["details"] = self.details
        if self.index is not None:
            result["index"] = self.index
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiErrorDetail":
        index = data.get("index")
        return cls(
            message=str(data.get("message") or ""),
            code=str(data.get("code") or ""),
            details=data.get("details"),
            index=index if isinstance(index, int) else None,
            raw=dict(data),
        )


@dataclass
class BulkValidationError:
    """One rejected element of a bulk creation request."""
    index: int
    schedule: Dict[str, Any]
    error: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BulkValidationError":
        return cls(
            index=int(data["index"]),
            schedule=dict(data.get("schedule") or {}),
            error=str(data.get("error") or ""),
        )


# =============================================================================
# Exceptions
# =============================================================================

class CronhostError(RuntimeError):
    """Base class for every error raised by the client."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class CronhostValidationError(CronhostError, ValueError):
    """Input rejected locally; no request was sent."""


class CronhostNetworkError(CronhostError):
    """The request never produced a response."""

    def __init__(self, cause: BaseException, *, url: Optional[str] = None) -> None:
        super().__init__(f"Network error: {cause}", url=url)
        self.cause = cause


class CronhostParseError(CronhostError):
    """A response was received but its body could not be interpreted."""

    def __init__(
        self,
        reason: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(f"Failed to parse response: {reason}", url=url)
        self.reason = reason
        self.status_code = status_code
        self.body = body


class CronhostAPIError(CronhostError):
    """The service answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status_text: str = "",
        url: Optional[str] = None,
        error: Optional[ApiErrorDetail] = None,
    ) -> None:
        super().__init__(f"API request failed: {message}", url=url)
        self.message = message
        self.status_code = status_code
        self.status_text = status_text
        self.error = error

    @property
    def code(self) -> Optional[str]:
        return self.error.code if self.error and self.error.code else None

    @property
    def details(self) -> Any:
        return self.error.details if self.error else None

    @property
    def index(self) -> Optional[int]:
        return self.error.index if self.error else None

    def bulk_validation_errors(self) -> List[BulkValidationError]:
        """Decode per-element failures reported for a bulk creation."""
        details = self.details
        if isinstance(details, dict):
            details = details.get("errors")
        if not isinstance(details, list):
            return []
        return [
            BulkValidationError.from_dict(item)
            for item in details
            if isinstance(item, dict) and isinstance(item.get("index"), int)
        ]


def format_error(error: BaseException) -> str:
    """Map client failures to a concise one-line message."""
    if not isinstance(error, CronhostError):
        return str(error)

    if isinstance(error, CronhostAPIError):
        parts = [f"HTTP {error.status_code}"]
        if error.code:
            parts.append(error.code)
        text = f"{error.message} ({', '.join(parts)})"
        if error.index is not None:
            text += f" at schedule #{error.index}"
        return text

    if isinstance(error, CronhostNetworkError):
        where = f" while contacting {error.url}" if error.url else ""
        return f"Could not reach cronhost{where}: {error.cause}"

    return str(error)
