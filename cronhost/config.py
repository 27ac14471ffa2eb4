"""
Client configuration for cronhost.

The configuration is resolved once, when a client is constructed, and never
changes afterwards. Nothing is read from disk or the environment: the caller
supplies the API key explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cronhost.errors import CronhostValidationError

# =============================================================================
# Constants
# =============================================================================

DEFAULT_BASE_URL = "https://cronho.st"
API_VERSION_PREFIX = "/api/v1"
API_KEY_HEADER = "x-api-key"
JSON_CONTENT_TYPE = "application/json"
MAX_BULK_SCHEDULES = 1000


@dataclass(frozen=True)
class CronhostConfig:
    """Connection settings for a cronhost client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        # Normalise once so URL joining never produces a double slash
        object.__setattr__(self, "base_url", (self.base_url or DEFAULT_BASE_URL).rstrip("/"))

    @property
    def api_root(self) -> str:
        """Base URL with the versioned API prefix appended."""
        return f"{self.base_url}{API_VERSION_PREFIX}"

    def __repr__(self) -> str:
        from cronhost.redact import mask_api_key

        return f"CronhostConfig(api_key={mask_api_key(self.api_key)!r}, base_url={self.base_url!r})"


def resolve_config(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    config: Optional[CronhostConfig] = None,
) -> CronhostConfig:
    """Build the config from either an explicit object or keyword values."""
    if config is not None:
        if api_key is not None or base_url is not None:
            raise CronhostValidationError("Pass either config or api_key/base_url, not both")
        return config
    if not api_key:
        raise CronhostValidationError(
            "cronhost API key is required. Create one in the cronhost dashboard "
            "and pass it as Cronhost(api_key=...)"
        )
    return CronhostConfig(api_key=api_key, base_url=base_url or DEFAULT_BASE_URL)
