"""API key masking for log output and object reprs.

Short keys (< 18 chars) are fully masked. Longer keys preserve
the first 6 and last 4 characters for debuggability.
"""

import re
from typing import Dict, Mapping, Optional

from cronhost.config import API_KEY_HEADER

# Header names whose values are always secrets
_SECRET_HEADER_NAMES = {API_KEY_HEADER.lower(), "authorization", "cookie"}

# JSON field patterns: "apiKey": "value", "x-api-key": "value"
_JSON_FIELD_RE = re.compile(
    r'("(?:api_?[Kk]ey|x-api-key|token|secret)")\s*:\s*"([^"]+)"',
    re.IGNORECASE,
)


def mask_api_key(key: Optional[str]) -> str:
    """Mask a key, preserving prefix and suffix for long keys."""
    if not key:
        return ""
    if len(key) < 18:
        return "***"
    return f"{key[:6]}...{key[-4:]}"


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` with secret values masked."""
    return {
        name: mask_api_key(value) if name.lower() in _SECRET_HEADER_NAMES else value
        for name, value in headers.items()
    }


def redact_sensitive_text(text: str) -> str:
    """Mask secret-looking JSON fields in a block of text.

    Non-matching text passes through unchanged.
    """
    if not text:
        return text
    return _JSON_FIELD_RE.sub(
        lambda m: f'{m.group(1)}: "{mask_api_key(m.group(2))}"',
        text,
    )
