"""Process-wide default configuration."""

from __future__ import annotations

from typing import Any

from .transforms import TRANSITIONAL_DEFAULTS, transform_request, transform_response
from .transport import default_validate_status

DEFAULT_ADAPTER: list[Any] = ["requests"]


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the default request configuration."""
    return {
        "adapter": list(DEFAULT_ADAPTER),
        "transitional": dict(TRANSITIONAL_DEFAULTS),
        "transform_request": [transform_request],
        "transform_response": [transform_response],
        "timeout": 0,
        "validate_status": default_validate_status,
        "headers": {
            "common": {"Accept": "application/json, text/plain, */*"},
            "delete": {},
            "get": {},
            "head": {},
            "post": {},
            "put": {},
            "patch": {},
        },
    }
