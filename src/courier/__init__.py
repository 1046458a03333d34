"""Courier: promise-style request orchestration over pluggable transports."""

from __future__ import annotations

from typing import Any, Mapping

from .networking import (
    AbortController,
    AdapterResolutionError,
    CancelToken,
    CanceledError,
    ConfigurationError,
    Courier,
    CourierError,
    Headers,
    RequestTimeoutError,
    RequestsAdapter,
    Response,
    TransportConfig,
    TransportError,
    default_config,
    is_cancel,
    is_courier_error,
    merge_config,
    registry,
)

__version__ = "0.1.0"

adapters = registry


def create(instance_config: Mapping[str, Any] | None = None) -> Courier:
    """Create an instance whose defaults are the package defaults plus ``instance_config``."""
    return Courier(merge_config(default_config(), instance_config))


courier = create()

__all__ = [
    "AbortController",
    "AdapterResolutionError",
    "CancelToken",
    "CanceledError",
    "ConfigurationError",
    "Courier",
    "CourierError",
    "Headers",
    "RequestTimeoutError",
    "RequestsAdapter",
    "Response",
    "TransportConfig",
    "TransportError",
    "adapters",
    "courier",
    "create",
    "is_cancel",
    "is_courier_error",
    "merge_config",
]
