"""Request pipeline: config merging, interceptors, dispatch and adapters."""

from .adapters import AdapterRegistry, get_adapter, registry
from .cancel import (
    AbortController,
    AbortSignal,
    CancelToken,
    throw_if_cancellation_requested,
)
from .client import Courier, Interceptors
from .config import TransportConfig
from .defaults import default_config
from .dispatch import dispatch_request
from .errors import (
    AdapterResolutionError,
    CanceledError,
    ConfigurationError,
    CourierError,
    RequestTimeoutError,
    TransportError,
    is_cancel,
    is_courier_error,
)
from .headers import Headers
from .interceptors import Interceptor, InterceptorManager
from .merge import merge_config
from .transport import RequestsAdapter
from .types import Response

__all__ = [
    "AbortController",
    "AbortSignal",
    "AdapterRegistry",
    "AdapterResolutionError",
    "CancelToken",
    "CanceledError",
    "ConfigurationError",
    "Courier",
    "CourierError",
    "Headers",
    "Interceptor",
    "InterceptorManager",
    "Interceptors",
    "RequestTimeoutError",
    "RequestsAdapter",
    "Response",
    "TransportConfig",
    "TransportError",
    "default_config",
    "dispatch_request",
    "get_adapter",
    "is_cancel",
    "is_courier_error",
    "merge_config",
    "registry",
    "throw_if_cancellation_requested",
]
