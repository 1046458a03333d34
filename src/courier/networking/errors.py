"""Error types raised by the Courier request pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Sequence

if TYPE_CHECKING:
    from .types import Response


class CourierError(Exception):
    """Base error for everything the pipeline reports.

    Carries the resolved configuration, the transport specific request handle
    and, for server-observed failures, the response that caused it.
    """

    code: str | None = None

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        config: Mapping[str, Any] | None = None,
        request: Any = None,
        response: Response | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.config = config
        self.request = request
        self.response = response

    @property
    def status(self) -> int | None:
        if self.response is None:
            return None
        return self.response.status


class ConfigurationError(CourierError):
    """Invalid option shape caught by an option validator."""

    code = "ERR_BAD_OPTION"


class CanceledError(CourierError):
    """A cancellation checkpoint observed a requested cancellation."""

    code = "ERR_CANCELED"

    def __init__(
        self,
        message: str | None = None,
        config: Mapping[str, Any] | None = None,
        request: Any = None,
    ) -> None:
        super().__init__(message or "canceled", config=config, request=request)


class AdapterResolutionError(CourierError):
    """No configured adapter name or value resolved to an adapter."""

    code = "ERR_NOT_SUPPORT"

    def __init__(self, attempts: Sequence[str]) -> None:
        self.attempts = list(attempts)
        if len(self.attempts) == 1:
            detail = self.attempts[0]
        else:
            detail = "\n".join(f"  - {attempt}" for attempt in self.attempts)
            detail = f"none of the configured adapters resolved:\n{detail}"
        super().__init__(f"No usable adapter: {detail}")


class TransportError(CourierError):
    """Failure reported by an adapter (network, status, malformed body)."""

    code = "ERR_NETWORK"


class RequestTimeoutError(TransportError):
    """Transport timed out before a response was received."""

    code = "ECONNABORTED"


def is_cancel(value: Any) -> bool:
    """Return True when ``value`` is a cancellation error."""
    return isinstance(value, CanceledError)


def is_courier_error(value: Any) -> bool:
    return isinstance(value, CourierError)
