"""Session-level settings for the bundled ``requests`` transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class TransportConfig:
    """Settings shared by every exchange on one ``RequestsAdapter`` session.

    Per-request options (``timeout``, ``verify``, ``max_redirects``...) live in
    the request configuration. The connect/read pair is only used when a
    request carries no ``timeout`` of its own.
    """

    user_agent: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)
    verify_tls: bool = True
    connect_timeout_seconds: float | None = None
    read_timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        pair = (self.connect_timeout_seconds, self.read_timeout_seconds)
        if (pair[0] is None) != (pair[1] is None):
            raise ValueError(
                "connect_timeout_seconds and read_timeout_seconds "
                "must be set together"
            )
        if any(seconds is not None and seconds <= 0 for seconds in pair):
            raise ValueError("session timeouts must be > 0 when provided")

        # session headers are seeded once; later edits to the caller's dict must not leak in
        object.__setattr__(
            self, "default_headers", MappingProxyType(dict(self.default_headers))
        )

    @property
    def session_timeout(self) -> tuple[float, float] | None:
        if self.connect_timeout_seconds is None or self.read_timeout_seconds is None:
            return None
        return (self.connect_timeout_seconds, self.read_timeout_seconds)
