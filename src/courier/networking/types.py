"""Shared value types for the request pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping

Config = Dict[str, Any]
Adapter = Callable[[Config], Awaitable["Response"]]
Transform = Callable[[Any, Any, "int | None"], Any]


@dataclass
class Response:
    """Result of one dispatched request.

    Adapters hand back raw ``data``/``headers``; the dispatcher replaces them
    with the transformed body and a normalized header container.
    """

    data: Any
    status: int
    status_text: str = ""
    headers: Any = field(default_factory=dict)
    config: Mapping[str, Any] = field(default_factory=dict)
    request: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
