"""Ordered registry of interceptor handler pairs."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping

Handler = Callable[[Any], Any]
Predicate = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class Interceptor:
    """One registered handler pair plus its participation metadata."""

    fulfilled: Handler | None
    rejected: Handler | None = None
    synchronous: bool = False
    run_when: Predicate | None = None

    def applies_to(self, config: Mapping[str, Any]) -> bool:
        if self.run_when is None:
            return True
        return self.run_when(config) is not False


class InterceptorManager:
    """Append-only arena of interceptors.

    Handles are arena indices. Ejecting leaves an inert slot behind instead of
    shifting later entries, so a chain being assembled for an in-flight request
    never sees positions move underneath it.
    """

    def __init__(self) -> None:
        self._handlers: list[Interceptor | None] = []
        self._lock = threading.Lock()

    def use(
        self,
        fulfilled: Handler | None,
        rejected: Handler | None = None,
        *,
        synchronous: bool = False,
        run_when: Predicate | None = None,
    ) -> int:
        """Register a handler pair and return its handle."""
        interceptor = Interceptor(
            fulfilled=fulfilled,
            rejected=rejected,
            synchronous=synchronous,
            run_when=run_when,
        )
        with self._lock:
            self._handlers.append(interceptor)
            return len(self._handlers) - 1

    def eject(self, handle: int) -> None:
        if 0 <= handle < len(self._handlers):
            self._handlers[handle] = None

    def clear(self) -> None:
        for index in range(len(self._handlers)):
            self._handlers[index] = None

    def for_each(self, visitor: Callable[[Interceptor], None]) -> None:
        for interceptor in self:
            visitor(interceptor)

    def __iter__(self) -> Iterator[Interceptor]:
        for interceptor in tuple(self._handlers):
            if interceptor is not None:
                yield interceptor

    def __len__(self) -> int:
        return sum(1 for _ in self)
