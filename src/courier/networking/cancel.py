"""Cooperative cancellation.

Two sources feed the same semantics: a ``CancelToken`` (explicit token with a
waitable form) and an ``AbortSignal`` (boolean ``aborted`` flag). Once
requested, cancellation is never withdrawn. The pipeline only queries these at
its checkpoints; adapters are expected to honour them independently.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, NamedTuple

from .errors import CanceledError

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class CancelToken:
    """Explicit cancellation handle shared between caller and pipeline."""

    def __init__(self, executor: Callable[[Callable[..., None]], None] | None = None) -> None:
        self.reason: CanceledError | None = None
        self._listeners: list[Listener] = []
        if executor is not None:
            executor(self.cancel)

    @classmethod
    def source(cls) -> "CancelTokenSource":
        token = cls()
        return CancelTokenSource(token, token.cancel)

    @property
    def requested(self) -> bool:
        return self.reason is not None

    def cancel(
        self,
        message: str | None = None,
        config: Mapping[str, Any] | None = None,
        request: Any = None,
    ) -> None:
        """Request cancellation; calling it again has no effect."""
        if self.reason is not None:
            return
        self.reason = CanceledError(message, config=config, request=request)
        logger.debug("cancellation requested: %s", self.reason.message)
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self.reason)

    def throw_if_requested(self, config: Mapping[str, Any] | None = None) -> None:
        if self.reason is None:
            return
        if self.reason.config is None and config is not None:
            self.reason.config = config
        raise self.reason

    def subscribe(self, listener: Listener) -> None:
        if self.reason is not None:
            listener(self.reason)
            return
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def wait(self) -> CanceledError:
        """Suspend until cancellation is requested and return its reason."""
        if self.reason is not None:
            return self.reason
        loop = asyncio.get_running_loop()
        future: asyncio.Future[CanceledError] = loop.create_future()

        def _resolve(reason: CanceledError) -> None:
            if not future.done():
                future.set_result(reason)

        self.subscribe(_resolve)
        try:
            return await future
        finally:
            self.unsubscribe(_resolve)


class CancelTokenSource(NamedTuple):
    token: CancelToken
    cancel: Callable[..., None]


class AbortSignal:
    """Read side of an ``AbortController``."""

    def __init__(self) -> None:
        self.aborted = False
        self.reason: Any = None
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        if self.aborted:
            listener(self.reason)
            return
        self._listeners.append(listener)

    def _abort(self, reason: Any) -> None:
        if self.aborted:
            return
        self.aborted = True
        self.reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(reason)


class AbortController:
    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: Any = None) -> None:
        self.signal._abort(reason)


def throw_if_cancellation_requested(config: Mapping[str, Any]) -> None:
    """Cancellation checkpoint: raise ``CanceledError`` if either source tripped."""
    token = config.get("cancel_token")
    if token is not None:
        token.throw_if_requested(config)

    signal = config.get("signal")
    if signal is not None and getattr(signal, "aborted", False):
        raise CanceledError(None, config=config)
