"""Request orchestrator for the Courier pipeline.

``Courier`` merges per-call configuration with its defaults, runs the request
interceptors, hands the result to the dispatcher and runs the response
interceptors over whatever settles. When every selected request interceptor
is declared synchronous they run inline at call time; otherwise the whole
pipeline is one awaited chain.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Tuple

from .dispatch import dispatch_request
from .headers import flatten_headers
from .interceptors import InterceptorManager
from .merge import merge_config
from .transforms import MULTIPART_FORM
from .types import Response
from .urls import build_full_path, build_url
from .validation import validate_config

logger = logging.getLogger(__name__)

Handler = Optional[Callable[[Any], Any]]
HandlerPair = Tuple[Handler, Handler]


@dataclass
class Interceptors:
    request: InterceptorManager = field(default_factory=InterceptorManager)
    response: InterceptorManager = field(default_factory=InterceptorManager)


class Courier:
    """Public entry point: one set of defaults plus two interceptor registries.

    Instances are safe to share between concurrent requests; each call works
    on its own merged copy of the configuration.
    """

    def __init__(self, defaults: Mapping[str, Any] | None = None) -> None:
        """Create a new Courier.

        Args:
            defaults: Instance-level configuration merged under every call.
        """
        self.defaults: dict[str, Any] = dict(defaults or {})
        self.interceptors = Interceptors()

    def create(self, instance_config: Mapping[str, Any] | None = None) -> "Courier":
        """Return a new instance whose defaults extend this one's."""
        return Courier(merge_config(self.defaults, instance_config))

    def request(
        self,
        url_or_config: str | Mapping[str, Any] | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> Awaitable[Response]:
        """Issue a request.

        Args:
            url_or_config: The URL, or the whole per-call configuration.
            config: Per-call configuration when the first argument is a URL.

        Returns:
            An awaitable resolving to the ``Response``.

        Raises:
            ConfigurationError: A declared option failed validation. Raised at
                call time, before any interceptor or I/O runs.
        """
        if isinstance(url_or_config, str):
            config = {**(config or {}), "url": url_or_config}
        else:
            config = url_or_config or {}

        resolved = merge_config(self.defaults, config)
        validate_config(resolved)
        resolved["method"] = str(
            resolved.get("method") or self.defaults.get("method") or "get"
        ).lower()
        resolved["headers"] = flatten_headers(resolved.get("headers"), resolved["method"])

        request_chain: list[HandlerPair] = []
        synchronous = True
        for interceptor in self.interceptors.request:
            if not interceptor.applies_to(resolved):
                continue
            synchronous = synchronous and interceptor.synchronous
            request_chain.insert(0, (interceptor.fulfilled, interceptor.rejected))

        response_chain: list[HandlerPair] = [
            (interceptor.fulfilled, interceptor.rejected)
            for interceptor in self.interceptors.response
            if interceptor.applies_to(resolved)
        ]

        if not synchronous:
            logger.debug("running %d request interceptors asynchronously", len(request_chain))
            chain = [*request_chain, (dispatch_request, None), *response_chain]
            return _run_chain(_resolved(resolved), chain)

        pending = self._run_synchronous(resolved, request_chain)
        return _run_chain(pending, response_chain)

    def _run_synchronous(
        self, config: dict[str, Any], chain: Sequence[HandlerPair]
    ) -> Awaitable[Any]:
        for fulfilled, rejected in chain:
            if fulfilled is None:
                continue
            try:
                config = fulfilled(config)
            except Exception as error:
                if rejected is None:
                    return _rejected(error)
                try:
                    outcome = rejected(error)
                except Exception as handled:
                    return _rejected(handled)
                if inspect.isawaitable(outcome):
                    return _rejected_after(outcome, error)
                return _rejected(error)

        try:
            return dispatch_request(config)
        except Exception as error:
            return _rejected(error)

    def get_uri(self, config: Mapping[str, Any] | None = None) -> str:
        """Render the final URL for ``config`` without dispatching."""
        config = merge_config(self.defaults, config)
        full_path = build_full_path(config.get("base_url"), config.get("url"))
        return build_url(full_path, config.get("params"), config.get("params_serializer"))

    def _without_data(self, method: str, url: str, config: Mapping[str, Any] | None) -> Awaitable[Response]:
        config = config or {}
        return self.request(
            merge_config(config, {"method": method, "url": url, "data": config.get("data")})
        )

    def _with_data(
        self,
        method: str,
        url: str,
        data: Any,
        config: Mapping[str, Any] | None,
        form: bool = False,
    ) -> Awaitable[Response]:
        override: dict[str, Any] = {"method": method, "url": url, "data": data}
        if form:
            override["headers"] = {"Content-Type": MULTIPART_FORM}
        return self.request(merge_config(config or {}, override))

    def get(self, url: str, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._without_data("get", url, config)

    def delete(self, url: str, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._without_data("delete", url, config)

    def head(self, url: str, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._without_data("head", url, config)

    def options(self, url: str, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._without_data("options", url, config)

    def post(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("post", url, data, config)

    def put(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("put", url, data, config)

    def patch(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("patch", url, data, config)

    def post_form(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("post", url, data, config, form=True)

    def put_form(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("put", url, data, config, form=True)

    def patch_form(self, url: str, data: Any = None, config: Mapping[str, Any] | None = None) -> Awaitable[Response]:
        return self._with_data("patch", url, data, config, form=True)


async def _resolved(value: Any) -> Any:
    return value


async def _rejected(error: Exception) -> Any:
    raise error


async def _rejected_after(handling: Awaitable[Any], error: Exception) -> Any:
    """Finish an async rejected handler, then fail with its error or ``error``."""
    await handling
    raise error


async def _run_chain(pending: Awaitable[Any], chain: Sequence[HandlerPair]) -> Any:
    """Await ``pending`` then thread the outcome through ``chain``.

    Each pair behaves like a promise ``then(fulfilled, rejected)`` link: the
    fulfilled handler sees the previous value, the rejected handler sees the
    previous error and may recover by returning a value.
    """
    value: Any = None
    error: Exception | None = None
    try:
        value = await pending
    except Exception as exc:
        error = exc

    for fulfilled, rejected in chain:
        handler = fulfilled if error is None else rejected
        if handler is None:
            continue
        argument = value if error is None else error
        try:
            value = handler(argument)
            if inspect.isawaitable(value):
                value = await value
            error = None
        except Exception as exc:
            error = exc

    if error is not None:
        raise error
    return value
