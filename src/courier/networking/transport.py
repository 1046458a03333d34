"""Default transport adapter built on ``requests``.

The adapter performs exactly one exchange per call on a shared
``requests.Session`` in a worker thread. It hands back raw bodies and headers;
body transforms are the dispatcher's job.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping

import requests

from .cancel import throw_if_cancellation_requested
from .config import TransportConfig
from .errors import CourierError, RequestTimeoutError, TransportError
from .headers import Headers
from .transforms import MULTIPART_FORM, transitional_option
from .types import Response
from .urls import build_full_path, build_url

logger = logging.getLogger(__name__)


def default_validate_status(status: int) -> bool:
    return 200 <= status < 300


class RequestsAdapter:
    """Adapter that sends requests through a ``requests.Session``."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        """Create a new RequestsAdapter.

        Args:
            config: Session-level settings (user agent, default headers, TLS
                verification and fallback timeouts).
        """
        self._config = config or TransportConfig()
        self._session = requests.Session()
        if self._config.user_agent:
            self._session.headers["User-Agent"] = self._config.user_agent
        self._session.headers.update(self._config.default_headers)

    async def __call__(self, config: Mapping[str, Any]) -> Response:
        throw_if_cancellation_requested(config)
        response = await asyncio.to_thread(self._send, config)
        throw_if_cancellation_requested(config)
        settle(response)
        return response

    def close(self) -> None:
        self._session.close()

    def _get_timeout(
        self, timeout: float | None
    ) -> float | tuple[float, float] | None:
        """Resolve timeout preference; 0 or absent means the session default."""
        if timeout:
            if timeout < 0:
                raise ValueError("timeout must be >= 0")
            return timeout
        return self._config.session_timeout

    def _send(self, config: Mapping[str, Any]) -> Response:
        method = str(config.get("method") or "get").upper()
        url = build_url(
            build_full_path(config.get("base_url"), config.get("url")),
            config.get("params"),
            config.get("params_serializer"),
        )
        headers = Headers.from_raw(config.get("headers"))
        timeout = self._get_timeout(config.get("timeout"))
        body, files = _body(config.get("data"), headers)
        max_redirects = config.get("max_redirects")

        logger.debug("sending %s %s timeout=%s", method, url, timeout)
        try:
            raw = self._session.request(
                method,
                url,
                headers=headers.to_dict(),
                data=body,
                files=files,
                timeout=timeout,
                auth=_auth(config.get("auth")),
                allow_redirects=max_redirects != 0,
                verify=config.get("verify", self._config.verify_tls),
            )
        except requests.exceptions.RequestException as exc:
            raise _map_exception(exc, config) from exc

        if config.get("response_type") in ("bytes", "stream"):
            data: Any = raw.content
        else:
            data = raw.text
        return Response(
            data=data,
            status=raw.status_code,
            status_text=raw.reason or "",
            headers=dict(raw.headers),
            config=config,
            request=raw.request,
        )


def settle(response: Response) -> None:
    """Reject responses whose status fails ``validate_status``."""
    config = response.config
    validate_status: Callable[[int], bool] | None = config.get("validate_status")
    if validate_status is None or not response.status or validate_status(response.status):
        return
    code = "ERR_BAD_REQUEST" if 400 <= response.status < 500 else "ERR_BAD_RESPONSE"
    raise TransportError(
        f"Request failed with status code {response.status}",
        code=code,
        config=config,
        request=response.request,
        response=response,
    )


def _body(data: Any, headers: Headers) -> tuple[Any, Any]:
    if isinstance(data, Mapping) and headers.has_content_type(MULTIPART_FORM):
        # requests writes its own boundary into the content type
        del headers["Content-Type"]
        fields = {key: value for key, value in data.items() if not hasattr(value, "read")}
        files = {key: value for key, value in data.items() if hasattr(value, "read")}
        return fields, files or None
    return data, None


def _auth(auth: Mapping[str, str] | None) -> tuple[str, str] | None:
    if not auth:
        return None
    return (auth.get("username", ""), auth.get("password", ""))


def _map_exception(
    error: requests.exceptions.RequestException,
    config: Mapping[str, Any],
) -> CourierError:
    """Map requests exceptions to Courier errors."""
    request = error.request
    if isinstance(error, requests.exceptions.Timeout):
        code = (
            "ETIMEDOUT"
            if transitional_option(config, "clarify_timeout_error")
            else "ECONNABORTED"
        )
        return RequestTimeoutError(str(error), code=code, config=config, request=request)

    if isinstance(error, requests.exceptions.TooManyRedirects):
        return TransportError(
            str(error),
            code="ERR_FR_TOO_MANY_REDIRECTS",
            config=config,
            request=request,
        )

    if isinstance(error, requests.exceptions.ConnectionError):
        return TransportError(str(error), code="ERR_NETWORK", config=config, request=request)

    # Generic fallback for other request exceptions
    return TransportError(str(error), config=config, request=request)
