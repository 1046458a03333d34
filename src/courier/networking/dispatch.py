"""Dispatch one resolved configuration through an adapter.

Sequence: normalize headers, transform the request body, default the content
type for body carrying methods, resolve the adapter, invoke it, then transform
the response (or the response carried by a transport error). Cancellation is
checked on entry and again as soon as the adapter settles.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable

from . import adapters
from .cancel import throw_if_cancellation_requested
from .defaults import DEFAULT_ADAPTER
from .errors import is_cancel
from .headers import Headers
from .transforms import FORM_URLENCODED, transform_data
from .types import Response

logger = logging.getLogger(__name__)

BODY_METHODS = ("post", "put", "patch")


def dispatch_request(config: dict[str, Any]) -> Awaitable[Response]:
    """Start dispatching ``config``.

    Only a cancellation that was already requested raises here; every later
    failure is raised when the returned awaitable is awaited.
    """
    throw_if_cancellation_requested(config)
    return _dispatch(config)


async def _dispatch(config: dict[str, Any]) -> Response:
    # the caller may await long after dispatch_request returned
    throw_if_cancellation_requested(config)
    headers = Headers.from_raw(config.get("headers"))
    config["headers"] = headers
    config["data"] = transform_data(
        config, config.get("transform_request"), config.get("data"), headers
    )

    if config.get("method") in BODY_METHODS:
        headers.set_content_type(FORM_URLENCODED, rewrite=False)

    adapter = adapters.get_adapter(config.get("adapter") or DEFAULT_ADAPTER)
    logger.debug(
        "dispatching %s %s", str(config.get("method", "get")).upper(), config.get("url")
    )

    try:
        response = await adapter(config)
    except Exception as reason:
        if not is_cancel(reason):
            # a cancellation that raced the transport failure wins
            throw_if_cancellation_requested(config)
            nested = getattr(reason, "response", None)
            if isinstance(nested, Response):
                _transform_response(config, nested)
        logger.debug("adapter rejected %s: %r", config.get("url"), reason)
        raise

    throw_if_cancellation_requested(config)
    return _transform_response(config, response)


def _transform_response(config: dict[str, Any], response: Response) -> Response:
    headers = Headers.from_raw(response.headers)
    response.data = transform_data(
        config,
        config.get("transform_response"),
        response.data,
        headers,
        response.status,
    )
    response.headers = headers
    return response
