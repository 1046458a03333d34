"""URL joining and query-string rendering."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping
from urllib.parse import quote, urlencode

_ABSOLUTE_URL = re.compile(r"^([a-z][a-z\d+\-.]*:)?//", re.IGNORECASE)


def is_absolute_url(url: str) -> bool:
    return bool(_ABSOLUTE_URL.match(url))


def build_full_path(base_url: str | None, url: str | None) -> str:
    """Join ``url`` onto ``base_url`` unless ``url`` is already absolute."""
    url = url or ""
    if base_url and not is_absolute_url(url):
        if not url:
            return base_url
        return base_url.rstrip("/") + "/" + url.lstrip("/")
    return url


def build_url(
    url: str,
    params: Any = None,
    params_serializer: Mapping[str, Any] | Callable[..., str] | None = None,
) -> str:
    """Append serialized ``params`` to ``url``, dropping any fragment."""
    if not params:
        return url

    options: Mapping[str, Any]
    if callable(params_serializer):
        options = {"serialize": params_serializer}
    else:
        options = params_serializer or {}

    serialize = options.get("serialize")
    if serialize is not None:
        query = serialize(params, options)
    elif isinstance(params, str):
        query = params
    else:
        query = _encode_params(params, options.get("encode"))

    if not query:
        return url
    url = url.split("#", 1)[0]
    return url + ("&" if "?" in url else "?") + query


def _encode_params(params: Any, encode: Callable[[str], str] | None) -> str:
    items = params.items() if isinstance(params, Mapping) else params
    pairs = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _scalar(item)) for item in value if item is not None)
        else:
            pairs.append((key, _scalar(value)))

    if encode is None:
        return urlencode(pairs, quote_via=quote)
    return urlencode(
        pairs,
        quote_via=lambda text, safe="", encoding=None, errors=None: encode(text),
    )


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
