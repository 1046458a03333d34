"""Body transform chains and the default request/response transforms."""

from __future__ import annotations

import json
from contextvars import ContextVar
from typing import Any, Mapping
from urllib.parse import urlencode

from .errors import TransportError
from .headers import Headers

FORM_URLENCODED = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
MULTIPART_FORM = "multipart/form-data"

TRANSITIONAL_DEFAULTS: dict[str, bool] = {
    "silent_json_parsing": True,
    "forced_json_parsing": True,
    "clarify_timeout_error": False,
}

_current_config: ContextVar[Mapping[str, Any]] = ContextVar("courier_transform_config")


def current_config() -> Mapping[str, Any]:
    """Configuration of the request whose transform chain is running."""
    return _current_config.get({})


def transitional_option(config: Mapping[str, Any], name: str) -> bool:
    transitional = config.get("transitional") or {}
    value = transitional.get(name)
    if value is None:
        return TRANSITIONAL_DEFAULTS[name]
    return bool(value)


def transform_data(
    config: Mapping[str, Any],
    transforms: Any,
    data: Any,
    headers: Headers,
    status: int | None = None,
) -> Any:
    """Run ``transforms`` in order, each receiving the previous output."""
    if not transforms:
        return data
    if callable(transforms):
        transforms = [transforms]
    token = _current_config.set(config)
    try:
        for transform in transforms:
            data = transform(data, headers, status)
    finally:
        _current_config.reset(token)
    return data


def transform_request(data: Any, headers: Headers, status: int | None = None) -> Any:
    if data is None or isinstance(data, (str, bytes, bytearray)):
        return data
    if hasattr(data, "read"):
        return data

    if isinstance(data, Mapping):
        if headers.has_content_type(MULTIPART_FORM):
            return data
        if headers.has_content_type("json"):
            return json.dumps(data)
        return urlencode(_form_pairs(data))

    if isinstance(data, (list, tuple)):
        headers.set_content_type(JSON_CONTENT_TYPE, rewrite=False)
        return json.dumps(list(data))

    return data


def transform_response(data: Any, headers: Headers, status: int | None = None) -> Any:
    config = current_config()
    response_type = config.get("response_type")
    if response_type in ("bytes", "stream"):
        return data
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode(_charset(headers), errors="replace")
    if response_type == "text" or not isinstance(data, str) or not data:
        return data

    json_requested = response_type == "json"
    forced = transitional_option(config, "forced_json_parsing")
    if not (json_requested or (forced and not response_type) or headers.has_content_type("json")):
        return data

    strict = json_requested and not transitional_option(config, "silent_json_parsing")
    try:
        return json.loads(data)
    except ValueError as exc:
        if strict:
            raise TransportError(
                f"Malformed JSON response: {exc}",
                code="ERR_BAD_RESPONSE",
                config=config,
            ) from exc
        return data


def _form_pairs(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _form_value(item)) for item in value)
        else:
            pairs.append((key, _form_value(value)))
    return pairs


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value)
    return str(value)


def _charset(headers: Headers) -> str:
    content_type = headers.content_type or ""
    for part in content_type.split(";")[1:]:
        name, _, value = part.strip().partition("=")
        if name.lower() == "charset" and value:
            return value.strip('"')
    return "utf-8"
