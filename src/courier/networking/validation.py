"""Schema validation for the declared ``transitional`` and serializer options.

A validator takes ``(value, option, options)`` and returns ``None`` on success
or a description of the violation.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Validator = Callable[[Any, str, Mapping[str, Any]], "str | None"]


def _of_type(expected: type | tuple[type, ...], label: str) -> Validator:
    def validator(value: Any, option: str, options: Mapping[str, Any]) -> str | None:
        if isinstance(value, expected):
            return None
        return f"must be {label}"

    return validator


def _callable(value: Any, option: str, options: Mapping[str, Any]) -> str | None:
    if callable(value):
        return None
    return "must be a function"


boolean = _of_type(bool, "a boolean")
function = _callable

TRANSITIONAL_SCHEMA: dict[str, Validator] = {
    "silent_json_parsing": boolean,
    "forced_json_parsing": boolean,
    "clarify_timeout_error": boolean,
}

PARAMS_SERIALIZER_SCHEMA: dict[str, Validator] = {
    "encode": function,
    "serialize": function,
}


def assert_options(
    options: Any,
    schema: Mapping[str, Validator],
    allow_unknown: bool,
    name: str,
) -> None:
    """Check every option against ``schema``.

    Raises:
        ConfigurationError: An option has the wrong type, or is not declared
            in ``schema`` while ``allow_unknown`` is false.
    """
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"{name} must be a mapping")
    for option, value in options.items():
        validator = schema.get(option)
        if validator is None:
            if not allow_unknown:
                raise ConfigurationError(f"Unknown option {name}.{option}")
            logger.warning("ignoring unknown option %s.%s", name, option)
            continue
        if value is None:
            continue
        violation = validator(value, option, options)
        if violation is not None:
            raise ConfigurationError(f"option {name}.{option} {violation}")


def validate_config(config: dict[str, Any]) -> None:
    """Validate declared options in place, before any I/O happens."""
    transitional = config.get("transitional")
    if transitional is not None:
        assert_options(transitional, TRANSITIONAL_SCHEMA, False, "transitional")

    serializer = config.get("params_serializer")
    if serializer is None:
        return
    if callable(serializer):
        config["params_serializer"] = {"serialize": serializer}
        return
    assert_options(serializer, PARAMS_SERIALIZER_SCHEMA, True, "params_serializer")
