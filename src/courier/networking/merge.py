"""Configuration merging.

``merge_config`` combines instance defaults with a per-call override. Each
option is merged with one of four strategies; unknown options fall back to
override-wins so adapter specific fields pass through untouched.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .headers import Headers

Strategy = Callable[[str, Mapping[str, Any], Mapping[str, Any]], Any]

_MISSING = object()


def _override_wins(key: str, base: Mapping[str, Any], override: Mapping[str, Any]) -> Any:
    if key in override:
        return _copy_value(override[key])
    return _copy_value(base.get(key, _MISSING))


def _override_only(key: str, base: Mapping[str, Any], override: Mapping[str, Any]) -> Any:
    return _copy_value(override.get(key, _MISSING))


def _replace_list(key: str, base: Mapping[str, Any], override: Mapping[str, Any]) -> Any:
    value = override[key] if key in override else base.get(key, _MISSING)
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def _deep(caseless: bool) -> Strategy:
    def strategy(key: str, base: Mapping[str, Any], override: Mapping[str, Any]) -> Any:
        base_value = base.get(key, _MISSING)
        if key not in override:
            return _copy_value(base_value)
        override_value = override[key]
        if _is_mapping(base_value) and _is_mapping(override_value):
            return merge_mappings(base_value, override_value, caseless=caseless)
        return _copy_value(override_value)

    return strategy


STRATEGIES: dict[str, Strategy] = {
    "url": _override_only,
    "method": _override_only,
    "data": _override_only,
    "headers": _deep(caseless=True),
    "params": _deep(caseless=False),
    "transform_request": _replace_list,
    "transform_response": _replace_list,
}


def merge_config(
    base: Mapping[str, Any] | None,
    override: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge ``override`` onto ``base`` without mutating either.

    Args:
        base: Instance defaults (or any configuration to inherit from).
        override: Per-call configuration; wins wherever it supplies a key.

    Returns:
        A new configuration dict. An absent or empty side yields a copy of
        the other one.

    Note:
        The copy shortcut means an empty override keeps ``url``, ``method``
        and ``data`` from ``base``, so merging a resolved configuration with
        ``{}`` is an identity. Any non-empty override goes through the
        strategy table, where those keys are override-only and are dropped
        from ``base``. Instance defaults should therefore not carry them:
        ``Courier.request({})`` would inherit them while every other call
        would not.
    """
    base = base or {}
    if not override:
        return {key: _copy_value(value) for key, value in base.items()}
    if not base:
        return {key: _copy_value(value) for key, value in override.items()}

    merged: dict[str, Any] = {}
    for key in {**base, **override}:
        value = STRATEGIES.get(key, _override_wins)(key, base, override)
        if value is not _MISSING:
            merged[key] = value
    return merged


def merge_mappings(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    caseless: bool = False,
) -> dict[str, Any]:
    """Recursively merge two mappings; override wins on conflicting keys."""
    merged = {key: _copy_value(value) for key, value in base.items()}
    for key, value in override.items():
        existing = _find_key(merged, key) if caseless else key
        if existing in merged and _is_mapping(merged[existing]) and _is_mapping(value):
            merged_value = merge_mappings(merged.pop(existing), value, caseless)
        else:
            merged.pop(existing, None)
            merged_value = _copy_value(value)
        merged[key] = merged_value
    return merged


def _find_key(mapping: Mapping[str, Any], key: str) -> str:
    lowered = key.lower() if isinstance(key, str) else key
    for candidate in mapping:
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return candidate
    return key


def _is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def _copy_value(value: Any) -> Any:
    if isinstance(value, Headers):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return list(value)
    return value
