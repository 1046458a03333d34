"""Case-insensitive header container used across the pipeline."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from requests.structures import CaseInsensitiveDict

METHOD_BUCKETS = (
    "common",
    "delete",
    "get",
    "head",
    "options",
    "post",
    "put",
    "patch",
)


class Headers(CaseInsensitiveDict):
    """Canonical header container.

    Lookups ignore case while the most recently written spelling of a name is
    kept for iteration, so transports see the header as the caller wrote it.
    """

    @classmethod
    def from_raw(cls, raw: Any) -> "Headers":
        """Normalize a string block, mapping or container into ``Headers``."""
        headers = cls()
        if raw is None:
            return headers
        if isinstance(raw, (str, bytes)):
            headers.update(_parse_block(raw))
            return headers
        items: Iterable[tuple[Any, Any]]
        if isinstance(raw, Mapping):
            items = raw.items()
        else:
            items = raw
        for name, value in items:
            if value is None:
                continue
            headers[str(name).strip()] = _normalize_value(value)
        return headers

    @classmethod
    def concat(cls, *sources: Any) -> "Headers":
        """Merge several raw header sources; later sources win."""
        headers = cls()
        for source in sources:
            headers.update(cls.from_raw(source))
        return headers

    @property
    def content_type(self) -> str | None:
        return self.get("Content-Type")

    def set_content_type(self, value: str, rewrite: bool = True) -> None:
        if not rewrite and self.get("Content-Type"):
            return
        self["Content-Type"] = value

    def has_content_type(self, fragment: str) -> bool:
        content_type = self.content_type or ""
        return fragment.lower() in content_type.lower()

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())

    def copy(self) -> "Headers":
        return Headers.from_raw(self)


def _normalize_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (list, tuple)):
        return ", ".join(_normalize_value(item) for item in value)
    return str(value).strip()


def _parse_block(raw: str | bytes) -> dict[str, str]:
    if isinstance(raw, bytes):
        raw = raw.decode("latin-1")
    parsed: dict[str, str] = {}
    for line in raw.splitlines():
        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            continue
        value = value.strip()
        existing = next((k for k in parsed if k.lower() == name.lower()), None)
        if existing is None:
            parsed[name] = value
        else:
            parsed[existing] = f"{parsed[existing]}, {value}"
    return parsed


def flatten_headers(headers: Any, method: str) -> Headers:
    """Collapse the ``common`` and per-method buckets into one flat set.

    Bucket keys are removed so they never reach the transport; flat header
    entries take precedence over bucket entries.
    """
    if not isinstance(headers, Mapping):
        return Headers.from_raw(headers)
    flat = {
        key: value
        for key, value in headers.items()
        if not (key.lower() in METHOD_BUCKETS and isinstance(value, Mapping))
    }
    context = Headers.concat(
        _bucket(headers, "common"),
        _bucket(headers, method),
    )
    return Headers.concat(context, flat)


def _bucket(headers: Mapping[str, Any], name: str) -> Mapping[str, Any] | None:
    for key, value in headers.items():
        if key.lower() == name and isinstance(value, Mapping):
            return value
    return None
