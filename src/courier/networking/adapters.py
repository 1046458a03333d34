"""Adapter registry: resolves an adapter preference to one adapter."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .errors import AdapterResolutionError
from .transport import RequestsAdapter
from .types import Adapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name to adapter mapping; lookups ignore case."""

    def __init__(self, adapters: Mapping[str, Adapter | None] | None = None) -> None:
        self._adapters: dict[str, Adapter | None] = {}
        for name, adapter in (adapters or {}).items():
            self.register(name, adapter)

    @property
    def adapters(self) -> Mapping[str, Adapter | None]:
        return dict(self._adapters)

    def register(self, name: str, adapter: Adapter | None) -> None:
        self._adapters[name.lower()] = adapter

    def get_adapter(self, preference: Any) -> Adapter:
        """Return the first element of ``preference`` that resolves.

        ``preference`` is a name, a direct adapter value, or a list of either.
        Nothing is invoked here; resolution is pure selection.

        Raises:
            AdapterResolutionError: No element resolved to an adapter.
        """
        if not isinstance(preference, (list, tuple)):
            preference = [preference]

        attempts: list[str] = []
        for name_or_adapter in preference:
            if isinstance(name_or_adapter, str):
                name = name_or_adapter.lower()
                if name not in self._adapters:
                    attempts.append(f"adapter {name_or_adapter!r} is not registered")
                    continue
                adapter = self._adapters[name]
                if not adapter:
                    attempts.append(
                        f"adapter {name_or_adapter!r} is not available in this environment"
                    )
                    continue
            else:
                adapter = name_or_adapter
                if not adapter:
                    attempts.append(f"adapter value {name_or_adapter!r} is not usable")
                    continue
            logger.debug("resolved adapter %r", name_or_adapter)
            return adapter

        if not attempts:
            attempts.append("no adapter was configured")
        raise AdapterResolutionError(attempts)


registry = AdapterRegistry({"requests": RequestsAdapter()})
get_adapter = registry.get_adapter
