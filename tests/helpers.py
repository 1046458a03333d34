# pyright: reportUnknownParameterType=false, reportMissingParameterType=false
from __future__ import annotations

from typing import Any, Callable

from courier.networking.types import Response


class RecordingAdapter:
    """Adapter double that records every config it is invoked with."""

    def __init__(
        self,
        *,
        data: Any = '{"ok": true}',
        status: int = 200,
        headers: Any = None,
        error: Exception | None = None,
        before_settle: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        self.calls: list[dict[str, Any]] = []
        self.data = data
        self.status = status
        self.headers = (
            headers if headers is not None else {"Content-Type": "application/json"}
        )
        self.error = error
        self.before_settle = before_settle

    async def __call__(self, config: dict[str, Any]) -> Response:
        self.calls.append(config)
        if self.before_settle is not None:
            self.before_settle(config)
        if self.error is not None:
            raise self.error
        return Response(
            data=self.data,
            status=self.status,
            status_text="OK",
            headers=dict(self.headers),
            config=config,
            request="raw-request",
        )

    @property
    def last_config(self) -> dict[str, Any]:
        return self.calls[-1]
