"""Shared pytest fixtures for fastapi-form-request tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest
from starlette.requests import Request


def _receive_for(chunks: Sequence[bytes], *, disconnect: bool = False) -> Any:
    messages: list[dict[str, Any]] = []
    if disconnect:
        messages.append({"type": "http.disconnect"})
    else:
        for index, chunk in enumerate(chunks):
            messages.append(
                {
                    "type": "http.request",
                    "body": chunk,
                    "more_body": index < len(chunks) - 1,
                }
            )
        if not messages:
            messages.append({"type": "http.request", "body": b"", "more_body": False})

    async def receive() -> dict[str, Any]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects with a JSON body."""

    def _make(
        body: bytes | str | Sequence[bytes] = b"",
        *,
        method: str = "POST",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        disconnect: bool = False,
    ) -> Request:
        if isinstance(body, str):
            chunks: Sequence[bytes] = [body.encode()]
        elif isinstance(body, bytes):
            chunks = [body]
        else:
            chunks = body
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        return Request(scope, _receive_for(chunks, disconnect=disconnect))

    return _make
