"""Adapter from a Starlette/FastAPI request to Portico's ``RequestContext``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.requests import Request


class StarletteRequestContext:
    """Wraps a Starlette ``Request``.

    The redirect is captured in ``redirect_url`` rather than sent, so the
    route can build the actual ``RedirectResponse``.
    """

    def __init__(self, request: Request) -> None:
        self._request = request
        self.redirect_url: str | None = None

    @property
    def search(self) -> str:
        query = self._request.url.query
        return f"?{query}" if query else ""

    async def read_body(self) -> Mapping[str, Any]:
        content_type = self._request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            data = await self._request.json()
            return data if isinstance(data, Mapping) else {}
        if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            form = await self._request.form()
            return {key: value for key, value in form.items()}
        return {}

    async def redirect(self, url: str) -> None:
        self.redirect_url = url
