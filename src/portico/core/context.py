"""Request context — the slice of the host's request/response the flow engine uses.

Framework-agnostic. Integration adapters (FastAPI, etc.) wrap the framework's
request object in something that satisfies ``RequestContext``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestContext(Protocol):
    """Inbound request plus the redirect primitive.

    ``search`` is the raw query string including the leading ``?``, or ``""``
    when the request has none.
    """

    @property
    def search(self) -> str: ...

    async def read_body(self) -> Mapping[str, Any]: ...

    async def redirect(self, url: str) -> None: ...


class SimpleRequestContext:
    """In-memory ``RequestContext`` for tests and non-framework hosts.

    Records every redirect in ``redirects`` instead of sending a response.
    """

    def __init__(self, search: str = "", body: Mapping[str, Any] | None = None) -> None:
        if search and not search.startswith("?"):
            search = "?" + search
        self._search = search
        self._body = dict(body) if body is not None else {}
        self.redirects: list[str] = []

    @property
    def search(self) -> str:
        return self._search

    async def read_body(self) -> Mapping[str, Any]:
        return self._body

    async def redirect(self, url: str) -> None:
        self.redirects.append(url)
