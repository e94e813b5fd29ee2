"""FastAPI auth router — factory that exposes one endpoint per strategy."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from portico.core.errors import PorticoError
from portico.core.flow import FlowEngine, Strategy
from portico.core.result import Failure, Redirected
from portico.core.schemas import LocalAuthData
from portico.events import HookRegistry
from portico.integrations.fastapi.context import StarletteRequestContext
from portico.strategies.local import LocalStrategy


def _error_detail(e: PorticoError) -> dict:
    """Build HTTPException detail dict from a PorticoError."""
    detail = {"error": e.code, "message": e.message}
    if e.extra:
        detail.update(e.extra)
    return detail


def create_auth_router(
    strategies: Sequence[FlowEngine | Strategy],
    *,
    hooks: HookRegistry | None = None,
    include_tokens: bool = False,
) -> APIRouter:
    """Create a FastAPI router serving every given strategy.

    Plain strategies are wrapped in a ``FlowEngine`` using ``hooks``;
    engines are used as-is.

    A completed OAuth flow responds with ``{"user_info": ...}`` only. The
    provider tokens stay on the server (they reach ``login`` hooks as
    ``event.token_data``) unless ``include_tokens`` is set, in which case the
    full ``AuthData`` is returned.

    Registers:
        GET  /{strategy_name}   OAuth strategies: no query → 302 to the
                                provider, callback query → profile
        POST /{strategy_name}   local strategies → ``LocalAuthData``
    """
    router = APIRouter(tags=["auth"])
    engine_map: dict[str, FlowEngine] = {}
    for item in strategies:
        engine = item if isinstance(item, FlowEngine) else FlowEngine(item, hooks=hooks)
        engine_map[engine.strategy.name] = engine

    def _get_engine(strategy_name: str, *, local: bool) -> FlowEngine:
        engine = engine_map.get(strategy_name)
        if engine is None:
            raise HTTPException(
                status_code=404,
                detail={
                    "error": "unknown_strategy",
                    "message": f"Strategy '{strategy_name}' is not configured",
                },
            )
        if isinstance(engine.strategy, LocalStrategy) != local:
            raise HTTPException(
                status_code=405,
                detail={
                    "error": "method_not_allowed",
                    "message": f"Strategy '{strategy_name}' does not accept this method",
                },
            )
        return engine

    @router.get("/{strategy_name}", response_model=None)
    async def oauth_flow(strategy_name: str, request: Request):
        """Authorize redirect or provider callback, depending on the query string."""
        engine = _get_engine(strategy_name, local=False)
        result = await engine.handle(StarletteRequestContext(request))

        if isinstance(result, Redirected):
            return RedirectResponse(url=result.url, status_code=302)
        if isinstance(result, Failure):
            raise HTTPException(
                status_code=result.error.status_code, detail=_error_detail(result.error),
            )
        if include_tokens:
            return result.value
        return result.value.model_dump(mode="json", exclude={"token_data"})

    @router.post("/{strategy_name}", response_model=LocalAuthData)
    async def local_login(strategy_name: str, request: Request):
        """Username/password login against a local strategy."""
        engine = _get_engine(strategy_name, local=True)
        result = await engine.handle(StarletteRequestContext(request))

        if isinstance(result, Failure):
            raise HTTPException(
                status_code=result.error.status_code, detail=_error_detail(result.error),
            )
        return result.value

    return router
