"""Portico — registry of configured strategies and the host-facing entry point."""

from __future__ import annotations

from typing import TYPE_CHECKING

from portico.core.context import RequestContext
from portico.core.flow import FlowEngine, LocalFlowResult, OAuthFlowResult, Strategy
from portico.events import HookRegistry

if TYPE_CHECKING:
    from fastapi import APIRouter


class Portico:
    """Holds the configured strategies and event hooks for a host application.

    Args:
        strategies: Strategies to register up front (more can be added with
            ``use()``). Names must be unique.

    Example::

        portico = Portico()
        portico.use(GitHubStrategy(StrategyConfig(
            client_id="...", client_secret="...",
            redirect_uri="https://app.example.com/auth/github",
        )))

        result = await portico.authenticate("github", ctx)
    """

    def __init__(self, strategies: list[Strategy] | None = None) -> None:
        self._hooks = HookRegistry()
        self._engines: dict[str, FlowEngine] = {}
        for strategy in strategies or []:
            self.use(strategy)

    @property
    def hooks(self) -> HookRegistry:
        """Access the hook registry."""
        return self._hooks

    @property
    def strategies(self) -> dict[str, Strategy]:
        """Registered strategies by name."""
        return {name: engine.strategy for name, engine in self._engines.items()}

    def use(self, strategy: Strategy) -> Strategy:
        """Register a strategy under its ``name``."""
        if strategy.name in self._engines:
            raise ValueError(f"Strategy '{strategy.name}' is already registered")
        self._engines[strategy.name] = FlowEngine(strategy, hooks=self._hooks)
        return strategy

    def engine(self, name: str) -> FlowEngine:
        """Flow engine for a registered strategy.

        Raises:
            KeyError: If no strategy with that name is registered.
        """
        try:
            return self._engines[name]
        except KeyError:
            raise KeyError(f"Strategy '{name}' is not registered") from None

    async def authenticate(
        self, name: str, ctx: RequestContext,
    ) -> OAuthFlowResult | LocalFlowResult:
        """Run one flow step for ``ctx`` with the named strategy."""
        return await self.engine(name).handle(ctx)

    # ------ Event hooks ------

    def on(self, event_name: str):
        """Decorator to register an event hook.

        Usage:
            @portico.on("login")
            async def handle(event):
                print(event.provider_user_id)
        """
        def decorator(fn):
            self._hooks.register(event_name, fn)
            return fn
        return decorator

    def add_hook(self, event_name: str, callback) -> None:
        """Register an event hook callback programmatically."""
        self._hooks.register(event_name, callback)

    # ------ Framework integrations ------

    def fastapi_router(self, *, include_tokens: bool = False) -> APIRouter:
        """FastAPI router exposing every registered strategy.

        Provider tokens are left out of OAuth success responses unless
        ``include_tokens`` is set.

        Registers:
            GET  /{strategy_name}   OAuth strategies (authorize + callback)
            POST /{strategy_name}   local strategies
        """
        from portico.integrations.fastapi import create_auth_router

        return create_auth_router(list(self._engines.values()), include_tokens=include_tokens)
