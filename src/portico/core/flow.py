"""Authorization Code Grant flow engine.

Framework-agnostic. One ``FlowEngine`` wraps one configured strategy and
drives a flow execution per inbound request:

    START             no query string → redirect to the provider
    AWAITING_CALLBACK implicit; nothing is stored between requests
    CODE_RECEIVED     callback query carries a ``code`` parameter
    TOKEN_EXCHANGED   provider returned an access token
    PROFILE_FETCHED   profile normalized, ``AuthData`` returned
    FAILED            any phase failed, ``Failure`` returned

The phase is re-derived from each request, so the engine holds no per-flow
state and a single instance can serve concurrent flows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from portico.core.context import RequestContext
from portico.core.errors import (
    CallbackError,
    PorticoError,
    ProfileFetchError,
    TokenExchangeError,
)
from portico.core.result import Failure, Redirected, Success
from portico.core.schemas import AuthData, LocalAuthData
from portico.core.uri import decode
from portico.events import AuthorizeRedirect, HookRegistry, Login, LoginFailed
from portico.strategies.base import OAuth2Strategy
from portico.strategies.local import LocalStrategy

logger = logging.getLogger("portico.flow")

Strategy = OAuth2Strategy | LocalStrategy
OAuthFlowResult = Redirected | Success[AuthData] | Failure
LocalFlowResult = Success[LocalAuthData] | Failure


class FlowState(str, Enum):
    START = "start"
    AWAITING_CALLBACK = "awaiting_callback"
    CODE_RECEIVED = "code_received"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CallbackQuery:
    """The provider's redirect query string, split once into raw parameters.

    Values in ``params`` are kept exactly as received; only the code is run
    through the codec, via ``code``.
    """

    raw: str
    params: tuple[tuple[str, str], ...]

    @classmethod
    def parse(cls, search: str) -> CallbackQuery:
        query = search[1:] if search.startswith("?") else search
        params: list[tuple[str, str]] = []
        for segment in query.split("&"):
            if not segment:
                continue
            key, _, value = segment.partition("=")
            params.append((key, value))
        return cls(raw=search, params=tuple(params))

    def get(self, key: str) -> str | None:
        """First raw value for ``key``, or None."""
        for k, v in self.params:
            if k == key:
                return v
        return None

    @property
    def has_code(self) -> bool:
        return any(k == "code" for k, _ in self.params)

    @property
    def has_error(self) -> bool:
        # Substring match over the whole query, not just an ``error`` key.
        return "error" in self.raw

    @property
    def code(self) -> str | None:
        raw_code = self.get("code")
        if raw_code is None:
            return None
        return decode(raw_code)

    @property
    def state(self) -> str | None:
        return self.get("state")

    @property
    def error(self) -> str | None:
        return self.get("error")

    @property
    def error_description(self) -> str | None:
        description = self.get("error_description")
        return decode(description) if description is not None else None


def detect_phase(search: str) -> FlowState | None:
    """Work out which phase an inbound request belongs to.

    Returns ``START`` for a request without a query string and
    ``CODE_RECEIVED`` for a provider callback (a ``code`` parameter in any
    position, or an error report). Returns None for anything else.
    """
    if not search or search == "?":
        return FlowState.START
    query = CallbackQuery.parse(search)
    if query.has_code or query.has_error:
        return FlowState.CODE_RECEIVED
    return None


class FlowEngine:
    """Runs flow executions for one strategy.

    Args:
        strategy: An ``OAuth2Strategy`` or a ``LocalStrategy``.
        hooks: Optional ``HookRegistry`` that receives ``authorize_redirect``,
            ``login`` and ``login_failed`` events.
    """

    def __init__(self, strategy: Strategy, *, hooks: HookRegistry | None = None) -> None:
        self._strategy = strategy
        self._hooks = hooks

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    async def handle(self, ctx: RequestContext) -> OAuthFlowResult | LocalFlowResult:
        """Advance the flow for one inbound request.

        Flow failures are returned as ``Failure`` values, never raised.
        """
        if isinstance(self._strategy, LocalStrategy):
            return await self.authenticate_local(ctx)

        search = ctx.search
        phase = detect_phase(search)
        if phase is FlowState.START:
            return await self.authorize(ctx)
        if phase is None:
            return await self._fail(CallbackError(
                "Request is neither an authorize request nor a provider callback",
                code="callback_unrecognized",
            ))
        return await self.complete(CallbackQuery.parse(search))

    async def authorize(self, ctx: RequestContext) -> Redirected | Failure:
        """START → AWAITING_CALLBACK: send the browser to the consent screen."""
        strategy = self._oauth_strategy()
        url = strategy.build_authorize_url()
        try:
            await ctx.redirect(url)
        except Exception as e:
            logger.exception("Host redirect to %s authorize endpoint failed", strategy.name)
            return await self._fail(CallbackError(
                f"Could not redirect to {strategy.name}: {e}",
                code="redirect_failed",
                status_code=500,
            ))
        logger.debug("Redirecting to %s authorize endpoint", strategy.name)
        await self._emit("authorize_redirect", AuthorizeRedirect(provider=strategy.name, url=url))
        return Redirected(url=url)

    async def complete(self, query: CallbackQuery) -> OAuthFlowResult:
        """CODE_RECEIVED → TOKEN_EXCHANGED → PROFILE_FETCHED.

        The state parameter is passed through untouched; it is not checked
        against the value originally issued.
        """
        strategy = self._oauth_strategy()

        if query.has_error:
            logger.warning(
                "%s callback reported an error: %s", strategy.name, query.error or "unknown",
            )
            return await self._fail(CallbackError(
                query.error_description or "Received an error from the authorization request",
                provider_error=query.error,
            ))

        code = query.code
        if not code:
            return await self._fail(CallbackError(
                "Missing authorization code in callback",
                code="oauth_missing_params",
            ))
        logger.debug("%s flow state: %s", strategy.name, FlowState.CODE_RECEIVED.value)

        try:
            token_data = await strategy.exchange_code(code)
        except PorticoError as e:
            return await self._fail(e)
        except Exception as e:
            logger.exception("Unexpected error exchanging code with %s", strategy.name)
            return await self._fail(TokenExchangeError(
                f"Failed to exchange OAuth code: {e}", status_code=500,
            ))
        logger.debug("%s flow state: %s", strategy.name, FlowState.TOKEN_EXCHANGED.value)

        try:
            profile = await strategy.fetch_profile(token_data)
        except PorticoError as e:
            return await self._fail(e)
        except Exception as e:
            logger.exception("Unexpected error fetching profile from %s", strategy.name)
            return await self._fail(ProfileFetchError(
                f"Failed to fetch user info from {strategy.name}: {e}", status_code=500,
            ))
        logger.debug("%s flow state: %s", strategy.name, FlowState.PROFILE_FETCHED.value)

        await self._emit("login", Login(
            provider=profile.provider,
            provider_user_id=profile.provider_user_id,
            display_name=profile.display_name,
            token_data=token_data,
        ))
        return Success(AuthData(token_data=token_data, user_info=profile))

    async def authenticate_local(self, ctx: RequestContext) -> LocalFlowResult:
        """Local strategy: verify the body credentials, no redirect or token phase."""
        strategy = self._strategy
        if not isinstance(strategy, LocalStrategy):
            raise TypeError(f"{type(strategy).__name__} is not a local strategy")

        try:
            data = await strategy.authenticate(ctx)
        except PorticoError as e:
            return await self._fail(e)

        await self._emit("login", Login(
            provider=data.user_info.provider,
            provider_user_id=data.user_info.provider_user_id,
            display_name=data.user_info.display_name,
        ))
        return Success(data)

    def _oauth_strategy(self) -> OAuth2Strategy:
        if not isinstance(self._strategy, OAuth2Strategy):
            raise TypeError(f"{type(self._strategy).__name__} does not support the OAuth flow")
        return self._strategy

    async def _fail(self, error: PorticoError) -> Failure:
        logger.info(
            "%s flow state: %s (%s)", self._strategy.name, FlowState.FAILED.value, error.code,
        )
        await self._emit("login_failed", LoginFailed(
            provider=self._strategy.name, reason=error.code, message=error.message,
        ))
        return Failure(error)

    async def _emit(self, event_name: str, event) -> None:
        if self._hooks is not None:
            await self._hooks.emit(event_name, event)
