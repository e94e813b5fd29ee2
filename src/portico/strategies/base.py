"""OAuth 2.0 strategy base class — defines the contract every provider implements."""

from __future__ import annotations

import abc
import base64
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError

from portico.config import StrategyConfig
from portico.core.errors import ConfigError, ProfileFetchError, TokenExchangeError
from portico.core.schemas import TokenData, UserProfile
from portico.core.uri import encode

logger = logging.getLogger("portico.strategies")

DEFAULT_HTTP_TIMEOUT = 10.0


class TokenRequestStyle(str, Enum):
    """How the authorization code is sent to the token endpoint."""

    BASIC_FORM = "basic_form"
    """``Authorization: Basic`` client credentials plus a form-encoded grant body."""

    JSON_BODY = "json_body"
    """Client credentials, redirect URI and code posted together as JSON."""


class ProfileAuthStyle(str, Enum):
    """How the access token is presented to the profile endpoint."""

    BEARER = "bearer"
    TOKEN = "token"
    QUERY = "query"


@dataclass(frozen=True)
class OAuth2Strategy(abc.ABC):
    """Abstract base for all Authorization Code Grant strategies.

    Subclasses must implement:
        name                 — provider identifier (e.g. "spotify", "github")
        authorize_url        — provider's authorization endpoint
        token_url            — provider's token exchange endpoint
        profile_url          — provider's user profile endpoint
        normalize_profile()  — map the raw profile JSON into ``UserProfile``

    and may override ``TOKEN_REQUEST_STYLE`` / ``PROFILE_AUTH_STYLE`` to pick
    the wire shape of the token exchange and profile request.

    ``transport`` is handed to ``httpx.AsyncClient`` unchanged; timeouts and
    retry policy belong to it and to ``timeout``, never to the strategy.
    """

    config: StrategyConfig
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False, compare=False)
    timeout: float = field(default=DEFAULT_HTTP_TIMEOUT, compare=False)
    _authorize_query: str = field(default="", init=False, repr=False, compare=False)

    REQUIRED_OPTIONS: ClassVar[tuple[str, ...]] = ()
    TOKEN_REQUEST_STYLE: ClassVar[TokenRequestStyle] = TokenRequestStyle.BASIC_FORM
    PROFILE_AUTH_STYLE: ClassVar[ProfileAuthStyle] = ProfileAuthStyle.BEARER

    def __post_init__(self) -> None:
        missing = [key for key in self.REQUIRED_OPTIONS if not self.config.get(key)]
        if missing:
            raise ConfigError(
                f"{type(self).__name__} is missing required options: {', '.join(missing)}",
                code="config_missing_option",
                missing=missing,
            )
        # The config never changes after construction, so the authorize query
        # is built once and reused for every flow.
        object.__setattr__(
            self, "_authorize_query", encode(self.config.items(), skip={"client_secret"}),
        )

    @classmethod
    def from_options(cls, options: Mapping[str, str], **kwargs: Any):
        """Construct from a flat option mapping (``client_id``, ``scope``, ...)."""
        return cls(StrategyConfig.from_options(options), **kwargs)

    @property
    @abc.abstractmethod
    def name(self) -> str: ...

    @property
    @abc.abstractmethod
    def authorize_url(self) -> str: ...

    @property
    @abc.abstractmethod
    def token_url(self) -> str: ...

    @property
    @abc.abstractmethod
    def profile_url(self) -> str: ...

    @property
    def token_request_style(self) -> TokenRequestStyle:
        return self.TOKEN_REQUEST_STYLE

    @property
    def profile_auth_style(self) -> ProfileAuthStyle:
        return self.PROFILE_AUTH_STYLE

    @property
    def authorize_query(self) -> str:
        """Every config option except the client secret, as a query string."""
        return self._authorize_query

    def build_authorize_url(self) -> str:
        """Full URL of the provider consent screen for this strategy."""
        if not self._authorize_query:
            return self.authorize_url
        return f"{self.authorize_url}?{self._authorize_query}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=self.timeout)

    async def _send_token_request(self, client: httpx.AsyncClient, code: str) -> httpx.Response:
        """POST the code in the configured style.

        The form body is built with ``encode``, so ``code`` goes in verbatim;
        see ``portico.core.uri`` for codes containing reserved characters.
        """
        if self.token_request_style is TokenRequestStyle.JSON_BODY:
            return await client.post(
                self.token_url,
                json={
                    "client_id": self.config.client_id,
                    "client_secret": self.config.client_secret,
                    "redirect_uri": self.config.redirect_uri,
                    "code": code,
                },
                headers={"Accept": "application/json"},
            )

        credentials = f"{self.config.client_id}:{self.config.client_secret}"
        basic = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        body = encode({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.config.redirect_uri,
        })
        return await client.post(
            self.token_url,
            content=body,
            headers={
                "Authorization": f"Basic {basic}",
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
        )

    async def exchange_code(self, code: str) -> TokenData:
        """Exchange a decoded authorization code for provider tokens.

        Raises:
            TokenExchangeError: On transport failure, a non-2xx response, a
                body that is not a JSON object, a provider-reported OAuth
                error, or a payload without an access token.
        """
        logger.debug(
            "Exchanging authorization code with %s (%s)", self.name, self.token_request_style.value,
        )
        try:
            async with self._client() as client:
                response = await self._send_token_request(client, code)
        except httpx.HTTPError as e:
            raise TokenExchangeError(f"Token request to {self.name} failed: {e}") from e

        if not response.is_success:
            logger.warning("%s token endpoint returned HTTP %d", self.name, response.status_code)
            raise TokenExchangeError(
                f"Token endpoint of {self.name} returned HTTP {response.status_code}",
                provider_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TokenExchangeError(f"Token response from {self.name} is not JSON") from e
        if not isinstance(payload, dict):
            raise TokenExchangeError(f"Token response from {self.name} is not a JSON object")

        if payload.get("type") == "oAuthException":
            raise TokenExchangeError(
                f"Token request to {self.name} raised an OAuth exception",
                code="oauth_exception",
                status_code=400,
            )
        if payload.get("error"):
            logger.warning("%s token endpoint reported error %r", self.name, payload["error"])
            raise TokenExchangeError(
                payload.get("error_description") or str(payload["error"]),
                code="oauth_provider_error",
                status_code=400,
                provider_error=payload["error"],
            )
        if not payload.get("access_token"):
            raise TokenExchangeError("No access token in provider response")

        try:
            return TokenData.model_validate(payload)
        except ValidationError as e:
            raise TokenExchangeError(f"Malformed token response from {self.name}: {e}") from e

    async def _send_profile_request(
        self, client: httpx.AsyncClient, token: TokenData,
    ) -> httpx.Response:
        style = self.profile_auth_style
        if style is ProfileAuthStyle.QUERY:
            url = f"{self.profile_url}?{encode({'access_token': token.access_token})}"
            return await client.get(url, headers={"Accept": "application/json"})

        scheme = "token" if style is ProfileAuthStyle.TOKEN else "Bearer"
        return await client.get(
            self.profile_url,
            headers={
                "Authorization": f"{scheme} {token.access_token}",
                "Accept": "application/json",
            },
        )

    async def fetch_profile(self, token: TokenData) -> UserProfile:
        """Fetch the user's profile with ``token`` and normalize it.

        Raises:
            ProfileFetchError: On transport failure, a non-2xx response, a
                body that is not a JSON object, or a profile without a user id.
        """
        logger.debug("Fetching %s profile (%s)", self.name, self.profile_auth_style.value)
        try:
            async with self._client() as client:
                response = await self._send_profile_request(client, token)
        except httpx.HTTPError as e:
            raise ProfileFetchError(f"Profile request to {self.name} failed: {e}") from e

        if not response.is_success:
            logger.warning("%s profile endpoint returned HTTP %d", self.name, response.status_code)
            raise ProfileFetchError(
                f"Profile endpoint of {self.name} returned HTTP {response.status_code}",
                provider_status=response.status_code,
            )

        try:
            raw = response.json()
        except ValueError as e:
            raise ProfileFetchError(f"Profile response from {self.name} is not JSON") from e
        if not isinstance(raw, dict):
            raise ProfileFetchError(f"Profile response from {self.name} is not a JSON object")

        try:
            return self.normalize_profile(raw, token)
        except ValidationError as e:
            raise ProfileFetchError(f"Malformed profile from {self.name}: {e}") from e

    @abc.abstractmethod
    def normalize_profile(self, raw: dict[str, Any], token: TokenData) -> UserProfile:
        """Map the provider's raw profile JSON into ``UserProfile``."""
        ...
