"""Generic OAuth 2.0 strategy — bring-your-own-provider support."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from portico.config import StrategyConfig
from portico.core.profiles import MapProfileFn, map_default_profile
from portico.core.schemas import TokenData, UserProfile
from portico.strategies.base import (
    DEFAULT_HTTP_TIMEOUT,
    OAuth2Strategy,
    ProfileAuthStyle,
    TokenRequestStyle,
)


@dataclass(frozen=True)
class GenericOAuth2Strategy(OAuth2Strategy):
    """Generic OAuth 2.0 strategy — supply your own endpoints and optional mapper.

    Example::

        strategy = GenericOAuth2Strategy(
            "gitlab",
            StrategyConfig(
                client_id="...",
                client_secret="...",
                redirect_uri="https://app.example.com/auth/gitlab",
                extra=(("response_type", "code"), ("scope", "read_user")),
            ),
            authorize_url="https://gitlab.com/oauth/authorize",
            token_url="https://gitlab.com/oauth/token",
            profile_url="https://gitlab.com/api/v4/user",
        )
    """

    # Declared so the frozen dataclass knows about them; assigned in __init__
    # through object.__setattr__.
    _name: str = field(default="", repr=False, compare=False)
    _authorize_url: str = field(default="", repr=False, compare=False)
    _token_url: str = field(default="", repr=False, compare=False)
    _profile_url: str = field(default="", repr=False, compare=False)
    _token_request_style: TokenRequestStyle = field(
        default=TokenRequestStyle.BASIC_FORM, repr=False, compare=False,
    )
    _profile_auth_style: ProfileAuthStyle = field(
        default=ProfileAuthStyle.BEARER, repr=False, compare=False,
    )
    map_profile_fn: MapProfileFn | None = field(default=None, repr=False, compare=False)

    def __init__(
        self,
        name: str,
        config: StrategyConfig,
        *,
        authorize_url: str,
        token_url: str,
        profile_url: str,
        token_request_style: TokenRequestStyle = TokenRequestStyle.BASIC_FORM,
        profile_auth_style: ProfileAuthStyle = ProfileAuthStyle.BEARER,
        map_profile: MapProfileFn | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        object.__setattr__(self, "config", config)
        object.__setattr__(self, "transport", transport)
        object.__setattr__(self, "timeout", timeout)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_authorize_url", authorize_url)
        object.__setattr__(self, "_token_url", token_url)
        object.__setattr__(self, "_profile_url", profile_url)
        object.__setattr__(self, "_token_request_style", TokenRequestStyle(token_request_style))
        object.__setattr__(self, "_profile_auth_style", ProfileAuthStyle(profile_auth_style))
        object.__setattr__(self, "map_profile_fn", map_profile)
        self.__post_init__()

    @classmethod
    def from_options(cls, options, **kwargs: Any):
        """Construct from a flat option mapping; ``name`` and endpoints go in ``kwargs``."""
        name = kwargs.pop("name")
        return cls(name, StrategyConfig.from_options(options), **kwargs)

    @property
    def name(self) -> str:
        return self._name

    @property
    def authorize_url(self) -> str:
        return self._authorize_url

    @property
    def token_url(self) -> str:
        return self._token_url

    @property
    def profile_url(self) -> str:
        return self._profile_url

    @property
    def token_request_style(self) -> TokenRequestStyle:
        return self._token_request_style

    @property
    def profile_auth_style(self) -> ProfileAuthStyle:
        return self._profile_auth_style

    def normalize_profile(self, raw: dict[str, Any], token: TokenData) -> UserProfile:
        if self.map_profile_fn is not None:
            return self.map_profile_fn(self._name, raw, token)
        return map_default_profile(self._name, raw, token)
