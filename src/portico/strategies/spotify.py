"""Spotify OAuth 2.0 strategy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from portico.core.profiles import map_spotify_profile
from portico.core.schemas import TokenData, UserProfile
from portico.strategies.base import OAuth2Strategy, ProfileAuthStyle, TokenRequestStyle


@dataclass(frozen=True)
class SpotifyStrategy(OAuth2Strategy):
    """Spotify strategy.

    Options: ``client_id``, ``client_secret``, ``redirect_uri`` and ``state``
    are required; ``response_type`` (normally ``code``), ``scope`` and
    ``show_dialog`` are passed through to the consent screen.

    Spotify authenticates the token request with HTTP Basic client
    credentials and a form-encoded body.
    """

    REQUIRED_OPTIONS: ClassVar[tuple[str, ...]] = ("state",)
    TOKEN_REQUEST_STYLE: ClassVar[TokenRequestStyle] = TokenRequestStyle.BASIC_FORM
    PROFILE_AUTH_STYLE: ClassVar[ProfileAuthStyle] = ProfileAuthStyle.BEARER

    @property
    def name(self) -> str:
        return "spotify"

    @property
    def authorize_url(self) -> str:
        return "https://accounts.spotify.com/authorize"

    @property
    def token_url(self) -> str:
        return "https://accounts.spotify.com/api/token"

    @property
    def profile_url(self) -> str:
        return "https://api.spotify.com/v1/me"

    def normalize_profile(self, raw: dict[str, Any], token: TokenData) -> UserProfile:
        return map_spotify_profile(self.name, raw, token)
