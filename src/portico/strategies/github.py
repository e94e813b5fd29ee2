"""GitHub OAuth 2.0 strategy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from portico.core.profiles import map_github_profile
from portico.core.schemas import TokenData, UserProfile
from portico.strategies.base import OAuth2Strategy, ProfileAuthStyle, TokenRequestStyle


@dataclass(frozen=True)
class GitHubStrategy(OAuth2Strategy):
    """GitHub strategy.

    Only ``client_id``, ``client_secret`` and ``redirect_uri`` are required.
    Pass ``scope`` (e.g. ``read:user user:email``), ``state``, ``login`` or
    ``allow_signup`` as extra options to forward them to the consent screen.

    GitHub takes the token request as JSON and answers with JSON only when
    asked via ``Accept: application/json``. Errors such as
    ``bad_verification_code`` come back with a 200 status and an ``error``
    field. The profile endpoint expects ``Authorization: token <access_token>``.
    """

    TOKEN_REQUEST_STYLE: ClassVar[TokenRequestStyle] = TokenRequestStyle.JSON_BODY
    PROFILE_AUTH_STYLE: ClassVar[ProfileAuthStyle] = ProfileAuthStyle.TOKEN

    @property
    def name(self) -> str:
        return "github"

    @property
    def authorize_url(self) -> str:
        return "https://github.com/login/oauth/authorize"

    @property
    def token_url(self) -> str:
        return "https://github.com/login/oauth/access_token"

    @property
    def profile_url(self) -> str:
        return "https://api.github.com/user"

    def normalize_profile(self, raw: dict[str, Any], token: TokenData) -> UserProfile:
        return map_github_profile(self.name, raw, token)
