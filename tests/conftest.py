"""Test fixtures for Portico.

All tests are network-free — provider endpoints are served by an
httpx MockTransport keyed on host + path.
"""

from collections.abc import Callable

import httpx
import pytest

from portico import GitHubStrategy, SpotifyStrategy, StrategyConfig

SPOTIFY_REDIRECT = "http://localhost:8000/auth/spotify"
GITHUB_REDIRECT = "http://localhost:8000/auth/github"

Route = httpx.Response | Callable[[httpx.Request], httpx.Response]


class ProviderStub:
    """Fake provider: routes requests by ``host + path`` and records them."""

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(f"{request.url.host}{request.url.path}")
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, host_and_path: str) -> list[httpx.Request]:
        return [r for r in self.requests if f"{r.url.host}{r.url.path}" == host_and_path]


SPOTIFY_TOKEN = "accounts.spotify.com/api/token"
SPOTIFY_ME = "api.spotify.com/v1/me"
GITHUB_TOKEN = "github.com/login/oauth/access_token"
GITHUB_USER = "api.github.com/user"


@pytest.fixture
def spotify_config() -> StrategyConfig:
    return StrategyConfig(
        client_id="spotify-client-id",
        client_secret="spotify-client-secret",
        redirect_uri=SPOTIFY_REDIRECT,
        extra=(
            ("response_type", "code"),
            ("scope", "user-read-email"),
            ("state", "xyz-state"),
        ),
    )


@pytest.fixture
def github_config() -> StrategyConfig:
    return StrategyConfig(
        client_id="gh-client-id",
        client_secret="gh-client-secret",
        redirect_uri=GITHUB_REDIRECT,
        extra=(("scope", "read:user"),),
    )


@pytest.fixture
def spotify_stub() -> ProviderStub:
    return ProviderStub({
        SPOTIFY_TOKEN: httpx.Response(200, json={
            "access_token": "BQD-spotify-access",
            "token_type": "Bearer",
            "scope": "user-read-email",
            "expires_in": 3600,
            "refresh_token": "AQB-spotify-refresh",
        }),
        SPOTIFY_ME: httpx.Response(200, json={
            "id": "wizzler",
            "display_name": "JM Wizzler",
            "email": "email@example.com",
        }),
    })


@pytest.fixture
def github_stub() -> ProviderStub:
    return ProviderStub({
        GITHUB_TOKEN: httpx.Response(200, json={
            "access_token": "gho_test_access_token",
            "token_type": "bearer",
            "scope": "read:user",
        }),
        GITHUB_USER: httpx.Response(200, json={
            "id": 12345,
            "login": "octocat",
            "name": "The Octocat",
            "email": "octocat@github.com",
        }),
    })


@pytest.fixture
def spotify(spotify_config, spotify_stub) -> SpotifyStrategy:
    return SpotifyStrategy(spotify_config, transport=spotify_stub.transport)


@pytest.fixture
def github(github_config, github_stub) -> GitHubStrategy:
    return GitHubStrategy(github_config, transport=github_stub.transport)
