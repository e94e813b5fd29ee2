"""Portico strategies."""

from portico.strategies.base import OAuth2Strategy, ProfileAuthStyle, TokenRequestStyle
from portico.strategies.generic import GenericOAuth2Strategy
from portico.strategies.github import GitHubStrategy
from portico.strategies.local import LocalStrategy
from portico.strategies.spotify import SpotifyStrategy

__all__ = [
    "OAuth2Strategy",
    "ProfileAuthStyle",
    "TokenRequestStyle",
    "GenericOAuth2Strategy",
    "GitHubStrategy",
    "LocalStrategy",
    "SpotifyStrategy",
]
