"""Portico — pluggable OAuth 2.0 authorization-code strategies for Python web hosts."""

__version__ = "0.1.0"

from portico.config import LocalConfig, StrategyConfig
from portico.core.context import RequestContext, SimpleRequestContext
from portico.core.errors import (
    CallbackError,
    ConfigError,
    CredentialError,
    PorticoError,
    ProfileFetchError,
    TokenExchangeError,
)
from portico.core.flow import CallbackQuery, FlowEngine, FlowState, detect_phase
from portico.core.result import Failure, FlowResult, Redirected, Success
from portico.core.schemas import AuthData, LocalAuthData, ProfileName, TokenData, UserProfile
from portico.events import AuthorizeRedirect, Login, LoginFailed
from portico.portico import Portico
from portico.strategies import (
    GenericOAuth2Strategy,
    GitHubStrategy,
    LocalStrategy,
    OAuth2Strategy,
    ProfileAuthStyle,
    SpotifyStrategy,
    TokenRequestStyle,
)

__all__ = [
    "AuthData",
    "AuthorizeRedirect",
    "CallbackError",
    "CallbackQuery",
    "ConfigError",
    "CredentialError",
    "Failure",
    "FlowEngine",
    "FlowResult",
    "FlowState",
    "GenericOAuth2Strategy",
    "GitHubStrategy",
    "LocalAuthData",
    "LocalConfig",
    "LocalStrategy",
    "Login",
    "LoginFailed",
    "OAuth2Strategy",
    "Portico",
    "PorticoError",
    "ProfileAuthStyle",
    "ProfileFetchError",
    "ProfileName",
    "Redirected",
    "RequestContext",
    "SimpleRequestContext",
    "SpotifyStrategy",
    "StrategyConfig",
    "Success",
    "TokenData",
    "TokenExchangeError",
    "TokenRequestStyle",
    "UserProfile",
    "detect_phase",
]
