"""Local username/password strategy.

Skips the redirect and token phases entirely: credentials are read from the
request body and handed to an ``authorize`` callback supplied by the host,
which is the only thing that decides whether they are valid. No outbound HTTP
call is ever made from here.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, Callable

from pydantic import ValidationError

from portico.config import LocalConfig
from portico.core.context import RequestContext
from portico.core.errors import ConfigError, CredentialError, PorticoError
from portico.core.schemas import LocalAuthData, UserProfile

logger = logging.getLogger("portico.strategies.local")

AuthorizeResult = UserProfile | Mapping[str, Any] | None
AuthorizeFn = Callable[[dict[str, Any]], AuthorizeResult | Awaitable[AuthorizeResult]]


class LocalStrategy:
    """Username/password strategy backed by a host-supplied ``authorize`` callback.

    Args:
        authorize: Called with the credentials dict (the configured username
            and password fields, plus any other body fields). Returns a
            ``UserProfile`` (or a mapping with the same fields) on success.
            Returning ``None`` or raising rejects the credentials. May be sync
            or async.
        username_field: Body field holding the username (default "username").
        password_field: Body field holding the password (default "password").
        name: Strategy name (default "local").
    """

    def __init__(
        self,
        authorize: AuthorizeFn,
        *,
        username_field: str = "username",
        password_field: str = "password",
        name: str = "local",
    ) -> None:
        if not callable(authorize):
            raise ConfigError("LocalStrategy requires an authorize callback")
        self._authorize = authorize
        self._config = LocalConfig(username_field=username_field, password_field=password_field)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> LocalConfig:
        return self._config

    def extract_credentials(self, body: Mapping[str, Any]) -> dict[str, Any]:
        """Pull the credentials out of a request body.

        Raises:
            CredentialError: If either configured field is missing or empty.
        """
        username = body.get(self._config.username_field)
        password = body.get(self._config.password_field)
        if not username or not password:
            raise CredentialError(
                "No username or password submitted for authorization",
                code="credentials_missing",
            )
        return dict(body)

    async def authenticate(self, ctx: RequestContext) -> LocalAuthData:
        """Verify the credentials in the request body.

        Raises:
            CredentialError: If credentials are missing, malformed, or rejected
                by the ``authorize`` callback.
        """
        try:
            body = await ctx.read_body()
        except Exception as e:
            raise CredentialError(
                "Could not read credentials from request body",
                code="credentials_missing",
            ) from e
        if not isinstance(body, Mapping):
            raise CredentialError(
                "Request body must be an object of credential fields",
                code="credentials_missing",
            )

        credentials = self.extract_credentials(body)

        try:
            result = self._authorize(credentials)
            if inspect.isawaitable(result):
                result = await result
        except PorticoError:
            raise
        except Exception as e:
            logger.warning("Local authorize callback rejected %r: %s", self._name, e)
            raise CredentialError("Invalid username or password") from e

        if result is None:
            raise CredentialError("Invalid username or password")

        if isinstance(result, UserProfile):
            return LocalAuthData(user_info=result)

        try:
            profile = UserProfile.model_validate({"provider": self._name, **result})
        except (ValidationError, TypeError) as e:
            raise CredentialError(
                "authorize callback returned an invalid profile",
                code="invalid_profile",
            ) from e
        return LocalAuthData(user_info=profile)
