"""Portico error taxonomy.

Construction problems (``ConfigError``) are raised immediately. Every other
error is produced during a flow execution and handed back to the host as a
``Failure`` value by the flow engine rather than raised.
"""


class PorticoError(Exception):
    """Base error with a machine-readable code and an HTTP status hint."""

    def __init__(self, message: str, code: str, status_code: int = 400, **extra):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.extra = extra
        super().__init__(message)


class ConfigError(PorticoError):
    """A strategy was constructed with missing or invalid options."""

    def __init__(self, message: str, code: str = "config_invalid", **extra):
        super().__init__(message, code=code, status_code=500, **extra)


class CallbackError(PorticoError):
    """The callback could not be completed, or the redirect to the provider failed."""

    def __init__(
        self, message: str, code: str = "oauth_provider_error", status_code: int = 400, **extra,
    ):
        super().__init__(message, code=code, status_code=status_code, **extra)


class TokenExchangeError(PorticoError):
    """Exchanging the authorization code for an access token failed."""

    def __init__(
        self, message: str, code: str = "oauth_exchange_failed", status_code: int = 502, **extra,
    ):
        super().__init__(message, code=code, status_code=status_code, **extra)


class ProfileFetchError(PorticoError):
    """Fetching or normalizing the provider user profile failed."""

    def __init__(
        self, message: str, code: str = "oauth_user_info_failed", status_code: int = 502, **extra,
    ):
        super().__init__(message, code=code, status_code=status_code, **extra)


class CredentialError(PorticoError):
    """Local strategy: credentials missing from the request or rejected."""

    def __init__(self, message: str, code: str = "invalid_credentials", **extra):
        super().__init__(message, code=code, status_code=401, **extra)
