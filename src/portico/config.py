"""Portico configuration — immutable per-strategy settings."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from portico.core.errors import ConfigError

_CORE_KEYS = ("client_id", "client_secret", "redirect_uri")


@dataclass(frozen=True, slots=True)
class StrategyConfig:
    """Settings shared by every flow execution of one OAuth strategy.

    ``extra`` holds provider-specific options (``scope``, ``state``,
    ``response_type``, ...) as ordered ``(key, value)`` pairs. They are passed
    through verbatim into the authorize URL in the order given.

    Example:
        StrategyConfig(
            client_id="abc",
            client_secret="shh",
            redirect_uri="http://localhost:8000/auth/github",
            extra=(("scope", "read:user"), ("state", "xyz")),
        )
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    extra: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        missing = [key for key in _CORE_KEYS if not getattr(self, key)]
        if missing:
            raise ConfigError(
                f"Missing required strategy options: {', '.join(missing)}",
                code="config_missing_option",
                missing=missing,
            )

        seen: set[str] = set(_CORE_KEYS)
        for key, _ in self.extra:
            if key in seen:
                raise ConfigError(
                    f"Duplicate strategy option '{key}'",
                    code="config_duplicate_option",
                )
            seen.add(key)

    @classmethod
    def from_options(cls, options: Mapping[str, str]) -> StrategyConfig:
        """Build a config from a flat option mapping, keeping its key order."""
        extra = tuple((k, v) for k, v in options.items() if k not in _CORE_KEYS)
        return cls(
            client_id=options.get("client_id", ""),
            client_secret=options.get("client_secret", ""),
            redirect_uri=options.get("redirect_uri", ""),
            extra=extra,
        )

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield every option: the required core first, then ``extra`` in order."""
        yield "client_id", self.client_id
        yield "client_secret", self.client_secret
        yield "redirect_uri", self.redirect_uri
        yield from self.extra

    def get(self, key: str, default: str | None = None) -> str | None:
        for k, v in self.items():
            if k == key:
                return v
        return default


@dataclass(frozen=True, slots=True)
class LocalConfig:
    """Settings for the username/password strategy.

    ``username_field`` and ``password_field`` name the request body fields
    that carry the credentials.
    """

    username_field: str = "username"
    password_field: str = "password"

    def __post_init__(self) -> None:
        if not self.username_field or not self.password_field:
            raise ConfigError(
                "Local strategy requires non-empty username and password field names",
                code="config_missing_option",
            )
        if self.username_field == self.password_field:
            raise ConfigError(
                "Local strategy username and password fields must differ",
                code="config_invalid",
            )
