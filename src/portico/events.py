"""Portico event system — typed flow events and a hook registry.

Hosts register hooks via ``@portico.on("event_name")`` to react to flow
milestones (audit logs, metrics, session creation). Hooks are fail-open:
errors are logged and never change the outcome of the flow.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

from portico.core.schemas import TokenData

logger = logging.getLogger("portico.events")


# ---------------------------------------------------------------------------
# Event dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Event:
    """Base event — all events carry a timestamp."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class AuthorizeRedirect(Event):
    """Fired when the engine sends the browser to a provider consent screen."""
    provider: str = ""
    url: str = ""


@dataclass(frozen=True, slots=True)
class Login(Event):
    """Fired when a flow completes with a user profile (OAuth or local).

    ``token_data`` carries the provider tokens for OAuth logins and is None
    for local logins.
    """
    provider: str = ""
    provider_user_id: str = ""
    display_name: str | None = None
    token_data: TokenData | None = None


@dataclass(frozen=True, slots=True)
class LoginFailed(Event):
    """Fired when a flow ends in the FAILED state."""
    provider: str = ""
    reason: str = ""
    message: str = ""


EVENT_MAP: dict[str, type[Event]] = {
    "authorize_redirect": AuthorizeRedirect,
    "login": Login,
    "login_failed": LoginFailed,
}


# ---------------------------------------------------------------------------
# Hook registry
# ---------------------------------------------------------------------------

HookCallback = Callable[..., Any]


class HookRegistry:
    """Registry for event hook callbacks. Supports multiple listeners per event."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[HookCallback]] = {}

    def register(self, event_name: str, callback: HookCallback) -> None:
        """Register a callback for an event name."""
        if event_name not in EVENT_MAP:
            raise ValueError(
                f"Unknown event '{event_name}'. "
                f"Valid events: {', '.join(sorted(EVENT_MAP))}"
            )
        self._hooks.setdefault(event_name, []).append(callback)

    def get_hooks(self, event_name: str) -> list[HookCallback]:
        """Get all registered callbacks for an event name."""
        return self._hooks.get(event_name, [])

    async def emit(self, event_name: str, event: Event) -> None:
        """Fire all registered callbacks for an event. Fail-open: errors are logged."""
        for callback in self.get_hooks(event_name):
            try:
                if inspect.iscoroutinefunction(callback):
                    await callback(event)
                else:
                    loop = asyncio.get_running_loop()
                    await loop.run_in_executor(None, callback, event)
            except Exception:
                logger.exception(
                    "Hook error in '%s' handler %s.%s",
                    event_name,
                    callback.__module__,
                    callback.__qualname__,
                )
