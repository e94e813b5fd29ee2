"""Flow outcomes returned to the host.

A flow execution never raises for provider or credential failures; it
returns exactly one of ``Redirected``, ``Success`` or ``Failure`` and the
host branches on the type (or on ``ok``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from portico.core.errors import PorticoError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Redirected:
    """The engine asked the host to redirect the browser to ``url``."""

    url: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A completed flow carrying its terminal artifact."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """A flow that ended in ``FAILED``; ``error`` says why."""

    error: PorticoError

    @property
    def ok(self) -> bool:
        return False


FlowResult = Redirected | Success[T] | Failure
