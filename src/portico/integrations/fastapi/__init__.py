"""FastAPI integration for Portico."""

from portico.integrations.fastapi.context import StarletteRequestContext
from portico.integrations.fastapi.router import create_auth_router

__all__ = [
    "StarletteRequestContext",
    "create_auth_router",
]
