"""FastAPI dependencies for dicebox.

Settings and the storage backend are resolved once in the app lifespan and
kept on ``app.state``; these dependencies hand them to routes read-only.
"""

from __future__ import annotations

from starlette.requests import Request

from dicebox.backend import Backend
from dicebox.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend(request: Request) -> Backend:
    return request.app.state.backend
