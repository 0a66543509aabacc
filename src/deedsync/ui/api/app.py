"""FastAPI application factory for the ingest API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, FastAPI

from deedsync import __version__
from deedsync.ui.api.auth import require_bearer
from deedsync.ui.api.errors import register_error_handlers
from deedsync.ui.api.routers import ingest, properties, reconcile, scraper

if TYPE_CHECKING:
    from deedsync.app import DeedServices


def create_app(*, services: DeedServices, api_token: str | None) -> FastAPI:
    """Build the API around already-wired services.

    Every router is guarded by the bearer check, which runs before any handler
    touches the store. ``api_token=None`` rejects all requests.
    """

    app = FastAPI(title="deedsync ingest API", version=__version__)
    app.state.services = services
    app.state.api_token = api_token

    register_error_handlers(app)

    guarded = [Depends(require_bearer)]
    for module in (ingest, reconcile, scraper, properties):
        app.include_router(module.router, dependencies=guarded)
    return app
