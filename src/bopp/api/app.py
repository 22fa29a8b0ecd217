"""FastAPI application factory exposing the rate and user stores as JSON."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from bopp.api.routes import auth, rates, users
from bopp.auth.store import UserStore
from bopp.rates.store import RateStore


def create_app(
    rate_store: RateStore,
    user_store: UserStore,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the API application.

    Args:
        rate_store: Store backing the /api/rates routes.
        user_store: Store backing the /api/users, /api/admins and /api/auth routes.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to own the storage backend lifecycle.

    Returns:
        Configured FastAPI application with all routers registered.
    """
    app = FastAPI(
        title="BOPP Enterprise Management API",
        lifespan=lifespan,
    )

    app.state.rate_store = rate_store
    app.state.user_store = user_store

    app.include_router(rates.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(auth.router, prefix="/api/auth")

    return app
