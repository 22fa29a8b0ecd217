"""Entry point for the BOPP management API.

Wires the components together and serves the JSON API with uvicorn:
1. AppSettings (configuration)
2. Logging setup
3. StorageBackend (json / memory / sqlite)
4. RateStore and UserStore
5. FastAPI app, whose lifespan owns the backend connection

With API_ENABLED=false the stores are initialised once (seeding any missing
record sets) and the process exits.
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from bopp.auth.store import UserStore
from bopp.config import AppSettings
from bopp.logging import get_logger, setup_logging
from bopp.rates.store import RateStore
from bopp.storage import SqliteBackend, StorageBackend, create_backend


def build_stores(
    settings: AppSettings, backend: StorageBackend
) -> tuple[RateStore, UserStore]:
    """Create both stores over a shared backend."""
    return RateStore(backend, settings.rates), UserStore(backend, settings.auth)


async def _connect(backend: StorageBackend) -> None:
    if isinstance(backend, SqliteBackend):
        await backend.connect()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the storage backend on startup and close it on shutdown."""
    logger = get_logger("bopp.main")
    backend: StorageBackend = app.state.backend

    await _connect(backend)
    logger.info("lifespan_started", backend=type(backend).__name__)

    yield

    await backend.close()
    logger.info("bopp_api_stopped")


async def _initialise(rate_store: RateStore, user_store: UserStore) -> None:
    logger = get_logger("bopp.main")
    rates = await rate_store.get_rates()
    history = await rate_store.get_rate_history()
    users = await user_store.get_all_users()
    logger.info(
        "stores_initialised",
        rates=len(rates),
        history_entries=len(history),
        users=len(users),
    )


async def run() -> None:
    """Run the API server, or initialise storage when the API is disabled."""
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("bopp.main")

    backend = create_backend(settings.storage)
    rate_store, user_store = build_stores(settings, backend)

    if settings.api.enabled:
        from bopp.api.app import create_app

        app = create_app(rate_store, user_store, lifespan=lifespan)
        app.state.settings = settings
        app.state.backend = backend

        logger.info(
            "starting_api",
            host=settings.api.host,
            port=settings.api.port,
            backend=settings.storage.backend,
        )

        config = uvicorn.Config(
            app,
            host=settings.api.host,
            port=settings.api.port,
            log_level="warning",
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        await _connect(backend)
        try:
            await _initialise(rate_store, user_store)
        finally:
            await backend.close()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
