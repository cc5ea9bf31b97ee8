from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from filepipe.api.schemas import HealthResponse
from filepipe.authorizer.authorizer import UploadAuthorizer
from filepipe.config.settings import Settings
from filepipe.database.connection import close_pool, init_pool, is_pool_initialized
from filepipe.logging.logger import Log
from filepipe.resolver.resolver import ResultResolver
from filepipe.results.repository import ResultRepository
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.factory import ObjectStoreFactory
from filepipe.storage.postgres_store import PostgresObjectStore
from filepipe.worker.worker import build_worker


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Open the database pool for the postgres backend; close it on exit."""
    store = application.state.store
    owns_pool = isinstance(store, PostgresObjectStore) and not is_pool_initialized()
    if owns_pool:
        init_pool(application.state.settings)
        store.ensure_schema()
        Log.info("Database pool initialized")
    try:
        yield
    finally:
        if owns_pool:
            close_pool()
            Log.info("Database pool closed")


def create_app(
    settings: Settings | None = None,
    store: BaseObjectStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()
    Log.configure(settings.log_level)
    store = store or ObjectStoreFactory.create(settings)

    application = FastAPI(title="filepipe", version="0.1.0", lifespan=_lifespan)
    application.state.settings = settings
    application.state.store = store
    application.state.authorizer = UploadAuthorizer(
        store,
        raw_prefix=settings.raw_prefix,
        ttl_seconds=settings.upload_url_ttl_seconds,
    )
    application.state.resolver = ResultResolver(
        ResultRepository(store, settings.results_prefix)
    )
    application.state.worker = build_worker(settings, store)

    from filepipe.api.routers import objects_router, results_router, upload_router

    application.include_router(upload_router)
    application.include_router(objects_router)
    application.include_router(results_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse()

    return application
