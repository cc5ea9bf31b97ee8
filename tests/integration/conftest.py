import os
from collections.abc import Generator
from pathlib import Path

import psycopg
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from filepipe.api.app import create_app
from filepipe.config.settings import Settings
from filepipe.database.connection import close_pool, get_connection, init_pool
from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.postgres_store import PostgresObjectStore


def _db_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "filepipe_test")
    return Settings(storage_backend="postgres")


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def store_root(settings: Settings) -> Path:
    return Path(settings.storage_root)


@pytest.fixture(scope="session")
def db_settings() -> Settings:
    return _db_settings()


@pytest.fixture(scope="session")
def integration_pool(db_settings: Settings) -> Generator[None, None, None]:
    try:
        psycopg.connect(
            host=db_settings.db_host,
            port=db_settings.db_port,
            dbname=db_settings.db_database,
            user=db_settings.db_username,
            password=db_settings.db_password,
            connect_timeout=2,
        ).close()
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    init_pool(db_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def pg_store(integration_pool: None, settings: Settings) -> PostgresObjectStore:
    store = PostgresObjectStore(
        CapabilitySigner(settings.signing_secret), settings.public_base_url
    )
    store.ensure_schema()
    return store


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    """Object keys appended here are deleted after the test."""
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for key in cleanup:
                cur.execute("DELETE FROM objects WHERE key = %s", (key,))
        conn.commit()
