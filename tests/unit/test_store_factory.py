from pathlib import Path

import pytest

from filepipe.config.settings import Settings
from filepipe.storage.factory import ObjectStoreFactory
from filepipe.storage.local_store import LocalObjectStore
from filepipe.storage.postgres_store import PostgresObjectStore


class TestObjectStoreFactory:
    def test_creates_local_store(self, tmp_path: Path) -> None:
        store = ObjectStoreFactory.create(Settings(storage_backend="local"), storage_root=tmp_path)
        assert isinstance(store, LocalObjectStore)

    def test_creates_postgres_store(self) -> None:
        store = ObjectStoreFactory.create(Settings(storage_backend="postgres"))
        assert isinstance(store, PostgresObjectStore)

    def test_is_case_insensitive(self, tmp_path: Path) -> None:
        store = ObjectStoreFactory.create(Settings(storage_backend="Local"), storage_root=tmp_path)
        assert isinstance(store, LocalObjectStore)

    def test_raises_for_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            ObjectStoreFactory.create(Settings(storage_backend="s3"))
