from pathlib import Path

from filepipe.config.settings import Settings
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.local_store import LocalObjectStore
from filepipe.storage.postgres_store import PostgresObjectStore


class ObjectStoreFactory:
    """Creates the configured object store backend."""

    BACKENDS = ("local", "postgres")

    @classmethod
    def create(cls, settings: Settings, storage_root: Path | None = None) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        signer = CapabilitySigner(settings.signing_secret)
        if backend == "local":
            root = storage_root if storage_root is not None else Path(settings.storage_root)
            return LocalObjectStore(root, signer, settings.public_base_url)
        if backend == "postgres":
            return PostgresObjectStore(signer, settings.public_base_url)
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
