import json
import os
import tempfile
from pathlib import Path

from filepipe.storage.base import BaseObjectStore
from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.exceptions import (
    InvalidObjectKeyError,
    ObjectNotFoundError,
    StorageError,
)
from filepipe.storage.models import StoredObject

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


class LocalObjectStore(BaseObjectStore):
    """Stores objects as files under a root directory.

    Layout: ``{root}/{key}`` holds the body and ``{root}/.meta/{key}.json``
    holds the content type. Metadata is written before the body so an
    object becomes visible only once both are in place.
    """

    META_DIR = ".meta"

    def __init__(
        self,
        root: Path,
        signer: CapabilitySigner,
        public_base_url: str,
    ) -> None:
        super().__init__(signer, public_base_url)
        self._root = root

    def put(self, key: str, body: bytes, content_type: str) -> None:
        path = self._resolve_path(key)
        try:
            self._atomic_write(
                self._meta_path(key),
                json.dumps({"content_type": content_type}).encode("utf-8"),
            )
            self._atomic_write(path, body)
        except OSError as exc:
            raise StorageError(f"Failed to write object '{key}': {exc}") from exc

    def get(self, key: str) -> StoredObject:
        path = self._resolve_path(key)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object not found: {key}")
        try:
            body = path.read_bytes()
        except FileNotFoundError as exc:
            raise ObjectNotFoundError(f"Object not found: {key}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read object '{key}': {exc}") from exc
        return StoredObject(key=key, body=body, content_type=self._read_content_type(key))

    def exists(self, key: str) -> bool:
        return self._resolve_path(key).is_file()

    def _read_content_type(self, key: str) -> str:
        try:
            meta = json.loads(self._meta_path(key).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return _DEFAULT_CONTENT_TYPE
        return str(meta.get("content_type") or _DEFAULT_CONTENT_TYPE)

    def _resolve_path(self, key: str) -> Path:
        parts = key.split("/")
        if not key or any(part in ("", ".", "..") for part in parts):
            raise InvalidObjectKeyError(f"Invalid object key: {key!r}")
        if parts[0] == self.META_DIR:
            raise InvalidObjectKeyError(f"Object key uses a reserved prefix: {key!r}")
        return self._root.joinpath(*parts)

    def _meta_path(self, key: str) -> Path:
        parts = key.split("/")
        return self._root.joinpath(self.META_DIR, *parts[:-1], f"{parts[-1]}.json")

    @staticmethod
    def _atomic_write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
