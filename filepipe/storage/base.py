from abc import ABC, abstractmethod
from datetime import datetime
from urllib.parse import quote

from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.exceptions import ObjectTooLargeError
from filepipe.storage.models import StoredObject, WriteCapability


class BaseObjectStore(ABC):
    """Contract for all object store backends.

    Backends provide per-key atomic writes and read-after-write consistency.
    Upload capabilities are issued as signed URLs pointing at the service's
    own ``PUT /objects/{token}`` endpoint.
    """

    UPLOAD_PATH = "/objects"

    def __init__(self, signer: CapabilitySigner, public_base_url: str) -> None:
        self._signer = signer
        self._public_base_url = public_base_url.rstrip("/")

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store body under key, replacing any existing object atomically.

        Raises:
            StorageError: if the write fails.
        """

    @abstractmethod
    def get(self, key: str) -> StoredObject:
        """Read the full object stored under key.

        Raises:
            ObjectNotFoundError: if no object exists under key.
            StorageError: if the read fails.
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Report whether an object is stored under key."""

    def presign_put(self, capability: WriteCapability) -> str:
        """Return an upload URL that carries the capability."""
        token = self._signer.sign(capability)
        return f"{self._public_base_url}{self.UPLOAD_PATH}/{quote(token, safe='')}"

    def put_with_capability(
        self,
        token: str,
        body: bytes,
        content_type: str,
        max_bytes: int | None = None,
        now: datetime | None = None,
    ) -> str:
        """Verify a capability token and store the upload under its key.

        Returns:
            The key the object was stored under.

        Raises:
            CapabilityError: if the token is rejected.
            ObjectTooLargeError: if body exceeds max_bytes.
        """
        capability = self._signer.verify(token, content_type, now=now)
        if max_bytes is not None and len(body) > max_bytes:
            raise ObjectTooLargeError(
                f"Upload of {len(body)} bytes exceeds the {max_bytes} byte limit"
            )
        self.put(capability.resource_key, body, capability.allowed_content_type)
        return capability.resource_key
