from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StoredObject:
    """Bytes and metadata of one object read from the store."""

    key: str
    body: bytes
    content_type: str


@dataclass(frozen=True)
class WriteCapability:
    """Time-boxed permission to write exactly one object with one content type."""

    resource_key: str
    expires_at: datetime
    allowed_content_type: str

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
