import re
from datetime import datetime, timedelta, timezone

from filepipe.authorizer.exceptions import (
    AuthorizationFailedError,
    InvalidUploadRequestError,
)
from filepipe.authorizer.models import UploadAuthorization
from filepipe.logging.logger import Log
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.models import WriteCapability
from filepipe.submissions.models import (
    Submission,
    new_correlation_id,
    raw_object_key,
    safe_file_name,
)

_TOKEN = r"[A-Za-z0-9!#$&^_.+-]+"
_MIME_RE = re.compile(rf"^{_TOKEN}/{_TOKEN}(\s*;\s*{_TOKEN}=(\"[^\"]*\"|{_TOKEN}))*$")


class UploadAuthorizer:
    """Issues single-object, time-boxed upload capabilities.

    Stateless: nothing is persisted here. The submission exists once the
    client stores the raw object under the issued key.
    """

    def __init__(
        self,
        store: BaseObjectStore,
        raw_prefix: str,
        ttl_seconds: int,
    ) -> None:
        self._store = store
        self._raw_prefix = raw_prefix
        self._ttl = timedelta(seconds=ttl_seconds)

    def authorize(
        self,
        file_name: str,
        content_type: str,
        now: datetime | None = None,
    ) -> UploadAuthorization:
        """Mint an upload capability for one new submission.

        Raises:
            InvalidUploadRequestError: if file_name or content_type is invalid.
            AuthorizationFailedError: if the store cannot issue a capability.
        """
        name = self._validate_file_name(file_name)
        content_type = self._validate_content_type(content_type)

        correlation_id = new_correlation_id()
        submission = Submission(
            correlation_id=correlation_id,
            raw_object_key=raw_object_key(self._raw_prefix, correlation_id, name),
            file_name=name,
            declared_content_type=content_type,
        )
        capability = WriteCapability(
            resource_key=submission.raw_object_key,
            expires_at=(now or datetime.now(timezone.utc)) + self._ttl,
            allowed_content_type=content_type,
        )
        try:
            upload_url = self._store.presign_put(capability)
        except Exception as exc:
            Log.error(f"Failed to issue upload capability for {submission.raw_object_key}: {exc}")
            raise AuthorizationFailedError(f"Could not issue upload URL: {exc}") from exc

        Log.info(f"Authorized upload of '{name}' as submission {correlation_id}")
        return UploadAuthorization(
            upload_url=upload_url,
            file_id=correlation_id,
            submission=submission,
            capability=capability,
        )

    @staticmethod
    def _validate_file_name(file_name: str) -> str:
        if not file_name or not file_name.strip():
            raise InvalidUploadRequestError("fileName must be a non-empty string")
        name = safe_file_name(file_name)
        if not name or name in (".", ".."):
            raise InvalidUploadRequestError(f"fileName '{file_name}' has no usable base name")
        return name

    @staticmethod
    def _validate_content_type(content_type: str) -> str:
        value = (content_type or "").strip()
        if not _MIME_RE.match(value):
            raise InvalidUploadRequestError(
                f"contentType '{content_type}' is not a valid MIME type"
            )
        return value
