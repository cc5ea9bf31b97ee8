"""HTTP client for submitting a file and polling for its analysis result."""

import mimetypes
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx

from filepipe.client.exceptions import (
    PollTimeoutError,
    ResultFetchError,
    TransportFailedError,
    UploadRequestError,
)
from filepipe.logging.logger import Log
from filepipe.results.exceptions import ResultRecordValidationError
from filepipe.results.models import ResultRecord
from filepipe.results.validator import validate_and_build

_CONTENT_TYPES_BY_SUFFIX = {
    ".csv": "text/csv",
    ".jsonl": "application/x-ndjson",
    ".ndjson": "application/x-ndjson",
    ".json": "application/json",
}


@dataclass(frozen=True)
class UploadTicket:
    upload_url: str
    file_id: str


def guess_content_type(path: Path) -> str:
    known = _CONTENT_TYPES_BY_SUFFIX.get(path.suffix.lower())
    if known:
        return known
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


class FilePipeClient:
    """Runs authorize -> upload -> poll against a filepipe service.

    Polling stops on the first 200 response, whatever the record's status;
    callers inspect ``ResultRecord.status`` to tell success from failure.
    The poll budget is the client's own timeout: the service never reports
    an upload that was authorized but never completed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        poll_interval_seconds: float = 5.0,
        max_poll_attempts: int = 60,
        timeout_seconds: float = 30,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._poll_interval = poll_interval_seconds
        self._max_poll_attempts = max_poll_attempts
        self._http = http_client or httpx.Client(timeout=timeout_seconds)
        self._sleep = sleep

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FilePipeClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def submit(self, path: Path, content_type: str | None = None) -> ResultRecord:
        """Upload a local file and wait for its terminal result."""
        content_type = content_type or guess_content_type(path)
        ticket = self.request_upload(path.name, content_type)
        self.upload(ticket.upload_url, path.read_bytes(), content_type)
        return self.poll(ticket.file_id)

    def request_upload(self, file_name: str, content_type: str) -> UploadTicket:
        try:
            response = self._http.post(
                f"{self._base_url}/upload",
                json={"fileName": file_name, "contentType": content_type},
            )
        except httpx.HTTPError as exc:
            raise UploadRequestError(f"Upload request failed: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise UploadRequestError(
                f"Upload request rejected with {response.status_code}: {response.text}"
            )
        try:
            data = response.json()
            upload_url, file_id = data["uploadURL"], data["fileId"]
        except (ValueError, KeyError, TypeError) as exc:
            raise UploadRequestError(f"Malformed upload response: {exc!r}") from exc
        if not isinstance(upload_url, str) or not isinstance(file_id, str):
            raise UploadRequestError(
                "Malformed upload response: uploadURL and fileId must be strings"
            )
        return UploadTicket(upload_url=upload_url, file_id=file_id)

    def upload(self, upload_url: str, body: bytes, content_type: str) -> None:
        """PUT raw bytes to the upload URL.

        Raises:
            TransportFailedError: if the upload does not succeed. No result
                will ever appear for this submission, so do not poll.
        """
        try:
            response = self._http.put(
                upload_url,
                content=body,
                headers={"Content-Type": content_type},
            )
        except httpx.HTTPError as exc:
            raise TransportFailedError(f"Upload failed: {exc}") from exc
        if not response.is_success:
            raise TransportFailedError(
                f"Upload rejected with {response.status_code}: {response.text}"
            )
        Log.info(f"Uploaded {len(body)} bytes")

    def fetch_result(self, file_id: str) -> ResultRecord | None:
        """Query the result once. None means not ready yet."""
        try:
            response = self._http.get(f"{self._base_url}/result/{file_id}")
        except httpx.HTTPError as exc:
            raise ResultFetchError(f"Result request failed: {exc}") from exc
        if response.status_code == httpx.codes.ACCEPTED:
            return None
        if response.status_code != httpx.codes.OK:
            raise ResultFetchError(
                f"Result request failed with {response.status_code}: {response.text}"
            )
        try:
            return validate_and_build(response.json())
        except (ValueError, ResultRecordValidationError) as exc:
            raise ResultFetchError(f"Malformed result payload: {exc}") from exc

    def poll(self, file_id: str) -> ResultRecord:
        """Poll at a fixed interval until a terminal record appears.

        Raises:
            PollTimeoutError: after max_poll_attempts not-ready responses.
            ResultFetchError: on the first failed poll.
        """
        for attempt in range(1, self._max_poll_attempts + 1):
            record = self.fetch_result(file_id)
            if record is not None:
                return record
            Log.debug(f"Result for {file_id} not ready (attempt {attempt})")
            if attempt < self._max_poll_attempts:
                self._sleep(self._poll_interval)
        raise PollTimeoutError(
            f"No result for {file_id} after {self._max_poll_attempts} attempts"
        )
