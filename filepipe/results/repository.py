import json

from filepipe.results.exceptions import ResultRecordValidationError
from filepipe.results.models import ResultRecord
from filepipe.results.validator import validate_and_build
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import ObjectNotFoundError
from filepipe.submissions.models import result_key

RESULT_CONTENT_TYPE = "application/json"


class ResultRepository:
    """Reads and writes result records in the results namespace of the object store."""

    def __init__(self, store: BaseObjectStore, results_prefix: str) -> None:
        self._store = store
        self._results_prefix = results_prefix

    def save(self, record: ResultRecord) -> None:
        """Write the record as a single object, replacing any previous one."""
        body = json.dumps(record.to_payload(), separators=(",", ":")).encode("utf-8")
        self._store.put(self._key(record.file_id), body, RESULT_CONTENT_TYPE)

    def find(self, correlation_id: str) -> ResultRecord | None:
        """Return the stored record, or None while no record exists.

        Raises:
            ResultRecordValidationError: if the stored payload is not a valid record.
            StorageError: if the store cannot be read.
        """
        try:
            stored = self._store.get(self._key(correlation_id))
        except ObjectNotFoundError:
            return None
        try:
            data = json.loads(stored.body)
        except ValueError as exc:
            raise ResultRecordValidationError(
                f"Result record for {correlation_id} is not valid JSON: {exc}"
            ) from exc
        return validate_and_build(data)

    def _key(self, correlation_id: str) -> str:
        return result_key(self._results_prefix, correlation_id)
