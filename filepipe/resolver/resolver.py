from filepipe.logging.logger import Log
from filepipe.resolver.exceptions import InvalidFileIdError
from filepipe.results.models import ResultRecord
from filepipe.results.repository import ResultRepository
from filepipe.submissions.models import is_correlation_id


class ResultResolver:
    """Reports whether a submission's result exists yet.

    There is no stored pending state: None means not ready, a record means
    terminal. Resolving is read-only.
    """

    def __init__(self, result_repo: ResultRepository) -> None:
        self._result_repo = result_repo

    def resolve(self, file_id: str) -> ResultRecord | None:
        """Return the terminal record for file_id, or None while it is not ready.

        Raises:
            InvalidFileIdError: if file_id is not a well-formed correlation id.
            ResultRecordValidationError: if the stored record is corrupt.
            StorageError: if the store cannot be read.
        """
        if not is_correlation_id(file_id):
            raise InvalidFileIdError(f"Invalid fileId: {file_id!r}")
        record = self._result_repo.find(file_id)
        if record is None:
            Log.debug(f"Result for {file_id} not ready")
        return record
