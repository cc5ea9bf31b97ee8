from abc import ABC, abstractmethod

from filepipe.analysis.exceptions import MalformedContentError
from filepipe.results.models import FileType, ResultRecord


class BaseAnalyzer(ABC):
    """Contract for all format analyzers."""

    file_type: FileType

    @abstractmethod
    def analyze(self, file_id: str, body: bytes) -> ResultRecord:
        """Measure a file's structure and build its processed result record.

        Args:
            file_id: Correlation id the record is keyed by.
            body: Full raw file content.

        Returns:
            ResultRecord with status=processed.

        Raises:
            MalformedContentError: if the content fails structural parsing.
        """

    def _decode(self, body: bytes) -> str:
        try:
            return body.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedContentError(
                f"{self.file_type.value} file is not valid UTF-8 text "
                f"(byte offset {exc.start})"
            ) from exc

    @staticmethod
    def _lines(text: str) -> list[str]:
        """Split on LF only, dropping a trailing CR from each line."""
        return [line.removesuffix("\r") for line in text.split("\n")]
