from dataclasses import dataclass
from enum import Enum
from typing import Any

from filepipe.results.exceptions import ResultRecordValidationError


class ResultStatus(str, Enum):
    PROCESSED = "processed"
    ERROR = "error"


class FileType(str, Enum):
    CSV = "CSV"
    JSONL = "JSONL"


@dataclass(frozen=True)
class ResultRecord:
    """Outcome of analysis for one submission.

    Processed records carry the format payload (columns/row_count for CSV,
    line_count for JSONL) and no error. Error records carry only the error
    message, plus file_type when the format was recognized.
    """

    file_id: str
    status: ResultStatus
    file_type: FileType | None = None
    columns: tuple[str, ...] | None = None
    row_count: int | None = None
    line_count: int | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        has_payload = (
            self.columns is not None
            or self.row_count is not None
            or self.line_count is not None
        )
        if self.status is ResultStatus.ERROR:
            if not self.error:
                raise ResultRecordValidationError("Error records must carry an error message")
            if has_payload:
                raise ResultRecordValidationError("Error records must not carry analysis payload")
            return
        if self.error is not None:
            raise ResultRecordValidationError("Processed records must not carry an error")
        if self.file_type is FileType.CSV:
            if self.columns is None or self.row_count is None or self.line_count is not None:
                raise ResultRecordValidationError(
                    "CSV records must carry columns and rowCount only"
                )
        elif self.file_type is FileType.JSONL:
            if self.line_count is None or self.columns is not None or self.row_count is not None:
                raise ResultRecordValidationError("JSONL records must carry lineCount only")
        else:
            raise ResultRecordValidationError("Processed records must carry a fileType")
        for name in ("row_count", "line_count"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ResultRecordValidationError(f"{name} must be non-negative")

    @classmethod
    def csv(cls, file_id: str, columns: list[str], row_count: int) -> "ResultRecord":
        return cls(
            file_id=file_id,
            status=ResultStatus.PROCESSED,
            file_type=FileType.CSV,
            columns=tuple(columns),
            row_count=row_count,
        )

    @classmethod
    def jsonl(cls, file_id: str, line_count: int) -> "ResultRecord":
        return cls(
            file_id=file_id,
            status=ResultStatus.PROCESSED,
            file_type=FileType.JSONL,
            line_count=line_count,
        )

    @classmethod
    def failed(
        cls,
        file_id: str,
        error: str,
        file_type: FileType | None = None,
    ) -> "ResultRecord":
        return cls(
            file_id=file_id,
            status=ResultStatus.ERROR,
            file_type=file_type,
            error=error,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape, omitting absent fields."""
        payload: dict[str, Any] = {"fileId": self.file_id, "status": self.status.value}
        if self.file_type is not None:
            payload["fileType"] = self.file_type.value
        if self.columns is not None:
            payload["columns"] = list(self.columns)
        if self.row_count is not None:
            payload["rowCount"] = self.row_count
        if self.line_count is not None:
            payload["lineCount"] = self.line_count
        if self.error is not None:
            payload["error"] = self.error
        return payload
