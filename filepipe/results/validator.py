"""Validates stored result payloads before they are handed to callers."""

from typing import Any

from filepipe.results.exceptions import ResultRecordValidationError
from filepipe.results.models import FileType, ResultRecord, ResultStatus

_KNOWN_FIELDS = frozenset(
    {"fileId", "status", "fileType", "columns", "rowCount", "lineCount", "error"}
)


def validate_and_build(data: Any) -> ResultRecord:
    """Validate a decoded result payload and build a ResultRecord.

    Raises:
        ResultRecordValidationError: on any validation failure.
    """
    if not isinstance(data, dict):
        raise ResultRecordValidationError("Result record must be an object")
    unknown = set(data) - _KNOWN_FIELDS
    if unknown:
        raise ResultRecordValidationError(f"Unknown result record fields: {sorted(unknown)}")
    return ResultRecord(
        file_id=_build_file_id(data.get("fileId")),
        status=_build_status(data.get("status")),
        file_type=_build_file_type(data.get("fileType")),
        columns=_build_columns(data.get("columns")),
        row_count=_build_count(data.get("rowCount"), "rowCount"),
        line_count=_build_count(data.get("lineCount"), "lineCount"),
        error=_build_error(data.get("error")),
    )


def _build_file_id(raw: Any) -> str:
    if not raw or not isinstance(raw, str):
        raise ResultRecordValidationError("'fileId' must be a non-empty string")
    return raw


def _build_status(raw: Any) -> ResultStatus:
    try:
        return ResultStatus(raw)
    except ValueError as exc:
        raise ResultRecordValidationError(
            f"'status' must be one of {[s.value for s in ResultStatus]}, got {raw!r}"
        ) from exc


def _build_file_type(raw: Any) -> FileType | None:
    if raw is None:
        return None
    try:
        return FileType(raw)
    except ValueError as exc:
        raise ResultRecordValidationError(
            f"'fileType' must be one of {[t.value for t in FileType]}, got {raw!r}"
        ) from exc


def _build_columns(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(c, str) for c in raw):
        raise ResultRecordValidationError("'columns' must be a list of strings")
    return tuple(raw)


def _build_count(raw: Any, name: str) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ResultRecordValidationError(f"'{name}' must be a non-negative integer")
    return raw


def _build_error(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ResultRecordValidationError("'error' must be a string")
    return raw
