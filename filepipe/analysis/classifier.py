"""Maps a stored file to one of the supported structural formats."""

from pathlib import PurePosixPath

from filepipe.analysis.exceptions import UnrecognizedFormatError
from filepipe.results.models import FileType
from filepipe.storage.capability import media_type

SUFFIXES: dict[str, FileType] = {
    ".csv": FileType.CSV,
    ".jsonl": FileType.JSONL,
    ".ndjson": FileType.JSONL,
    ".json": FileType.JSONL,
}

CONTENT_TYPES: dict[str, FileType] = {
    "text/csv": FileType.CSV,
    "application/csv": FileType.CSV,
    "application/x-ndjson": FileType.JSONL,
    "application/jsonl": FileType.JSONL,
    "application/x-jsonlines": FileType.JSONL,
    "application/json": FileType.JSONL,
}


def classify(file_name: str, content_type: str | None = None) -> FileType:
    """Classify by file-name suffix, falling back to the stored content type.

    Raises:
        UnrecognizedFormatError: if neither identifies a supported format.
    """
    suffix = PurePosixPath(file_name).suffix.lower()
    file_type = SUFFIXES.get(suffix)
    if file_type is None and content_type:
        file_type = CONTENT_TYPES.get(media_type(content_type))
    if file_type is None:
        described = f"'{suffix}'" if suffix else "no extension"
        raise UnrecognizedFormatError(
            f"Unsupported file type ({described}). "
            f"Supported extensions: {', '.join(sorted(SUFFIXES))}"
        )
    return file_type
