import re
import uuid
from dataclasses import dataclass

_CORRELATION_ID_RE = re.compile(r"[0-9a-f]{32}")


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def is_correlation_id(value: str) -> bool:
    return bool(_CORRELATION_ID_RE.fullmatch(value))


def safe_file_name(file_name: str) -> str:
    """Reduce a client-supplied name to its final path segment."""
    return re.split(r"[/\\]", file_name.strip())[-1].strip()


def raw_object_key(raw_prefix: str, correlation_id: str, file_name: str) -> str:
    """Build raw object key: {raw_prefix}/{correlation_id}/{file_name}"""
    return f"{raw_prefix}/{correlation_id}/{safe_file_name(file_name)}"


def result_key(results_prefix: str, correlation_id: str) -> str:
    """Build result record key: {results_prefix}/{correlation_id}.json"""
    return f"{results_prefix}/{correlation_id}.json"


def correlation_id_from_raw_key(raw_prefix: str, key: str) -> str | None:
    """Recover the correlation id from a raw object key, or None if the key is foreign."""
    parts = key.split("/")
    if len(parts) != 3 or parts[0] != raw_prefix or parts[2] in ("", ".", ".."):
        return None
    if not is_correlation_id(parts[1]):
        return None
    return parts[1]


@dataclass(frozen=True)
class Submission:
    """One file moving through authorize -> upload -> analyze -> resolve."""

    correlation_id: str
    raw_object_key: str
    file_name: str
    declared_content_type: str
