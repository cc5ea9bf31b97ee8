import json

from filepipe.analysis.base import BaseAnalyzer
from filepipe.analysis.exceptions import MalformedContentError
from filepipe.results.models import FileType, ResultRecord


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not a valid JSON value")


class JsonlAnalyzer(BaseAnalyzer):
    """Counts the lines of a newline-delimited JSON file, checking each parses."""

    file_type = FileType.JSONL

    def analyze(self, file_id: str, body: bytes) -> ResultRecord:
        line_count = 0
        for line_number, line in enumerate(self._lines(self._decode(body)), start=1):
            if not line.strip():
                continue
            try:
                json.loads(line, parse_constant=_reject_constant)
            except json.JSONDecodeError as exc:
                raise MalformedContentError(
                    f"Invalid JSON on line {line_number}: {exc.msg}"
                ) from exc
            except ValueError as exc:
                raise MalformedContentError(
                    f"Invalid JSON on line {line_number}: {exc}"
                ) from exc
            line_count += 1
        return ResultRecord.jsonl(file_id, line_count=line_count)
