from filepipe.analysis.base import BaseAnalyzer
from filepipe.results.models import FileType, ResultRecord


class CsvAnalyzer(BaseAnalyzer):
    """Counts header columns and data rows of a delimited text file.

    The first non-empty line is the header. Every later non-empty line is a
    data row, whatever its field count. Quoting is not interpreted.
    """

    file_type = FileType.CSV

    def __init__(self, delimiter: str = ",") -> None:
        if not delimiter:
            raise ValueError("CSV delimiter must not be empty")
        self._delimiter = delimiter

    def analyze(self, file_id: str, body: bytes) -> ResultRecord:
        lines = [line for line in self._lines(self._decode(body)) if line.strip()]
        if not lines:
            return ResultRecord.csv(file_id, columns=[], row_count=0)
        columns = [field.strip() for field in lines[0].split(self._delimiter)]
        return ResultRecord.csv(file_id, columns=columns, row_count=len(lines) - 1)
