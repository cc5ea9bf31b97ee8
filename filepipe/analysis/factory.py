from filepipe.analysis.base import BaseAnalyzer
from filepipe.analysis.csv_analyzer import CsvAnalyzer
from filepipe.analysis.jsonl_analyzer import JsonlAnalyzer
from filepipe.config.settings import Settings
from filepipe.results.models import FileType


class AnalyzerFactory:
    """Holds one analyzer per supported file type."""

    def __init__(self, analyzers: dict[FileType, BaseAnalyzer]) -> None:
        self._analyzers = analyzers

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalyzerFactory":
        return cls(
            {
                FileType.CSV: CsvAnalyzer(delimiter=settings.csv_delimiter),
                FileType.JSONL: JsonlAnalyzer(),
            }
        )

    def get(self, file_type: FileType) -> BaseAnalyzer:
        analyzer = self._analyzers.get(file_type)
        if analyzer is None:
            raise ValueError(
                f"No analyzer registered for '{file_type.value}'. "
                f"Choose from: {[t.value for t in self._analyzers]}"
            )
        return analyzer
