from abc import ABC, abstractmethod
from dataclasses import dataclass

from filepipe.results.models import FileType, ResultRecord
from filepipe.storage.models import StoredObject


@dataclass(slots=True)
class PipelineContext:
    raw_object_key: str
    correlation_id: str
    stored_object: StoredObject | None = None
    file_type: FileType | None = None
    record: ResultRecord | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
