from filepipe.config.settings import Settings
from filepipe.logging.logger import Log
from filepipe.processor.processor import Processor, build_processor
from filepipe.results.models import ResultRecord
from filepipe.storage.base import BaseObjectStore
from filepipe.submissions.models import correlation_id_from_raw_key


class AnalysisWorker:
    """Entry point invoked once per stored raw object.

    Invocations share no state, so concurrent and repeated deliveries for the
    same key converge on the same result record.
    """

    def __init__(self, processor: Processor, raw_prefix: str) -> None:
        self._processor = processor
        self._raw_prefix = raw_prefix

    def handle(self, raw_object_key: str) -> ResultRecord | None:
        """Analyze one raw object. Never raises."""
        correlation_id = correlation_id_from_raw_key(self._raw_prefix, raw_object_key)
        if correlation_id is None:
            Log.warning(f"Ignoring object outside the submissions namespace: {raw_object_key}")
            return None
        return self._processor.process(raw_object_key, correlation_id)


def build_worker(settings: Settings, store: BaseObjectStore) -> AnalysisWorker:
    return AnalysisWorker(build_processor(settings, store), settings.raw_prefix)
