from pathlib import PurePosixPath

from filepipe.analysis.classifier import classify
from filepipe.analysis.factory import AnalyzerFactory
from filepipe.logging.logger import Log
from filepipe.processor.pipeline import PipelineContext, PipelineStep
from filepipe.results.models import ResultRecord
from filepipe.results.repository import ResultRepository
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import ObjectTooLargeError


class LoadObjectStep(PipelineStep):
    def __init__(self, store: BaseObjectStore, max_object_bytes: int) -> None:
        self._store = store
        self._max_object_bytes = max_object_bytes

    def run(self, context: PipelineContext) -> PipelineContext:
        stored = self._store.get(context.raw_object_key)
        if len(stored.body) > self._max_object_bytes:
            raise ObjectTooLargeError(
                f"Object {context.raw_object_key} is {len(stored.body)} bytes, "
                f"limit is {self._max_object_bytes}"
            )
        context.stored_object = stored
        Log.info(f"Loaded {len(stored.body)} bytes for submission {context.correlation_id}")
        return context


class ClassifyStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.stored_object is None:
            raise ValueError("PipelineContext.stored_object must be set before classification")
        file_name = PurePosixPath(context.raw_object_key).name
        context.file_type = classify(file_name, context.stored_object.content_type)
        Log.info(
            f"Classified submission {context.correlation_id} as {context.file_type.value}"
        )
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzers: AnalyzerFactory) -> None:
        self._analyzers = analyzers

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.stored_object is None or context.file_type is None:
            raise ValueError(
                "PipelineContext.stored_object and file_type must be set before analysis"
            )
        analyzer = self._analyzers.get(context.file_type)
        context.record = analyzer.analyze(context.correlation_id, context.stored_object.body)
        return context


class WriteResultStep(PipelineStep):
    def __init__(self, result_repo: ResultRepository) -> None:
        self._result_repo = result_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.record is None:
            raise ValueError("PipelineContext.record must be set before persist")
        self._result_repo.save(context.record)
        Log.info(
            f"Submission {context.correlation_id} processed: {context.record.to_payload()}"
        )
        return context


class WriteErrorResultStep(PipelineStep):
    def __init__(self, result_repo: ResultRepository) -> None:
        self._result_repo = result_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        context.record = ResultRecord.failed(
            context.correlation_id,
            context.error_message,
            file_type=context.file_type,
        )
        self._result_repo.save(context.record)
        Log.error(f"Submission {context.correlation_id} failed: {context.error_message}")
        return context
