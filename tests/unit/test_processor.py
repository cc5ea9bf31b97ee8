from unittest.mock import MagicMock

import pytest

from filepipe.analysis.exceptions import MalformedContentError
from filepipe.analysis.factory import AnalyzerFactory
from filepipe.processor.pipeline import PipelineContext
from filepipe.processor.processor import INTERNAL_ERROR_MESSAGE, Processor
from filepipe.processor.steps import (
    AnalyzeStep,
    ClassifyStep,
    LoadObjectStep,
    WriteErrorResultStep,
    WriteResultStep,
)
from filepipe.results.models import FileType, ResultRecord, ResultStatus
from filepipe.results.repository import ResultRepository
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import ObjectNotFoundError, StorageError
from filepipe.storage.models import StoredObject

CID = "0123456789abcdef0123456789abcdef"
KEY = f"uploads/{CID}/data.csv"


def _make_pipeline(
    key: str = KEY,
    body: bytes = b"a,b,c\n1,2,3\n",
    content_type: str = "text/csv",
    max_object_bytes: int = 1024,
) -> tuple[Processor, MagicMock, MagicMock]:
    store = MagicMock(spec=BaseObjectStore)
    result_repo = MagicMock(spec=ResultRepository)
    store.get.return_value = StoredObject(key=key, body=body, content_type=content_type)

    steps = [
        LoadObjectStep(store, max_object_bytes),
        ClassifyStep(),
        AnalyzeStep(AnalyzerFactory.from_settings(MagicMock(csv_delimiter=","))),
        WriteResultStep(result_repo),
    ]
    processor = Processor(steps=steps, failed_step=WriteErrorResultStep(result_repo))
    return processor, store, result_repo


class TestProcessorPipeline:
    def test_runs_all_steps_and_persists_record(self) -> None:
        processor, store, result_repo = _make_pipeline()

        record = processor.process(KEY, CID)

        store.get.assert_called_once_with(KEY)
        expected = ResultRecord.csv(CID, columns=["a", "b", "c"], row_count=1)
        result_repo.save.assert_called_once_with(expected)
        assert record == expected

    def test_jsonl_object(self) -> None:
        key = f"uploads/{CID}/events.jsonl"
        processor, _store, result_repo = _make_pipeline(
            key=key, body=b'{"a": 1}\n{"a": 2}\n', content_type="application/x-ndjson"
        )

        record = processor.process(key, CID)

        assert record == ResultRecord.jsonl(CID, line_count=2)
        result_repo.save.assert_called_once_with(record)

    def test_repeated_processing_yields_equal_records(self) -> None:
        processor, _store, result_repo = _make_pipeline()

        first = processor.process(KEY, CID)
        second = processor.process(KEY, CID)

        assert first == second
        assert result_repo.save.call_count == 2


class TestRecordedFailures:
    def test_unrecognized_format_writes_error_without_file_type(self) -> None:
        key = f"uploads/{CID}/report.xlsx"
        processor, _store, result_repo = _make_pipeline(
            key=key, content_type="application/octet-stream"
        )

        record = processor.process(key, CID)

        assert record is not None
        assert record.status is ResultStatus.ERROR
        assert record.file_type is None
        assert "xlsx" in (record.error or "")
        result_repo.save.assert_called_once_with(record)

    def test_malformed_content_keeps_message_and_file_type(self) -> None:
        key = f"uploads/{CID}/events.jsonl"
        processor, _store, _repo = _make_pipeline(
            key=key, body=b'{"a": 1}\n{oops\n', content_type="application/x-ndjson"
        )

        record = processor.process(key, CID)

        assert record is not None
        assert record.status is ResultStatus.ERROR
        assert record.file_type is FileType.JSONL
        assert "line 2" in (record.error or "")
        assert record.line_count is None

    def test_oversized_object_gets_generic_error(self) -> None:
        processor, _store, _repo = _make_pipeline(body=b"x" * 2048, max_object_bytes=1024)

        record = processor.process(KEY, CID)

        assert record is not None
        assert record.error == INTERNAL_ERROR_MESSAGE

    def test_read_failure_gets_generic_error(self) -> None:
        processor, store, result_repo = _make_pipeline()
        store.get.side_effect = StorageError("disk on fire")

        record = processor.process(KEY, CID)

        assert record == ResultRecord.failed(CID, INTERNAL_ERROR_MESSAGE)
        result_repo.save.assert_called_once_with(record)

    def test_missing_raw_object_writes_nothing(self) -> None:
        processor, store, result_repo = _make_pipeline()
        store.get.side_effect = ObjectNotFoundError("gone")

        assert processor.process(KEY, CID) is None
        result_repo.save.assert_not_called()

    def test_does_not_raise_when_error_record_cannot_be_written(self) -> None:
        processor, store, result_repo = _make_pipeline()
        store.get.side_effect = StorageError("read failed")
        result_repo.save.side_effect = StorageError("write failed")

        assert processor.process(KEY, CID) is None

    def test_failed_result_write_is_replaced_by_error_record(self) -> None:
        processor, _store, result_repo = _make_pipeline()
        result_repo.save.side_effect = [StorageError("transient"), None]

        record = processor.process(KEY, CID)

        assert record is not None
        assert record.status is ResultStatus.ERROR
        assert record.file_type is FileType.CSV
        assert result_repo.save.call_count == 2


class TestStepPreconditions:
    def test_classify_requires_loaded_object(self) -> None:
        with pytest.raises(ValueError, match="stored_object"):
            ClassifyStep().run(PipelineContext(raw_object_key=KEY, correlation_id=CID))

    def test_write_requires_record(self) -> None:
        step = WriteResultStep(MagicMock(spec=ResultRepository))
        with pytest.raises(ValueError, match="record"):
            step.run(PipelineContext(raw_object_key=KEY, correlation_id=CID))

    def test_error_step_uses_context_message(self) -> None:
        result_repo = MagicMock(spec=ResultRepository)
        context = PipelineContext(
            raw_object_key=KEY,
            correlation_id=CID,
            error_message="Invalid JSON on line 4: Expecting value",
        )

        WriteErrorResultStep(result_repo).run(context)

        assert context.record == ResultRecord.failed(
            CID, "Invalid JSON on line 4: Expecting value"
        )

    def test_analysis_errors_propagate_from_analyze_step(self) -> None:
        analyzers = MagicMock(spec=AnalyzerFactory)
        analyzers.get.return_value.analyze.side_effect = MalformedContentError("bad")
        context = PipelineContext(
            raw_object_key=KEY,
            correlation_id=CID,
            stored_object=StoredObject(key=KEY, body=b"", content_type="text/csv"),
            file_type=FileType.CSV,
        )

        with pytest.raises(MalformedContentError):
            AnalyzeStep(analyzers).run(context)
