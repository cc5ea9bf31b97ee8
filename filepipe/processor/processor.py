from filepipe.analysis.exceptions import AnalysisError
from filepipe.analysis.factory import AnalyzerFactory
from filepipe.config.settings import Settings
from filepipe.logging.logger import Log
from filepipe.processor.pipeline import PipelineContext, PipelineStep
from filepipe.processor.steps import (
    AnalyzeStep,
    ClassifyStep,
    LoadObjectStep,
    WriteErrorResultStep,
    WriteResultStep,
)
from filepipe.results.models import ResultRecord
from filepipe.results.repository import ResultRepository
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import ObjectNotFoundError

INTERNAL_ERROR_MESSAGE = "Internal error while analyzing file"


class Processor:
    """Runs the analysis pipeline for one raw object and records its outcome.

    Pipeline: load -> classify -> analyze -> write result.
    Any failure runs the failed step instead, which writes an error record.
    A missing raw object writes nothing, since no upload has completed.
    Analysis errors keep their message; anything else is reported generically.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, raw_object_key: str, correlation_id: str) -> ResultRecord | None:
        """Analyze one raw object.

        Returns:
            The record that was written, or None if the raw object is missing
            or not even an error record could be stored.
        """
        Log.info(f"Processing {raw_object_key} for submission {correlation_id}")
        context = PipelineContext(raw_object_key=raw_object_key, correlation_id=correlation_id)
        try:
            for step in self._steps:
                context = step.run(context)
            return context.record
        except ObjectNotFoundError:
            Log.warning(f"Raw object {raw_object_key} does not exist, no result written")
            return None
        except AnalysisError as exc:
            context.error_message = str(exc)
        except Exception:
            Log.exception(f"Unexpected failure analyzing submission {correlation_id}")
            context.error_message = INTERNAL_ERROR_MESSAGE
        return self._record_failure(context)

    def _record_failure(self, context: PipelineContext) -> ResultRecord | None:
        try:
            return self._failed_step.run(context).record
        except Exception:
            Log.exception(
                f"Could not write error record for submission {context.correlation_id}"
            )
            return None


def build_processor(settings: Settings, store: BaseObjectStore) -> Processor:
    """Build a Processor with all required steps."""
    result_repo = ResultRepository(store, settings.results_prefix)
    steps: list[PipelineStep] = [
        LoadObjectStep(store, settings.max_object_bytes),
        ClassifyStep(),
        AnalyzeStep(AnalyzerFactory.from_settings(settings)),
        WriteResultStep(result_repo),
    ]
    return Processor(steps=steps, failed_step=WriteErrorResultStep(result_repo))
