"""Translates object store notifications into worker invocations."""

from typing import Any
from urllib.parse import unquote_plus

from filepipe.logging.logger import Log
from filepipe.results.models import ResultRecord
from filepipe.worker.worker import AnalysisWorker


def extract_object_keys(event: dict[str, Any]) -> list[str]:
    """Collect raw object keys from a notification.

    Accepts S3-style ``{"Records": [{"s3": {"object": {"key": ...}}}]}``
    events, whose keys are URL-encoded, and plain ``{"rawObjectKey": ...}``
    events.
    """
    if "rawObjectKey" in event:
        key = event["rawObjectKey"]
        return [key] if isinstance(key, str) and key else []

    keys: list[str] = []
    for record in event.get("Records") or []:
        try:
            key = record["s3"]["object"]["key"]
        except (KeyError, TypeError):
            Log.warning(f"Skipping malformed event record: {record!r}")
            continue
        if isinstance(key, str) and key:
            keys.append(unquote_plus(key))
    return keys


def handle_event(worker: AnalysisWorker, event: dict[str, Any]) -> list[ResultRecord]:
    """Run the worker for every object in the event. Never raises."""
    keys = extract_object_keys(event)
    if not keys:
        Log.warning("Event contained no object keys")
    records: list[ResultRecord] = []
    for key in keys:
        record = worker.handle(key)
        if record is not None:
            records.append(record)
    return records
