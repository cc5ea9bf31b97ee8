"""Command-line entry point.

Usage:
    python -m filepipe.main serve
    python -m filepipe.main analyze uploads/<fileId>/<name>
    python -m filepipe.main event notification.json
    python -m filepipe.main submit ./data.csv --base-url http://localhost:8000
"""

import argparse
import json
import sys
from collections.abc import Callable
from pathlib import Path

from filepipe.config.settings import Settings
from filepipe.database.connection import close_pool, init_pool
from filepipe.logging.logger import Log
from filepipe.results.models import ResultStatus
from filepipe.storage.factory import ObjectStoreFactory
from filepipe.worker.worker import AnalysisWorker, build_worker


def _serve(settings: Settings, _args: argparse.Namespace) -> int:
    import uvicorn

    from filepipe.api.app import create_app

    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)
    return 0


def _with_worker(settings: Settings, run: Callable[[AnalysisWorker], int]) -> int:
    uses_db = settings.storage_backend.lower() == "postgres"
    if uses_db:
        init_pool(settings)
    try:
        store = ObjectStoreFactory.create(settings)
        return run(build_worker(settings, store))
    finally:
        if uses_db:
            close_pool()


def _analyze(settings: Settings, args: argparse.Namespace) -> int:
    def run(worker: AnalysisWorker) -> int:
        record = worker.handle(args.key)
        if record is None:
            return 1
        print(json.dumps(record.to_payload(), indent=2))
        return 0

    return _with_worker(settings, run)


def _event(settings: Settings, args: argparse.Namespace) -> int:
    from filepipe.worker.events import handle_event

    event = json.loads(Path(args.path).read_text(encoding="utf-8"))

    def run(worker: AnalysisWorker) -> int:
        records = handle_event(worker, event)
        print(json.dumps([r.to_payload() for r in records], indent=2))
        return 0

    return _with_worker(settings, run)


def _submit(settings: Settings, args: argparse.Namespace) -> int:
    from filepipe.client.client import FilePipeClient
    from filepipe.client.exceptions import ClientError

    with FilePipeClient(
        args.base_url or settings.public_base_url,
        poll_interval_seconds=settings.poll_interval_seconds,
        max_poll_attempts=settings.poll_max_attempts,
        timeout_seconds=settings.client_timeout_seconds,
    ) as client:
        try:
            record = client.submit(Path(args.path), content_type=args.content_type)
        except ClientError as exc:
            Log.error(str(exc))
            return 1
    print(json.dumps(record.to_payload(), indent=2))
    return 0 if record.status is ResultStatus.PROCESSED else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filepipe", description="Asynchronous file analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API").set_defaults(handler=_serve)

    analyze = sub.add_parser("analyze", help="Analyze one stored raw object")
    analyze.add_argument("key", help="Raw object key, e.g. uploads/<fileId>/<name>")
    analyze.set_defaults(handler=_analyze)

    event = sub.add_parser("event", help="Process an object store notification from a JSON file")
    event.add_argument("path")
    event.set_defaults(handler=_event)

    submit = sub.add_parser("submit", help="Upload a file and wait for its result")
    submit.add_argument("path")
    submit.add_argument("--base-url", default=None)
    submit.add_argument("--content-type", default=None)
    submit.set_defaults(handler=_submit)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> dispatch command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    return args.handler(settings, args)


if __name__ == "__main__":
    sys.exit(main())
