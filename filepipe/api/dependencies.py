"""Shared FastAPI dependencies resolving services built at startup."""

from fastapi import Request

from filepipe.authorizer.authorizer import UploadAuthorizer
from filepipe.config.settings import Settings
from filepipe.resolver.resolver import ResultResolver
from filepipe.storage.base import BaseObjectStore
from filepipe.worker.worker import AnalysisWorker


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> BaseObjectStore:
    return request.app.state.store


def get_authorizer(request: Request) -> UploadAuthorizer:
    return request.app.state.authorizer


def get_resolver(request: Request) -> ResultResolver:
    return request.app.state.resolver


def get_worker(request: Request) -> AnalysisWorker:
    return request.app.state.worker
