from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from filepipe.authorizer.authorizer import UploadAuthorizer
from filepipe.authorizer.exceptions import (
    AuthorizationFailedError,
    InvalidUploadRequestError,
)
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.local_store import LocalObjectStore
from filepipe.submissions.models import correlation_id_from_raw_key, is_correlation_id

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def _make_authorizer(store: BaseObjectStore) -> UploadAuthorizer:
    return UploadAuthorizer(store, raw_prefix="uploads", ttl_seconds=300)


class TestAuthorize:
    def test_capability_key_matches_file_id(self, local_store: LocalObjectStore) -> None:
        authorization = _make_authorizer(local_store).authorize("data.csv", "text/csv", now=NOW)

        assert is_correlation_id(authorization.file_id)
        assert authorization.capability.resource_key == f"uploads/{authorization.file_id}/data.csv"
        assert (
            correlation_id_from_raw_key("uploads", authorization.capability.resource_key)
            == authorization.file_id
        )

    def test_signed_url_carries_the_same_key(
        self, local_store: LocalObjectStore, signer: CapabilitySigner
    ) -> None:
        authorization = _make_authorizer(local_store).authorize("data.csv", "text/csv", now=NOW)
        token = authorization.upload_url.rsplit("/", 1)[1]

        verified = signer.verify(token, "text/csv", now=NOW)

        assert verified.resource_key == authorization.submission.raw_object_key

    def test_capability_expires_after_ttl(self, local_store: LocalObjectStore) -> None:
        authorization = _make_authorizer(local_store).authorize("data.csv", "text/csv", now=NOW)
        assert authorization.capability.expires_at == NOW + timedelta(seconds=300)

    def test_capability_is_bound_to_content_type(self, local_store: LocalObjectStore) -> None:
        authorization = _make_authorizer(local_store).authorize(
            "data.jsonl", "application/x-ndjson", now=NOW
        )
        assert authorization.capability.allowed_content_type == "application/x-ndjson"

    def test_each_call_issues_a_fresh_id(self, local_store: LocalObjectStore) -> None:
        authorizer = _make_authorizer(local_store)
        first = authorizer.authorize("data.csv", "text/csv")
        second = authorizer.authorize("data.csv", "text/csv")
        assert first.file_id != second.file_id

    def test_file_name_is_reduced_to_base_name(self, local_store: LocalObjectStore) -> None:
        authorization = _make_authorizer(local_store).authorize("../../x/data.csv", "text/csv")
        assert authorization.submission.file_name == "data.csv"

    def test_persists_nothing(self, tmp_path: Path, local_store: LocalObjectStore) -> None:
        _make_authorizer(local_store).authorize("data.csv", "text/csv")
        assert not (tmp_path / "store").exists()


class TestValidation:
    @pytest.mark.parametrize("file_name", ["", "   ", "dir/", ".."])
    def test_rejects_bad_file_names(self, local_store: LocalObjectStore, file_name: str) -> None:
        with pytest.raises(InvalidUploadRequestError, match="fileName"):
            _make_authorizer(local_store).authorize(file_name, "text/csv")

    @pytest.mark.parametrize(
        "content_type", ["", "csv", "text/", "/csv", "text/csv/extra", "te xt/csv"]
    )
    def test_rejects_bad_content_types(
        self, local_store: LocalObjectStore, content_type: str
    ) -> None:
        with pytest.raises(InvalidUploadRequestError, match="contentType"):
            _make_authorizer(local_store).authorize("data.csv", content_type)

    @pytest.mark.parametrize(
        "content_type",
        ["text/csv", "application/vnd.ms-excel", "text/csv; charset=utf-8", "application/x-ndjson"],
    )
    def test_accepts_plausible_content_types(
        self, local_store: LocalObjectStore, content_type: str
    ) -> None:
        authorization = _make_authorizer(local_store).authorize("data.csv", content_type)
        assert authorization.capability.allowed_content_type == content_type


class TestStoreFailure:
    def test_raises_authorization_failed(self) -> None:
        store = MagicMock(spec=BaseObjectStore)
        store.presign_put.side_effect = RuntimeError("store unavailable")

        with pytest.raises(AuthorizationFailedError, match="store unavailable"):
            _make_authorizer(store).authorize("data.csv", "text/csv")
