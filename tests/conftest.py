from pathlib import Path

import pytest

from filepipe.config.settings import Settings
from filepipe.storage.capability import CapabilitySigner
from filepipe.storage.local_store import LocalObjectStore

TEST_SECRET = "test-signing-secret"
TEST_BASE_URL = "http://testserver"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing the local backend at a temporary directory."""
    return Settings(
        storage_backend="local",
        storage_root=str(tmp_path / "store"),
        signing_secret=TEST_SECRET,
        public_base_url=TEST_BASE_URL,
        poll_interval_seconds=0.0,
        poll_max_attempts=3,
    )


@pytest.fixture()
def signer() -> CapabilitySigner:
    return CapabilitySigner(TEST_SECRET)


@pytest.fixture()
def local_store(tmp_path: Path, signer: CapabilitySigner) -> LocalObjectStore:
    return LocalObjectStore(tmp_path / "store", signer, TEST_BASE_URL)


@pytest.fixture()
def csv_bytes() -> bytes:
    """Header a,b,c with two data rows."""
    return b"a,b,c\n1,2,3\n4,5,6\n"


@pytest.fixture()
def header_only_csv_bytes() -> bytes:
    return b"a,b,c\n"


@pytest.fixture()
def jsonl_bytes() -> bytes:
    """Three valid JSON lines."""
    return b'{"id": 1}\n{"id": 2}\n[1, 2, 3]\n'


@pytest.fixture()
def invalid_jsonl_bytes() -> bytes:
    """Line 2 is not valid JSON."""
    return b'{"id": 1}\n{"id": \n{"id": 3}\n'
