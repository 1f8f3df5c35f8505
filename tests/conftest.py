from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from hamalert_cli.config import StorageConfig
from tests.helpers.rules import (
    FakeTriggerSource,
    InMemoryBackupSink,
    InMemoryMarker,
    InMemoryPermanentStore,
    InMemoryProfileStore,
)

_CREDENTIAL_ENV_VARS = ("HAMALERT_USERNAME", "HAMALERT_PASSWORD", "HAMALERT_DATA_DIR")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def storage(tmp_path: Path) -> StorageConfig:
    return StorageConfig(data_dir=tmp_path / "hamalert")


@pytest.fixture
def triggers() -> FakeTriggerSource:
    return FakeTriggerSource()


@pytest.fixture
def profiles() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def permanent() -> InMemoryPermanentStore:
    return InMemoryPermanentStore()


@pytest.fixture
def marker() -> InMemoryMarker:
    return InMemoryMarker()


@pytest.fixture
def backups() -> InMemoryBackupSink:
    return InMemoryBackupSink()
