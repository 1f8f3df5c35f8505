from __future__ import annotations

from pathlib import Path

import pytest

from hamalert_cli.config import StorageConfig, get_storage_config


def test_data_dir_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HAMALERT_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.data_dir == tmp_path / "data"
    assert config.profiles_dir == (tmp_path / "data" / "profiles").resolve()
    assert config.backups_dir == (tmp_path / "data" / "backups").resolve()
    assert config.permanent_path.name == "permanent.json"
    assert config.current_profile_path.name == "current-profile"


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr("os.name", "posix")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    assert get_storage_config().data_dir == (tmp_path / "hamalert").resolve()


def test_layout_is_relative_to_resolved_data_dir(tmp_path: Path) -> None:
    config = StorageConfig(data_dir=tmp_path / "nested" / ".." / "data")

    assert config.profiles_dir == (tmp_path / "data" / "profiles").resolve()
    assert config.current_profile_path.parent == (tmp_path / "data").resolve()
    assert config.http_cache_path == (tmp_path / "data" / "http_cache.db").resolve()
    assert not (tmp_path / "data").exists()
