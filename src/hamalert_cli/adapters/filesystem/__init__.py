"""JSON-file implementations of the local storage ports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .repositories import (
    FileCurrentProfileMarker,
    JsonBackupSink,
    JsonPermanentStore,
    JsonProfileStore,
    read_backup,
    read_rules_file,
    write_rules_file,
)

if TYPE_CHECKING:
    from hamalert_cli.config import StorageConfig


def build_profile_store(storage: StorageConfig) -> JsonProfileStore:
    return JsonProfileStore(storage.profiles_dir)


def build_permanent_store(storage: StorageConfig) -> JsonPermanentStore:
    return JsonPermanentStore(storage.permanent_path)


def build_current_profile_marker(storage: StorageConfig) -> FileCurrentProfileMarker:
    return FileCurrentProfileMarker(storage.current_profile_path)


def build_backup_sink(storage: StorageConfig) -> JsonBackupSink:
    return JsonBackupSink(storage.backups_dir)


__all__ = [
    "FileCurrentProfileMarker",
    "JsonBackupSink",
    "JsonPermanentStore",
    "JsonProfileStore",
    "build_backup_sink",
    "build_current_profile_marker",
    "build_permanent_store",
    "build_profile_store",
    "read_backup",
    "read_rules_file",
    "write_rules_file",
]
