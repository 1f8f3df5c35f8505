"""Rule-set repositories backed by JSON files in the data directory."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from hamalert_cli.domain.errors import (
    BackupError,
    BackupNotFoundError,
    ProfileNotFoundError,
    StoredDataParseError,
)
from hamalert_cli.domain.ports import (
    BackupSink,
    CurrentProfileMarker,
    PermanentStore,
    ProfileStore,
)
from hamalert_cli.domain.profiles import validate_profile_name

from .schema import STORED_TRIGGERS_ADAPTER, record_to_json

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from hamalert_cli.domain.model import RuleRecord

log = getLogger(__name__)

PROFILE_SUFFIX = ".json"
BACKUP_PREFIX = "hamalert-backup"


def read_rules_file(path: Path) -> list[RuleRecord]:
    """Parse a profile, permanent or backup file; raise ``StoredDataParseError`` if malformed."""

    content = path.read_bytes()
    try:
        payloads = STORED_TRIGGERS_ADAPTER.validate_json(content)
    except ValidationError as exc:
        raise StoredDataParseError(path, str(exc)) from exc
    return [payload.to_record() for payload in payloads]


def write_rules_file(path: Path, records: Sequence[RuleRecord]) -> Path:
    """Write ``records`` as pretty-printed JSON, replacing ``path`` atomically."""

    path.parent.mkdir(parents=True, exist_ok=True)
    document = json.dumps([record_to_json(record) for record in records], indent=2)
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_text(document + "\n", encoding="utf-8")
    os.replace(tmp_path, path)
    return path


def read_backup(path: Path) -> list[RuleRecord]:
    if not path.is_file():
        raise BackupNotFoundError(path)
    return read_rules_file(path)


def _is_loadable_name(stem: str) -> bool:
    """Only stems that load back under the same name are listed."""

    try:
        loadable = validate_profile_name(stem) == stem
    except ValueError:
        loadable = False
    if not loadable:
        log.warning("Ignoring profile file with unusable name: %r", stem)
    return loadable


@dataclass(slots=True)
class JsonProfileStore:
    directory: Path

    def path_for(self, name: str) -> Path:
        return self.directory / f"{validate_profile_name(name)}{PROFILE_SUFFIX}"

    def load(self, name: str) -> list[RuleRecord]:
        path = self.path_for(name)
        if not path.is_file():
            raise ProfileNotFoundError(name, known=self.list_names())
        return read_rules_file(path)

    def save(self, name: str, records: Sequence[RuleRecord]) -> None:
        path = write_rules_file(self.path_for(name), records)
        log.debug("Wrote %s record(s) to %s", len(records), path)

    def list_names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix == PROFILE_SUFFIX and _is_loadable_name(path.stem)
        )

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        if not path.is_file():
            raise ProfileNotFoundError(name, known=self.list_names())
        path.unlink()

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()


@dataclass(slots=True)
class JsonPermanentStore:
    path: Path

    def load(self) -> list[RuleRecord]:
        if not self.path.is_file():
            return []
        return read_rules_file(self.path)

    def save(self, records: Sequence[RuleRecord]) -> None:
        write_rules_file(self.path, records)


@dataclass(slots=True)
class FileCurrentProfileMarker:
    path: Path

    def load(self) -> str | None:
        if not self.path.is_file():
            return None
        name = self.path.read_text(encoding="utf-8").strip()
        return name or None

    def save(self, name: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(name, encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(slots=True)
class JsonBackupSink:
    """Writes timestamped snapshot files; never overwrites an existing one."""

    directory: Path
    now_provider: Callable[[], datetime] = field(default=_local_now)

    def write_snapshot(self, records: Sequence[RuleRecord], *, label: str = "") -> str:
        try:
            path = self._next_path(label)
            write_rules_file(path, records)
        except OSError as exc:
            raise BackupError(f"Failed to write backup to {self.directory}: {exc}") from exc
        return str(path)

    def _next_path(self, label: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = self.now_provider().strftime("%Y-%m-%d-%H%M%S")
        stem = "-".join(part for part in (BACKUP_PREFIX, label, stamp) if part)
        path = self.directory / f"{stem}.json"
        counter = 1
        while path.exists():
            path = self.directory / f"{stem}-{counter}.json"
            counter += 1
        return path


if TYPE_CHECKING:
    _profile_store_check: ProfileStore = JsonProfileStore(Path())
    _permanent_store_check: PermanentStore = JsonPermanentStore(Path())
    _marker_check: CurrentProfileMarker = FileCurrentProfileMarker(Path())
    _backup_sink_check: BackupSink = JsonBackupSink(Path())
