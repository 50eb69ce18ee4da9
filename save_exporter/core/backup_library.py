"""Backup library — reads the versioned ZIP backup tree and its sidecar JSON metadata."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from save_exporter.models.backup_record import BackupEntry, BackupRecord

if TYPE_CHECKING:
    from save_exporter.config import Config

# Backup ZIPs are named after their creation time
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class BackupQueryProtocol(Protocol):
    """Read-only backup query interface used by the exporter."""

    @property
    def backup_root(self) -> Path | None: ...

    def list_records(self) -> list[BackupRecord]: ...

    def get_record(self, record_id: str) -> BackupRecord | None: ...


class BackupLibrary:
    """
    Backup tree reader.  Also implements BackupQueryProtocol.

    Directory structure:
      {backup_root}/{emulator}/{game_id}/
        ├── {timestamp}.zip
        └── {timestamp}.json
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    @property
    def backup_root(self) -> Path | None:
        root = self._config.backup_path
        if root is None:
            root = self._config.data_dir / "backups"
        return root

    def game_dir(self, record_id: str) -> Path | None:
        root = self.backup_root
        if root is None:
            return None
        emulator, _, game_id = record_id.partition("/")
        return root / emulator / game_id

    def list_records(self) -> list[BackupRecord]:
        """List every game that has at least one backup."""
        root = self.backup_root
        if root is None or not root.is_dir():
            return []

        records: list[BackupRecord] = []
        for emu_dir in sorted(root.iterdir()):
            if not emu_dir.is_dir():
                continue
            for game_dir in sorted(emu_dir.iterdir()):
                if not game_dir.is_dir():
                    continue
                record = self._read_game_dir(emu_dir.name, game_dir)
                if record is not None:
                    records.append(record)

        logger.debug(f"Found {len(records)} game(s) with backups under {root}")
        return records

    def get_record(self, record_id: str) -> BackupRecord | None:
        game_dir = self.game_dir(record_id)
        if game_dir is None or not game_dir.is_dir():
            return None
        return self._read_game_dir(game_dir.parent.name, game_dir)

    def _read_game_dir(self, emulator: str, game_dir: Path) -> BackupRecord | None:
        """Build a record from one game's backups, newest first."""
        record = BackupRecord(
            id=f"{emulator}/{game_dir.name}",
            title="",
            emulator=emulator,
            game_id=game_dir.name,
        )
        for meta_file in sorted(game_dir.glob("*.json"), reverse=True):
            zip_file = meta_file.with_suffix(".zip")
            if not zip_file.exists():
                continue
            try:
                with open(meta_file, encoding="utf-8") as f:
                    meta = json.load(f)
                entry = BackupEntry(
                    zip_path=str(zip_file),
                    meta_path=str(meta_file),
                    created_at=self._parse_created_at(zip_file),
                    size=zip_file.stat().st_size,
                    is_permanent=bool(meta.get("is_permanent", False)),
                    label=meta.get("label", ""),
                )
            except (json.JSONDecodeError, OSError, AttributeError) as e:
                logger.warning(f"Skipping malformed backup metadata: {meta_file}: {e}")
                continue

            # Newest sidecar wins for the display names
            if not record.title:
                record.title = meta.get("game_name", "")
                record.localized_title = meta.get("game_name_zh", "")
            record.backups.append(entry)

        if not record.backups:
            return None
        return record

    @staticmethod
    def _parse_created_at(zip_file: Path) -> datetime:
        try:
            return datetime.strptime(zip_file.stem, TIMESTAMP_FORMAT)
        except ValueError:
            return datetime.fromtimestamp(zip_file.stat().st_mtime)

    def set_permanent(self, entry: BackupEntry, value: bool = True, label: str = "") -> None:
        """Mark a backup as permanent (exempt from rotation)."""
        meta_path = Path(entry.meta_path)
        if not meta_path.exists():
            return
        try:
            with open(meta_path, encoding="utf-8") as f:
                meta = json.load(f)
            meta["is_permanent"] = value
            meta["label"] = label
            with open(meta_path, "w", encoding="utf-8") as f:
                json.dump(meta, f, ensure_ascii=False, indent=2)
            entry.is_permanent = value
            entry.label = label
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to update backup metadata: {e}")
