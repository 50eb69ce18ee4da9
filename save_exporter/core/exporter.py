"""Backup exporter — copy the newest backups of selected games to a destination folder."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from save_exporter.models.export_job import ExportErrorDetail, ExportResult
from save_exporter.utils import sanitize_filename

if TYPE_CHECKING:
    from save_exporter.core.backup_library import BackupQueryProtocol
    from save_exporter.models.backup_record import BackupRecord


class ExportFailedError(Exception):
    """The export could not run at all (as opposed to failing for some games)."""


class BackupExporter:
    """
    Copies backup ZIPs and their sidecars out of the library.

    Output layout:
      {destination}/{title} [{game_id}]/
        ├── {timestamp}.zip
        └── {timestamp}.json
    """

    def __init__(self, library: BackupQueryProtocol) -> None:
        self._library = library

    def export(self, record_ids: list[str] | tuple[str, ...], count: int, destination: str | Path) -> ExportResult:
        """Export the newest *count* backups of each record.

        Raises ExportFailedError when the destination is unusable.  Failures
        for individual records are collected in the result instead.
        """
        dest = self._prepare_destination(destination)
        result = ExportResult()

        for record_id in record_ids:
            record = self._library.get_record(record_id)
            if record is None:
                result.errors.append(ExportErrorDetail(record_id, "", "no backups found"))
                continue
            try:
                result.exported_files += self._export_record(record, count, dest)
            except OSError as e:
                logger.warning(f"Export failed for {record.title or record_id}: {e}")
                result.errors.append(ExportErrorDetail(record_id, record.title, str(e)))

        logger.info(
            f"Exported {len(record_ids) - len(result.errors)}/{len(record_ids)} game(s) to {dest}"
        )
        return result

    @staticmethod
    def _prepare_destination(destination: str | Path) -> Path:
        if not str(destination).strip():
            raise ExportFailedError("Export destination is empty")
        dest = Path(destination)
        if dest.exists() and not dest.is_dir():
            raise ExportFailedError(f"Export destination is not a folder: {dest}")
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportFailedError(f"Cannot create export destination {dest}: {e}") from e
        return dest

    @staticmethod
    def _export_record(record: BackupRecord, count: int, dest: Path) -> int:
        folder_name = sanitize_filename(f"{record.title} [{record.game_id}]") or record.game_id
        target_dir = dest / folder_name
        target_dir.mkdir(parents=True, exist_ok=True)

        copied = 0
        for entry in record.backups[:count]:
            shutil.copy2(entry.zip_path, target_dir / Path(entry.zip_path).name)
            shutil.copy2(entry.meta_path, target_dir / Path(entry.meta_path).name)
            copied += 1
        return copied
