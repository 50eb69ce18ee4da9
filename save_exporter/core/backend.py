"""Export backend — the service boundary the export table and workflow talk to."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Literal, Protocol

from loguru import logger

from save_exporter.core.sorting import SortItem, sort_records
from save_exporter.i18n import t
from save_exporter.models.export_job import ExportResult, ExportSettings

if TYPE_CHECKING:
    from save_exporter.config import Config
    from save_exporter.core.backup_library import BackupLibrary
    from save_exporter.core.exporter import BackupExporter
    from save_exporter.core.operation_status import OperationStatus
    from save_exporter.models.backup_record import BackupRecord

ProgressPhase = Literal["start", "end"]
ProgressListener = Callable[[str, str, str], None]
TableUpdateListener = Callable[[], None]


class ExportBackend(Protocol):
    """Services consumed by the table reconciler and export orchestrator."""

    def fetch_exportable_records(self) -> list[BackupRecord]: ...

    def get_settings(self) -> ExportSettings: ...

    def sort_records(self, items: Iterable[SortItem]) -> list[BackupRecord]: ...

    def persist_setting(self, key: str, value: Any) -> None: ...

    def start_export_operation(
        self, selected_ids: tuple[str, ...], count: int, destination_path: str
    ) -> ExportResult: ...

    def check_operation_may_start(self, operation: str) -> bool: ...

    def report_progress(self, operation_id: str, title: str, phase: ProgressPhase) -> None: ...

    def set_global_status(self, flag: str, value: bool) -> None: ...

    def translate(self, key: str, **params: Any) -> str: ...


class LocalExportBackend:
    """ExportBackend over the local backup library, config and operation flags."""

    def __init__(
        self,
        config: Config,
        library: BackupLibrary,
        exporter: BackupExporter,
        status: OperationStatus,
    ) -> None:
        self._config = config
        self._library = library
        self._exporter = exporter
        self._status = status
        self._progress_listeners: list[ProgressListener] = []
        self._table_listeners: list[TableUpdateListener] = []

    # ── Data ──

    def fetch_exportable_records(self) -> list[BackupRecord]:
        return self._library.list_records()

    def get_settings(self) -> ExportSettings:
        return ExportSettings(
            language=self._config.language,
            pinned_games=tuple(self._config.pinned_games),
            export_count=self._config.export_count,
            export_path=self._config.export_path,
        )

    def sort_records(self, items: Iterable[SortItem]) -> list[BackupRecord]:
        return sort_records(items)

    def persist_setting(self, key: str, value: Any) -> None:
        """Write a setting; callers do not wait on or inspect the result."""
        self._config.set(key, value)

    # ── Export ──

    def start_export_operation(
        self, selected_ids: tuple[str, ...], count: int, destination_path: str
    ) -> ExportResult:
        return self._exporter.export(selected_ids, count, destination_path)

    def check_operation_may_start(self, operation: str) -> bool:
        return self._status.may_start(operation)

    def set_global_status(self, flag: str, value: bool) -> None:
        self._status.set_status(flag, value)

    # ── Notifications ──

    def subscribe_progress(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def subscribe_table_updates(self, listener: TableUpdateListener) -> None:
        self._table_listeners.append(listener)

    def report_progress(self, operation_id: str, title: str, phase: ProgressPhase) -> None:
        if phase not in ("start", "end"):
            raise ValueError(f"Unknown progress phase: {phase}")
        logger.debug(f"Progress {operation_id}: {phase}")
        for listener in list(self._progress_listeners):
            listener(operation_id, title, phase)

    def notify_table_update(self) -> None:
        """Push 'update-export-table' to every subscribed view."""
        for listener in list(self._table_listeners):
            listener()

    def translate(self, key: str, **params: Any) -> str:
        return t(key, **params)

    # ── Row actions ──

    def set_pinned(self, record_id: str, pinned: bool) -> None:
        pinned_games = [game_id for game_id in self._config.pinned_games if game_id != record_id]
        if pinned:
            pinned_games.append(record_id)
        self.persist_setting("pinned_games", pinned_games)
        self.notify_table_update()

    def set_latest_permanent(self, record_id: str, value: bool) -> None:
        """Mark or unmark the newest backup of a game as permanent."""
        record = self._library.get_record(record_id)
        if record is None or not record.backups:
            logger.warning(f"No backups to update for {record_id}")
            return
        self._library.set_permanent(record.backups[0], value)
        self.notify_table_update()

    def backup_folder(self, record_id: str) -> Path | None:
        return self._library.game_dir(record_id)
