"""Export table reconciliation — rebuild the table from fresh data, keeping selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from save_exporter.core.selection import SelectionState, SelectionTracker
from save_exporter.core.sorting import SortItem

if TYPE_CHECKING:
    from save_exporter.core.backend import ExportBackend
    from save_exporter.core.record_store import BackupRecordStore
    from save_exporter.models.backup_record import BackupRecord
    from save_exporter.models.export_job import ExportSettings


@dataclass
class TableRow:
    """Everything the view needs to draw one row."""

    record_id: str
    title: str
    backup_count: int
    backup_size: int
    latest_backup: str
    pinned: bool = False
    permanent: bool = False
    selected: bool = False


class TableView(Protocol):
    """Rendering side of the export table."""

    def selected_ids(self) -> list[str]: ...

    def clear_rows(self) -> None: ...

    def append_row(self, row: TableRow) -> None: ...


class TableReconciler:
    """
    Rebuilds the export table in one pass.

    Row order is pinned records first, then the rest, each group in the
    order returned by the backend sort service.  All backend calls happen
    while building the row plan; the view is only touched once the plan is
    complete, so a failed refresh leaves the previous table in place.
    """

    def __init__(self, backend: ExportBackend, view: TableView, store: BackupRecordStore) -> None:
        self._backend = backend
        self._view = view
        self._store = store
        self._tracker = SelectionTracker(view)
        self._selection = SelectionState()

    @property
    def selection(self) -> SelectionState:
        """Selection as reapplied by the last pass."""
        return self._selection

    def refresh(self) -> list[TableRow]:
        """Fetch settings and records, then render them."""
        settings = self._backend.get_settings()
        records = self._backend.fetch_exportable_records()
        return self.render(records, settings)

    def render(self, records: list[BackupRecord], settings: ExportSettings) -> list[TableRow]:
        selection = self._tracker.capture()
        rows = self.build_rows(records, settings, selection)

        # Commit
        self._store.refresh(records)
        self._view.clear_rows()
        for row in rows:
            self._view.append_row(row)
        self._selection = selection.retain(row.record_id for row in rows)

        logger.debug(f"Export table rebuilt: {len(rows)} row(s), {len(self._selection)} selected")
        return rows

    def build_rows(
        self,
        records: list[BackupRecord],
        settings: ExportSettings,
        selection: SelectionState,
    ) -> list[TableRow]:
        pinned_ids = set(settings.pinned_games)
        pinned: list[SortItem] = []
        others: list[SortItem] = []

        for record in records:
            title = record.display_title(settings.language)
            if not title:
                continue
            item = SortItem(record, title)
            if record.is_pinned(pinned_ids):
                pinned.append(item)
            else:
                others.append(item)

        titles = {item.record.id: item.title_to_sort for item in pinned + others}
        rows: list[TableRow] = []
        for group, is_pinned in (
            (self._backend.sort_records(pinned), True),
            (self._backend.sort_records(others), False),
        ):
            for record in group:
                row = TableRow(
                    record_id=record.id,
                    title=titles.get(record.id) or record.display_title(settings.language),
                    backup_count=len(record.backups),
                    backup_size=record.backup_size,
                    latest_backup=record.latest_backup,
                    pinned=is_pinned,
                    permanent=record.has_permanent_backup,
                )
                self._tracker.restore(row, selection)
                rows.append(row)
        return rows
