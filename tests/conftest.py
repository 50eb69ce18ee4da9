"""Shared fakes for the export workflow tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from save_exporter.core.sorting import sort_records
from save_exporter.core.table_reconciler import TableRow
from save_exporter.models.backup_record import BackupEntry, BackupRecord
from save_exporter.models.export_job import ExportResult, ExportSettings


def make_record(
    record_id: str,
    title: str,
    sizes: tuple[int, ...] = (100,),
    localized_title: str = "",
    permanent: bool = False,
) -> BackupRecord:
    emulator, _, game_id = record_id.partition("/")
    backups = [
        BackupEntry(
            zip_path=f"/backups/{record_id}/{i}.zip",
            meta_path=f"/backups/{record_id}/{i}.json",
            created_at=datetime(2024, 1, 10 - i, 12, 0),
            size=size,
            is_permanent=permanent and i == 0,
        )
        for i, size in enumerate(sizes)
    ]
    return BackupRecord(
        id=record_id,
        title=title,
        emulator=emulator,
        game_id=game_id,
        localized_title=localized_title,
        backups=backups,
    )


class FakeBackend:
    """In-memory ExportBackend that records every call."""

    def __init__(self) -> None:
        self.records: list[BackupRecord] = []
        self.settings = ExportSettings(language="en_US")
        self.may_start = True
        self.export_result = ExportResult()
        self.export_error: Exception | None = None
        self.sort_error: Exception | None = None
        self.fetch_error: Exception | None = None

        self.export_calls: list[tuple[tuple[str, ...], int, str]] = []
        self.progress: list[tuple[str, str, str]] = []
        self.status_calls: list[tuple[str, bool]] = []
        self.persisted: dict[str, Any] = {}
        self.sort_calls = 0

    def fetch_exportable_records(self) -> list[BackupRecord]:
        if self.fetch_error:
            raise self.fetch_error
        return list(self.records)

    def get_settings(self) -> ExportSettings:
        return self.settings

    def sort_records(self, items) -> list[BackupRecord]:
        self.sort_calls += 1
        if self.sort_error:
            raise self.sort_error
        return sort_records(items)

    def persist_setting(self, key: str, value: Any) -> None:
        self.persisted[key] = value

    def start_export_operation(self, selected_ids, count, destination_path) -> ExportResult:
        self.export_calls.append((tuple(selected_ids), count, destination_path))
        if self.export_error:
            raise self.export_error
        return self.export_result

    def check_operation_may_start(self, operation: str) -> bool:
        return self.may_start

    def report_progress(self, operation_id: str, title: str, phase: str) -> None:
        self.progress.append((operation_id, title, phase))

    def set_global_status(self, flag: str, value: bool) -> None:
        self.status_calls.append((flag, value))

    def translate(self, key: str, **params: Any) -> str:
        if not params:
            return key
        return key + ":" + ",".join(f"{k}={v}" for k, v in sorted(params.items()))


class FakeTableView:
    """TableView keeping rows in a list; selection lives on the rows."""

    def __init__(self) -> None:
        self.rows: list[TableRow] = []
        self.clear_count = 0

    def selected_ids(self) -> list[str]:
        return [row.record_id for row in self.rows if row.selected]

    def clear_rows(self) -> None:
        self.clear_count += 1
        self.rows = []

    def append_row(self, row: TableRow) -> None:
        self.rows.append(row)

    def check(self, *record_ids: str) -> None:
        for row in self.rows:
            if row.record_id in record_ids:
                row.selected = True

    @property
    def ids(self) -> list[str]:
        return [row.record_id for row in self.rows]


class FakeSummaryView:
    def __init__(self) -> None:
        self.shown: list = []
        self.details: list[tuple[str, list]] = []
        self.restored = 0

    def show_summary(self, summary) -> None:
        self.shown.append(summary)

    def show_error_details(self, title, errors) -> None:
        self.details.append((title, list(errors)))

    def restore_content(self) -> None:
        self.restored += 1


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def table_view() -> FakeTableView:
    return FakeTableView()


@pytest.fixture
def summary_view() -> FakeSummaryView:
    return FakeSummaryView()
