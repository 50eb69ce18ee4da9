"""Tests for the export table reconciliation pass."""

from __future__ import annotations

import pytest

from conftest import FakeBackend, FakeTableView, make_record
from save_exporter.core.record_store import BackupRecordStore
from save_exporter.core.table_reconciler import TableReconciler
from save_exporter.models.export_job import ExportSettings


@pytest.fixture
def store() -> BackupRecordStore:
    return BackupRecordStore()


@pytest.fixture
def reconciler(backend: FakeBackend, table_view: FakeTableView, store: BackupRecordStore) -> TableReconciler:
    return TableReconciler(backend, table_view, store)


class TestRendering:
    def test_rows_skip_empty_titles(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Alpha"), make_record("a/2", ""), make_record("a/3", "Gamma")]
        reconciler.refresh()
        assert table_view.ids == ["a/1", "a/3"]

    def test_pinned_rows_come_first(self, backend, table_view, reconciler) -> None:
        backend.records = [
            make_record("a/1", "Alpha"),
            make_record("a/2", "Zelda"),
            make_record("a/3", "Beta"),
            make_record("a/4", "Yoshi"),
        ]
        backend.settings = ExportSettings(pinned_games=("a/2", "a/4"))
        reconciler.refresh()

        assert table_view.ids == ["a/4", "a/2", "a/1", "a/3"]
        assert [row.pinned for row in table_view.rows] == [True, True, False, False]
        assert backend.sort_calls == 2

    def test_localized_title_for_cjk_language(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Zelda", localized_title="塞尔达"), make_record("a/2", "Mario")]
        backend.settings = ExportSettings(language="zh_CN")
        reconciler.refresh()
        assert {row.title for row in table_view.rows} == {"塞尔达", "Mario"}

    def test_default_title_outside_cjk_language(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Zelda", localized_title="塞尔达")]
        backend.settings = ExportSettings(language="en_US")
        reconciler.refresh()
        assert table_view.rows[0].title == "Zelda"

    def test_localized_only_record_hidden_outside_cjk(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "", localized_title="塞尔达")]
        reconciler.refresh()
        assert table_view.rows == []

    def test_permanent_badge(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Alpha", permanent=True), make_record("a/2", "Beta")]
        reconciler.refresh()
        assert [row.permanent for row in table_view.rows] == [True, False]

    def test_row_details(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Alpha", sizes=(100, 250))]
        reconciler.refresh()
        row = table_view.rows[0]
        assert row.backup_count == 2
        assert row.backup_size == 350
        assert row.latest_backup == "2024-01-10 12:00"

    def test_store_refreshed_with_all_records(self, backend, reconciler, store) -> None:
        backend.records = [make_record("a/1", "Alpha"), make_record("a/2", "")]
        reconciler.refresh()
        assert len(store) == 2


class TestSelection:
    def test_selection_survives_refresh(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Alpha"), make_record("a/2", "Beta"), make_record("a/3", "Gamma")]
        reconciler.refresh()
        table_view.check("a/1", "a/3")

        reconciler.refresh()

        assert sorted(table_view.selected_ids()) == ["a/1", "a/3"]
        assert set(reconciler.selection) == {"a/1", "a/3"}

    def test_selection_dropped_for_removed_records(self, backend, table_view, reconciler) -> None:
        backend.records = [make_record("a/1", "Alpha"), make_record("a/2", "Beta")]
        reconciler.refresh()
        table_view.check("a/1", "a/2")

        backend.records = [make_record("a/2", "Beta")]
        reconciler.refresh()

        assert table_view.selected_ids() == ["a/2"]
        assert set(reconciler.selection) == {"a/2"}

        # A record coming back later is not re-selected
        backend.records = [make_record("a/1", "Alpha"), make_record("a/2", "Beta")]
        reconciler.refresh()
        assert table_view.selected_ids() == ["a/2"]


class TestFailures:
    def test_sort_failure_leaves_table_untouched(self, backend, table_view, reconciler, store) -> None:
        backend.records = [make_record("a/1", "Alpha")]
        reconciler.refresh()
        table_view.check("a/1")
        clears = table_view.clear_count

        backend.records = [make_record("a/2", "Beta")]
        backend.sort_error = RuntimeError("sort service down")
        with pytest.raises(RuntimeError):
            reconciler.refresh()

        assert table_view.clear_count == clears
        assert table_view.ids == ["a/1"]
        assert table_view.selected_ids() == ["a/1"]
        assert "a/1" in store

    def test_fetch_failure_propagates(self, backend, table_view, reconciler) -> None:
        backend.fetch_error = OSError("disk gone")
        with pytest.raises(OSError):
            reconciler.refresh()
        assert table_view.clear_count == 0
