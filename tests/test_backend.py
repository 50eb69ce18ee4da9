"""Tests for LocalExportBackend wiring."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from save_exporter.config import Config
from save_exporter.core.backend import LocalExportBackend
from save_exporter.core.backup_library import BackupLibrary
from save_exporter.core.exporter import BackupExporter
from save_exporter.core.export_orchestrator import ExportOrchestrator
from save_exporter.core.export_summary import ExportSummaryPresenter
from save_exporter.core.operation_status import OperationStatus
from save_exporter.core.record_store import BackupRecordStore
from save_exporter.i18n import set_language


@pytest.fixture
def config(tmp_path: Path) -> Config:
    config = Config(data_dir=tmp_path / "data")
    config.backup_path = tmp_path / "backups"
    game_dir = tmp_path / "backups" / "switch" / "0100"
    game_dir.mkdir(parents=True)
    (game_dir / "2024-01-01_10-00-00.zip").write_bytes(b"x" * 64)
    (game_dir / "2024-01-01_10-00-00.json").write_text(
        json.dumps({"game_name": "Zelda", "game_name_zh": "塞尔达"}), encoding="utf-8"
    )
    return config


@pytest.fixture
def status() -> OperationStatus:
    return OperationStatus()


@pytest.fixture
def backend(config: Config, status: OperationStatus) -> LocalExportBackend:
    library = BackupLibrary(config)
    return LocalExportBackend(config, library, BackupExporter(library), status)


class TestSettings:
    def test_snapshot(self, backend: LocalExportBackend, config: Config) -> None:
        config.set("export_count", 4)
        config.set("pinned_games", ["switch/0100"])
        settings = backend.get_settings()
        assert settings.export_count == 4
        assert settings.pinned_games == ("switch/0100",)
        assert settings.language == "zh_CN"

    def test_set_pinned_persists_and_notifies(self, backend: LocalExportBackend, config: Config) -> None:
        pushes: list[bool] = []
        backend.subscribe_table_updates(lambda: pushes.append(True))

        backend.set_pinned("switch/0100", True)
        assert config.pinned_games == ["switch/0100"]
        backend.set_pinned("switch/0100", False)
        assert config.pinned_games == []
        assert len(pushes) == 2

    def test_set_latest_permanent(self, backend: LocalExportBackend) -> None:
        backend.set_latest_permanent("switch/0100", True)
        record = backend.fetch_exportable_records()[0]
        assert record.has_permanent_backup


class TestProgress:
    def test_listeners_receive_events(self, backend: LocalExportBackend) -> None:
        events: list[tuple[str, str, str]] = []
        backend.subscribe_progress(lambda *args: events.append(args))
        backend.report_progress("export", "Exporting", "start")
        assert events == [("export", "Exporting", "start")]

    def test_unknown_phase_rejected(self, backend: LocalExportBackend) -> None:
        with pytest.raises(ValueError):
            backend.report_progress("export", "Exporting", "middle")


class TestTranslate:
    def test_translates_with_params(self, backend: LocalExportBackend) -> None:
        set_language("en_US")
        try:
            assert backend.translate("summary.total_export_failed", failed_count=2) == "2 game(s) failed to export"
        finally:
            set_language("zh_CN")

    def test_unknown_key_returned_raw(self, backend: LocalExportBackend) -> None:
        assert backend.translate("no.such.key") == "no.such.key"


class _Notifier:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[tuple[str, str]] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, title: str, message: str) -> None:
        self.errors.append((title, message))


class _SummaryView:
    def __init__(self) -> None:
        self.summaries: list = []

    def show_summary(self, summary) -> None:
        self.summaries.append(summary)

    def show_error_details(self, title, errors) -> None:
        pass

    def restore_content(self) -> None:
        pass


class TestEndToEnd:
    def test_export_through_local_backend(self, backend: LocalExportBackend, status: OperationStatus, tmp_path: Path) -> None:
        store = BackupRecordStore()
        store.refresh(backend.fetch_exportable_records())
        view = _SummaryView()
        presenter = ExportSummaryPresenter(backend, store, lambda: ["switch/0100"], view)
        orchestrator = ExportOrchestrator(backend, _Notifier(), presenter, refresh=lambda: None)

        orchestrator.request_export(["switch/0100", "nes/missing"])
        job = orchestrator.confirm("1", str(tmp_path / "out"))
        summary = orchestrator.export(job)

        assert summary.succeeded_count == 1
        assert summary.failed_count == 1
        assert summary.total_size == 64
        assert (tmp_path / "out" / "Zelda [0100]" / "2024-01-01_10-00-00.zip").exists()
        assert not status.is_set("exporting")

    def test_second_export_rejected_while_first_holds_guard(
        self, backend: LocalExportBackend, status: OperationStatus, tmp_path: Path
    ) -> None:
        store = BackupRecordStore()
        presenter = ExportSummaryPresenter(backend, store, lambda: [], _SummaryView())
        orchestrator = ExportOrchestrator(backend, _Notifier(), presenter, refresh=lambda: None)

        assert status.may_start("export")  # another window is exporting
        orchestrator.request_export(["switch/0100"])
        job = orchestrator.confirm("1", str(tmp_path / "out"))

        assert orchestrator.export(job) is None
        assert not (tmp_path / "out").exists()
        assert status.is_set("exporting")
