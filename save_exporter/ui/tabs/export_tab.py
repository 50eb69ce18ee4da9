"""Export tab — pick games from the backup table and export their newest backups."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt, QPoint, QThread, Signal
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QHeaderView,
    QStackedWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)
from qfluentwidgets import (
    Action,
    BodyLabel,
    CardWidget,
    CheckBox,
    HyperlinkButton,
    IndeterminateProgressBar,
    PrimaryPushButton,
    PushButton,
    RoundMenu,
    StrongBodyLabel,
    SubtitleLabel,
    TableWidget,
)
from qfluentwidgets import FluentIcon as FIF

from save_exporter.core.export_orchestrator import ExportOrchestrator, ExportState
from save_exporter.core.export_summary import ExportSummaryPresenter
from save_exporter.core.record_store import BackupRecordStore
from save_exporter.core.selection import SelectionState
from save_exporter.core.table_reconciler import TableReconciler, TableRow
from save_exporter.i18n import t
from save_exporter.ui.dialogs.export_dialog import ExportDialog
from save_exporter.ui.utils import show_error, show_modal, show_warning
from save_exporter.utils import format_size, open_folder

if TYPE_CHECKING:
    from save_exporter.context import AppContext
    from save_exporter.core.backend import ExportBackend
    from save_exporter.core.export_orchestrator import ExportOutcome
    from save_exporter.models.export_job import ExportErrorDetail, ExportJob, ExportSummary

_COL_SELECT, _COL_TITLE, _COL_BACKUPS, _COL_SIZE, _COL_LATEST = range(5)
_ID_ROLE = Qt.ItemDataRole.UserRole


class RefreshWorker(QThread):
    """Background loader for settings + exportable records."""

    loaded = Signal(object, object)  # list[BackupRecord], ExportSettings
    error = Signal(str)

    def __init__(self, backend: ExportBackend, parent=None) -> None:
        super().__init__(parent)
        self._backend = backend

    def run(self) -> None:
        try:
            records = self._backend.fetch_exportable_records()
            settings = self._backend.get_settings()
        except Exception as e:
            self.error.emit(str(e))
            return
        self.loaded.emit(records, settings)


class ExportWorker(QThread):
    """Background worker running one export attempt."""

    finished_outcome = Signal(object)  # ExportOutcome

    def __init__(self, orchestrator: ExportOrchestrator, job: ExportJob, parent=None) -> None:
        super().__init__(parent)
        self._orchestrator = orchestrator
        self._job = job

    def run(self) -> None:
        self.finished_outcome.emit(self._orchestrator.run(self._job))


class ExportTab(QWidget):
    """Export tab — checkable backup table, export dialog and summary card."""

    # Marshal backend notifications onto the UI thread
    table_update_requested = Signal()
    progress_changed = Signal(str, str, str)  # operation id, title, phase

    def __init__(self, ctx: AppContext, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._ctx = ctx
        self._backend = ctx.backend
        self._store = BackupRecordStore()
        self._refresh_worker: RefreshWorker | None = None
        self._refresh_pending = False
        self._export_worker: ExportWorker | None = None
        self._dialog: ExportDialog | None = None

        self._reconciler = TableReconciler(self._backend, self, self._store)
        self._presenter = ExportSummaryPresenter(self._backend, self._store, self.selected_ids, self)
        self._orchestrator = ExportOrchestrator(
            self._backend,
            self,
            self._presenter,
            refresh=lambda: self.refresh(loader=True),
            select_folder=self._choose_folder,
        )
        self._orchestrator.subscribe_state(self._on_export_state)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 16, 0, 0)

        self._stack = QStackedWidget(self)
        self._content = self._build_content()
        self._summary = self._build_summary()
        self._stack.addWidget(self._content)
        self._stack.addWidget(self._summary)
        layout.addWidget(self._stack)

        self.table_update_requested.connect(lambda: self.refresh(loader=True))
        self.progress_changed.connect(self._on_progress)
        self._backend.subscribe_table_updates(self.table_update_requested.emit)
        self._backend.subscribe_progress(self.progress_changed.emit)

        self.refresh(loader=True)

    # ── Layout ──

    def _build_content(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)

        # Toolbar
        toolbar = QHBoxLayout()

        self._select_all = CheckBox(t("export.select_all"), page)
        self._select_all.stateChanged.connect(self._on_select_all)
        toolbar.addWidget(self._select_all)

        self._selected_info = BodyLabel("", page)
        toolbar.addWidget(self._selected_info)

        toolbar.addStretch()

        self._refresh_btn = PushButton(FIF.SYNC, t("export.refresh"), page)
        self._refresh_btn.clicked.connect(lambda: self.refresh(loader=True))
        toolbar.addWidget(self._refresh_btn)

        self._export_btn = PrimaryPushButton(FIF.SHARE, t("main.export_selected"), page)
        self._export_btn.clicked.connect(self._on_export)
        toolbar.addWidget(self._export_btn)

        layout.addLayout(toolbar)

        # Loading / export progress
        self._loading_bar = IndeterminateProgressBar(page)
        self._loading_bar.setVisible(False)
        layout.addWidget(self._loading_bar)

        self._export_bar = IndeterminateProgressBar(page)
        self._export_bar.setVisible(False)
        layout.addWidget(self._export_bar)

        # Table with checkboxes
        self._table = TableWidget(page)
        self._table.setColumnCount(5)
        self._table.setHorizontalHeaderLabels(
            [t("export.col_select"), t("export.col_title"), t("export.col_backups"), t("export.col_size"), t("export.col_latest")]
        )
        self._table.horizontalHeader().setSectionResizeMode(
            _COL_TITLE, QHeaderView.ResizeMode.Stretch
        )
        self._table.setColumnWidth(_COL_SELECT, 50)
        self._table.setEditTriggers(TableWidget.EditTrigger.NoEditTriggers)
        self._table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self._table.customContextMenuRequested.connect(self._on_context_menu)
        self._table.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self._table)

        return page

    def _build_summary(self) -> QWidget:
        card = CardWidget(self)
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)

        layout.addWidget(SubtitleLabel(t("summary.title"), card))

        self._summary_games = StrongBodyLabel("", card)
        self._summary_size = StrongBodyLabel("", card)
        self._summary_path = StrongBodyLabel("", card)
        self._summary_path.setWordWrap(True)
        for key, value_label in (
            ("summary.total_games", self._summary_games),
            ("summary.total_size", self._summary_size),
            ("summary.save_path", self._summary_path),
        ):
            row = QHBoxLayout()
            row.addWidget(BodyLabel(t(key), card))
            row.addStretch()
            row.addWidget(value_label)
            layout.addLayout(row)

        # Failure region
        self._failed_container = QWidget(card)
        failed_row = QHBoxLayout(self._failed_container)
        failed_row.setContentsMargins(0, 0, 0, 0)
        self._failed_label = BodyLabel("", self._failed_container)
        self._failed_label.setTextColor("#c42b1c", "#ff99a4")
        failed_row.addWidget(self._failed_label)
        learn_more = HyperlinkButton("", t("summary.learn_more"), self._failed_container)
        learn_more.clicked.connect(self._presenter.show_errors)
        failed_row.addWidget(learn_more)
        failed_row.addStretch()
        self._failed_container.setVisible(False)
        layout.addWidget(self._failed_container)

        layout.addStretch()

        actions = QHBoxLayout()
        actions.addStretch()
        open_btn = PushButton(FIF.FOLDER, t("summary.open_folder"), card)
        open_btn.clicked.connect(self._on_open_destination)
        actions.addWidget(open_btn)
        self._done_btn = PrimaryPushButton(FIF.ACCEPT, t("summary.done"), card)
        self._done_btn.clicked.connect(self._presenter.dismiss)
        self._done_btn.setVisible(False)
        actions.addWidget(self._done_btn)
        layout.addLayout(actions)

        return card

    # ── Refresh ──

    def refresh(self, loader: bool = False) -> None:
        """Reload records in the background, then rebuild the table."""
        if self._refresh_worker is not None:
            self._refresh_pending = True
            return
        if loader:
            self._loading_bar.setVisible(True)
            self._loading_bar.start()

        self._refresh_worker = RefreshWorker(self._backend, self)
        self._refresh_worker.loaded.connect(self._on_loaded)
        self._refresh_worker.error.connect(self._on_refresh_error)
        self._refresh_worker.finished.connect(self._on_refresh_finished)
        self._refresh_worker.start()

    def _on_loaded(self, records: list, settings: object) -> None:
        try:
            self._table.blockSignals(True)
            try:
                self._reconciler.render(records, settings)
            finally:
                self._table.blockSignals(False)
        except Exception as e:
            self._on_refresh_error(str(e))
            return
        self._sync_select_all()
        self._update_selected_info()

    def _on_refresh_error(self, message: str) -> None:
        # Last good table stays on screen
        show_error(self, t("alert.refresh_failed"), message)

    def _on_refresh_finished(self) -> None:
        self._loading_bar.stop()
        self._loading_bar.setVisible(False)
        self._refresh_worker = None
        if self._refresh_pending:
            self._refresh_pending = False
            self.refresh(loader=True)

    # ── TableView ──

    def selected_ids(self) -> list[str]:
        ids: list[str] = []
        for row in range(self._table.rowCount()):
            item = self._table.item(row, _COL_SELECT)
            if item and item.checkState() == Qt.CheckState.Checked:
                ids.append(item.data(_ID_ROLE))
        return ids

    def clear_rows(self) -> None:
        self._table.setRowCount(0)

    def append_row(self, row: TableRow) -> None:
        index = self._table.rowCount()
        self._table.insertRow(index)

        cb = QTableWidgetItem()
        cb.setData(_ID_ROLE, row.record_id)
        cb.setCheckState(Qt.CheckState.Checked if row.selected else Qt.CheckState.Unchecked)
        self._table.setItem(index, _COL_SELECT, cb)

        title = QTableWidgetItem(row.title)
        if row.pinned:
            title.setIcon(FIF.PIN.icon())
            title.setToolTip(t("export.badge_pinned"))
        self._table.setItem(index, _COL_TITLE, title)

        count = QTableWidgetItem(str(row.backup_count))
        if row.permanent:
            count.setIcon(FIF.HEART.icon())
            count.setToolTip(t("export.badge_permanent"))
        self._table.setItem(index, _COL_BACKUPS, count)

        self._table.setItem(index, _COL_SIZE, QTableWidgetItem(format_size(row.backup_size)))
        self._table.setItem(index, _COL_LATEST, QTableWidgetItem(row.latest_backup))

    def _on_select_all(self, state: int) -> None:
        check = Qt.CheckState.Checked if state else Qt.CheckState.Unchecked
        self._table.blockSignals(True)
        for row in range(self._table.rowCount()):
            item = self._table.item(row, _COL_SELECT)
            if item:
                item.setCheckState(check)
        self._table.blockSignals(False)
        self._update_selected_info()

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        if item.column() == _COL_SELECT:
            self._sync_select_all()
        self._update_selected_info()

    def _sync_select_all(self) -> None:
        items = (self._table.item(row, _COL_SELECT) for row in range(self._table.rowCount()))
        row_ids = [item.data(_ID_ROLE) for item in items if item is not None]
        self._select_all.blockSignals(True)
        self._select_all.setChecked(SelectionState.of(self.selected_ids()).covers(row_ids))
        self._select_all.blockSignals(False)

    def _update_selected_info(self) -> None:
        ids = self.selected_ids()
        self._selected_info.setText(
            t("export.selected_info", count=len(ids), size=format_size(self._store.total_size(ids)))
        )

    # ── Row actions ──

    def _on_context_menu(self, pos: QPoint) -> None:
        row = self._table.rowAt(pos.y())
        item = self._table.item(row, _COL_SELECT) if row >= 0 else None
        if item is None:
            return
        record_id = item.data(_ID_ROLE)
        record = self._store.get(record_id)
        pinned = record_id in self._backend.get_settings().pinned_games

        menu = RoundMenu(parent=self)
        pin_action = Action(
            FIF.UNPIN if pinned else FIF.PIN,
            t("export.menu_unpin") if pinned else t("export.menu_pin"),
        )
        pin_action.triggered.connect(lambda: self._backend.set_pinned(record_id, not pinned))
        menu.addAction(pin_action)

        if record is not None and record.backups:
            permanent = record.backups[0].is_permanent
            keep_action = Action(
                FIF.HEART,
                t("export.menu_unmark_permanent") if permanent else t("export.menu_mark_permanent"),
            )
            keep_action.triggered.connect(
                lambda: self._backend.set_latest_permanent(record_id, not permanent)
            )
            menu.addAction(keep_action)

        folder_action = Action(FIF.FOLDER, t("export.menu_open_folder"))
        folder_action.triggered.connect(lambda: self._open_backup_folder(record_id))
        menu.addAction(folder_action)

        menu.exec(self._table.viewport().mapToGlobal(pos))

    def _open_backup_folder(self, record_id: str) -> None:
        folder = self._backend.backup_folder(record_id)
        if folder is not None and folder.exists():
            open_folder(folder)

    # ── Export workflow ──

    def _choose_folder(self) -> str | None:
        return QFileDialog.getExistingDirectory(self.window(), t("export_dialog.choose_folder")) or None

    def _on_export(self) -> None:
        defaults = self._orchestrator.request_export(self.selected_ids())
        if defaults is None:
            return

        self._dialog = ExportDialog(self._orchestrator, defaults, self.window())
        try:
            accepted = self._dialog.exec()
            job = self._dialog.job
        finally:
            self._dialog = None

        if not accepted or job is None:
            self._orchestrator.cancel()
            return

        self._export_worker = ExportWorker(self._orchestrator, job, self)
        self._export_worker.finished_outcome.connect(self._on_export_finished)
        self._export_worker.start()

    def _on_export_finished(self, outcome: ExportOutcome) -> None:
        self._export_worker = None
        self._orchestrator.complete(outcome)

    def _on_export_state(self, state: ExportState) -> None:
        running = state == ExportState.RUNNING
        self._export_btn.setEnabled(not running)
        self._export_btn.setText(t("main.export_in_progress") if running else t("main.export_selected"))

    def _on_progress(self, operation_id: str, _title: str, phase: str) -> None:
        if operation_id != "export":
            return
        if phase == "start":
            self._export_bar.setVisible(True)
            self._export_bar.start()
        else:
            self._export_bar.stop()
            self._export_bar.setVisible(False)

    # ── ExportNotifier ──

    def warn(self, message: str) -> None:
        show_warning(self._dialog or self, t("alert.warning"), message)

    def error(self, title: str, message: str) -> None:
        show_modal(self, title, message)

    # ── SummaryView ──

    def show_summary(self, summary: ExportSummary) -> None:
        self._summary_games.setText(str(summary.succeeded_count))
        self._summary_size.setText(format_size(summary.total_size))
        self._summary_path.setText(summary.destination_path)
        self._failed_label.setText(summary.failure_message)
        self._failed_container.setVisible(summary.has_failures)
        self._done_btn.setVisible(True)
        self._stack.setCurrentWidget(self._summary)

    def show_error_details(self, title: str, errors: list[ExportErrorDetail]) -> None:
        show_modal(self, title, "\n".join(str(e) for e in errors))

    def restore_content(self) -> None:
        self._stack.setCurrentWidget(self._content)
        self._done_btn.setVisible(False)

    def _on_open_destination(self) -> None:
        summary = self._presenter.summary
        if summary is not None:
            open_folder(summary.destination_path)
