"""Export dialog — backup count and destination folder for an export."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtWidgets import QHBoxLayout, QWidget
from qfluentwidgets import (
    BodyLabel,
    CaptionLabel,
    LineEdit,
    MessageBoxBase,
    PushButton,
    SpinBox,
    SubtitleLabel,
)
from qfluentwidgets import FluentIcon as FIF

from save_exporter.i18n import t

if TYPE_CHECKING:
    from save_exporter.core.export_orchestrator import ExportOrchestrator
    from save_exporter.models.export_job import ExportJob, ExportSettings


class ExportDialog(MessageBoxBase):
    """Modal that collects the export count and destination.

    The dialog stays open until the orchestrator accepts the input.
    """

    def __init__(
        self,
        orchestrator: ExportOrchestrator,
        defaults: ExportSettings,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._orchestrator = orchestrator
        self.job: ExportJob | None = None

        self.viewLayout.addWidget(SubtitleLabel(t("export_dialog.title"), self))

        # Count
        self.viewLayout.addWidget(BodyLabel(t("export_dialog.count"), self))
        self._count = SpinBox(self)
        self._count.setRange(1, 999)
        self._count.setValue(max(defaults.export_count, 1))
        self.viewLayout.addWidget(self._count)
        self.viewLayout.addWidget(CaptionLabel(t("export_dialog.count_hint"), self))

        # Destination
        self.viewLayout.addWidget(BodyLabel(t("export_dialog.path"), self))
        path_row = QHBoxLayout()
        self._path = LineEdit(self)
        self._path.setPlaceholderText(t("export_dialog.path_placeholder"))
        self._path.setText(defaults.export_path)
        self._path.setClearButtonEnabled(True)
        path_row.addWidget(self._path, 1)

        browse_btn = PushButton(FIF.FOLDER, t("export_dialog.browse"), self)
        browse_btn.clicked.connect(self._on_browse)
        path_row.addWidget(browse_btn)
        self.viewLayout.addLayout(path_row)

        self.yesButton.setText(t("export_dialog.confirm"))
        self.cancelButton.setText(t("export_dialog.cancel"))
        self.widget.setMinimumWidth(460)

    def _on_browse(self) -> None:
        path = self._orchestrator.select_destination()
        if path:
            self._path.setText(path)

    def validate(self) -> bool:
        self.job = self._orchestrator.confirm(self._count.text(), self._path.text())
        return self.job is not None
