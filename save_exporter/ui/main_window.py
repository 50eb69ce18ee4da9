"""Main window — FluentWindow with the export and settings pages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QSize
from qfluentwidgets import FluentIcon as FIF
from qfluentwidgets import FluentWindow, NavigationItemPosition

from save_exporter.i18n import t
from save_exporter.ui.pages.settings_page import SettingsPage
from save_exporter.ui.tabs.export_tab import ExportTab

if TYPE_CHECKING:
    from save_exporter.context import AppContext


class MainWindow(FluentWindow):
    """Application main window with sidebar navigation."""

    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self._ctx = ctx

        self.setWindowTitle(t("app.title"))
        self.setMinimumSize(QSize(880, 600))
        self.resize(1100, 720)

        self._init_pages()

    def _init_pages(self) -> None:
        self._export_tab = ExportTab(self._ctx, self)
        self._export_tab.setObjectName("exportTab")
        self.addSubInterface(self._export_tab, FIF.SHARE, t("nav.export"))

        # Settings (bottom position)
        self._settings_page = SettingsPage(self._ctx, self)
        self.addSubInterface(
            self._settings_page,
            FIF.SETTING,
            t("nav.settings"),
            position=NavigationItemPosition.BOTTOM,
        )
