"""Settings page — language and backup folder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtWidgets import QVBoxLayout, QWidget, QFileDialog
from qfluentwidgets import (
    ScrollArea,
    SettingCardGroup,
    PushSettingCard,
    ComboBox as FluentComboBox,
)
from qfluentwidgets import FluentIcon as FIF

from save_exporter.i18n import t, set_language, supported_languages, current_language

if TYPE_CHECKING:
    from save_exporter.context import AppContext

_LANG_LABELS = {"zh_CN": "简体中文", "en_US": "English", "ja_JP": "日本語"}


class SettingsPage(ScrollArea):
    """Application settings page."""

    def __init__(self, ctx: AppContext, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._ctx = ctx
        self.setObjectName("settingsPage")
        self.setWidgetResizable(True)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        # ── Language settings ──
        lang_group = SettingCardGroup(t("settings.language_group"), self)
        self._lang_card = PushSettingCard(
            "",
            FIF.LANGUAGE,
            t("settings.language"),
            t("settings.language_hint"),
            lang_group,
        )
        self._lang_card.button.hide()

        self._lang_combo = FluentComboBox(self)
        for lang in supported_languages():
            self._lang_combo.addItem(_LANG_LABELS.get(lang, lang), userData=lang)
        cur = current_language()
        for i in range(self._lang_combo.count()):
            if self._lang_combo.itemData(i) == cur:
                self._lang_combo.setCurrentIndex(i)
                break
        self._lang_combo.currentIndexChanged.connect(self._on_language_changed)
        self._lang_card.hBoxLayout.insertWidget(2, self._lang_combo)

        lang_group.addSettingCard(self._lang_card)
        layout.addWidget(lang_group)

        # ── Backup settings ──
        backup_group = SettingCardGroup(t("settings.backup_group"), self)
        self._backup_path_card = PushSettingCard(
            t("settings.browse"),
            FIF.FOLDER,
            t("settings.backup_dir"),
            str(ctx.config.backup_path or t("settings.not_set")),
            backup_group,
        )
        self._backup_path_card.clicked.connect(self._on_browse_backup)
        backup_group.addSettingCard(self._backup_path_card)
        layout.addWidget(backup_group)

        layout.addStretch(1)
        self.setWidget(container)

    def _on_browse_backup(self) -> None:
        path = QFileDialog.getExistingDirectory(self, t("settings.choose_backup_dir"))
        if path:
            self._ctx.config.set("backup_path", path)
            self._backup_path_card.setContent(path)
            # Backups now come from a different folder
            self._ctx.backend.notify_table_update()

    def _on_language_changed(self, index: int) -> None:
        lang = self._lang_combo.itemData(index)
        if lang and lang != current_language():
            set_language(lang)
            self._ctx.config.language = lang
            # Titles re-resolve against the new language
            self._ctx.backend.notify_table_update()
