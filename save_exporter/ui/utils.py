"""UI utility functions — shared helpers for the UI layer."""

from __future__ import annotations

from PySide6.QtWidgets import QWidget
from qfluentwidgets import InfoBar, InfoBarPosition, MessageBox

from save_exporter.i18n import t


def show_error(parent: QWidget, title: str, content: str = "") -> None:
    """Show an error InfoBar."""
    InfoBar.error(
        title=title,
        content=content,
        orient=1,
        isClosable=True,
        position=InfoBarPosition.TOP_RIGHT,
        duration=5000,
        parent=parent,
    )


def show_warning(parent: QWidget, title: str, content: str = "") -> None:
    """Show a warning InfoBar."""
    InfoBar.warning(
        title=title,
        content=content,
        orient=1,
        isClosable=True,
        position=InfoBarPosition.TOP_RIGHT,
        duration=4000,
        parent=parent,
    )


def show_modal(parent: QWidget, title: str, content: str) -> None:
    """Show a blocking message box with a single close button."""
    box = MessageBox(title, content, parent.window())
    box.yesButton.setText(t("summary.done"))
    box.cancelButton.hide()
    box.exec()
