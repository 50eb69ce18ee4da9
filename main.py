"""Application entry point — wires services and launches the UI."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from save_exporter.config import Config, get_config
from save_exporter.context import AppContext
from save_exporter.core.backend import LocalExportBackend
from save_exporter.core.backup_library import BackupLibrary
from save_exporter.core.exporter import BackupExporter
from save_exporter.core.operation_status import OperationStatus
from save_exporter.i18n import set_language
from save_exporter.logger import setup_logger
from save_exporter.ui.main_window import MainWindow
from save_exporter.ui.theme import apply_theme


def create_context(config: Config | None = None) -> AppContext:
    """Wire all services and return an AppContext."""
    config = config or get_config()

    # Logger
    setup_logger(config.data_dir / "logs")

    # Core services
    status = OperationStatus()
    library = BackupLibrary(config)
    exporter = BackupExporter(library)
    backend = LocalExportBackend(config, library, exporter, status)

    return AppContext(
        config=config,
        status=status,
        library=library,
        exporter=exporter,
        backend=backend,
    )


def main() -> int:
    """Application entry point."""
    app = QApplication(sys.argv)
    app.setApplicationName("Save Exporter")
    app.setOrganizationName("SaveExporter")

    # Wire services
    ctx = create_context()

    # Initialize i18n and theme from config
    set_language(ctx.config.language)
    apply_theme(ctx.config.theme)

    # Create and show main window
    window = MainWindow(ctx)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
