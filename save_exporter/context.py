"""Application context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from save_exporter.config import Config
    from save_exporter.core.backend import LocalExportBackend
    from save_exporter.core.backup_library import BackupLibrary
    from save_exporter.core.exporter import BackupExporter
    from save_exporter.core.operation_status import OperationStatus


@dataclass
class AppContext:
    """
    Central service container.

    All pages/tabs receive this at construction time.  UI code talks to
    ``backend``; the other services are exposed for wiring and tests.
    """

    config: Config
    status: OperationStatus
    library: BackupLibrary
    exporter: BackupExporter
    backend: LocalExportBackend
