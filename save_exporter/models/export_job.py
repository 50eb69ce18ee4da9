"""Export workflow models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExportSettings:
    """Snapshot of the settings the export table and dialog read."""

    language: str = "zh_CN"
    pinned_games: tuple[str, ...] = ()
    export_count: int = 1
    export_path: str = ""


@dataclass(frozen=True)
class ExportJob:
    """A confirmed export request, consumed once by the orchestrator."""

    selected_ids: tuple[str, ...]
    count: int
    destination_path: str

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"Export count must be positive, got {self.count}")
        if not self.destination_path:
            raise ValueError("Export destination path is empty")


@dataclass
class ExportErrorDetail:
    """Why one record could not be exported."""

    record_id: str
    title: str
    message: str

    def __str__(self) -> str:
        return f"{self.title or self.record_id}: {self.message}"


@dataclass
class ExportResult:
    """Value returned by the backend export operation."""

    errors: list[ExportErrorDetail] = field(default_factory=list)
    exported_files: int = 0


@dataclass
class ExportSummary:
    """What the summary view shows after an export."""

    succeeded_count: int
    failed_count: int
    destination_path: str
    total_size: int = 0
    errors: list[ExportErrorDetail] = field(default_factory=list)
    failure_message: str = ""

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0
