"""Backup record models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# Display language that prefers the localized title
CJK_LANGUAGE = "zh_CN"


@dataclass
class BackupEntry:
    """One backup ZIP of a game."""

    zip_path: str
    meta_path: str
    created_at: datetime
    size: int = 0
    is_permanent: bool = False
    label: str = ""


@dataclass
class BackupRecord:
    """A game's backup state as listed in the export table."""

    id: str  # "{emulator}/{game_id}"
    title: str
    emulator: str = ""
    game_id: str = ""
    localized_title: str = ""
    backups: list[BackupEntry] = field(default_factory=list)  # Newest first

    @property
    def backup_size(self) -> int:
        return sum(b.size for b in self.backups)

    @property
    def latest_backup(self) -> str:
        if not self.backups:
            return ""
        return self.backups[0].created_at.strftime("%Y-%m-%d %H:%M")

    @property
    def has_permanent_backup(self) -> bool:
        return any(b.is_permanent for b in self.backups)

    def display_title(self, language: str) -> str:
        """Localized title for the CJK display language, default title otherwise."""
        if language == CJK_LANGUAGE and self.localized_title:
            return self.localized_title
        return self.title

    def is_pinned(self, pinned_ids: set[str] | list[str] | tuple[str, ...]) -> bool:
        return self.id in pinned_ids
