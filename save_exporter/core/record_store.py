"""In-memory store of the records shown in the export table."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from save_exporter.models.backup_record import BackupRecord


class BackupRecordStore:
    """Latest known record per id, replaced wholesale on every refresh."""

    def __init__(self) -> None:
        self._records: dict[str, BackupRecord] = {}

    def refresh(self, records: Iterable[BackupRecord]) -> None:
        """Replace the whole mapping; records gone upstream do not linger."""
        self._records.clear()
        for record in records:
            self._records[record.id] = record

    @property
    def records(self) -> Mapping[str, BackupRecord]:
        return MappingProxyType(self._records)

    def get(self, record_id: str) -> BackupRecord | None:
        return self._records.get(record_id)

    def total_size(self, record_ids: Iterable[str]) -> int:
        """Sum of backup sizes for the given ids; unknown ids count as zero."""
        total = 0
        for record_id in record_ids:
            record = self._records.get(record_id)
            if record is not None:
                total += record.backup_size
        return total

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)
