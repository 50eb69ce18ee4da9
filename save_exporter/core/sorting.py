"""Title sorting for the export table."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterable

from save_exporter.models.backup_record import BackupRecord


@dataclass(frozen=True)
class SortItem:
    """A record paired with the title it is ordered by."""

    record: BackupRecord
    title_to_sort: str


def sort_key(title: str) -> str:
    """Width- and case-insensitive key, so 'ｚｅｌｄａ' sorts with 'Zelda'."""
    return unicodedata.normalize("NFKC", title).casefold().strip()


def sort_records(items: Iterable[SortItem]) -> list[BackupRecord]:
    """Order records by their sort title; the record id breaks ties."""
    ordered = sorted(items, key=lambda item: (sort_key(item.title_to_sort), item.record.id))
    return [item.record for item in ordered]
