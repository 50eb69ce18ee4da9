"""Selection state carried across export table refreshes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, Protocol

if TYPE_CHECKING:
    from save_exporter.core.table_reconciler import TableRow


class SelectableView(Protocol):
    def selected_ids(self) -> list[str]: ...


@dataclass(frozen=True)
class SelectionState:
    """The ids checked in the table at one point in time."""

    ids: frozenset[str] = frozenset()

    @classmethod
    def of(cls, ids: Iterable[str]) -> SelectionState:
        return cls(frozenset(str(record_id) for record_id in ids))

    def retain(self, available_ids: Iterable[str]) -> SelectionState:
        """Drop ids that are no longer available."""
        return SelectionState(self.ids & frozenset(available_ids))

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.ids

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def covers(self, row_ids: Iterable[str]) -> bool:
        """True when every listed row is selected and there is at least one row."""
        row_ids = frozenset(row_ids)
        return bool(row_ids) and row_ids <= self.ids


class SelectionTracker:
    """Reads the selection before a reconciliation pass and reapplies it after."""

    def __init__(self, view: SelectableView) -> None:
        self._view = view

    def capture(self) -> SelectionState:
        return SelectionState.of(self._view.selected_ids())

    @staticmethod
    def restore(row: TableRow, selection: SelectionState) -> None:
        row.selected = row.record_id in selection
