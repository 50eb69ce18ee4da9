"""Export summary — counts, size and failure details of the last export."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Protocol

from loguru import logger

from save_exporter.models.export_job import ExportErrorDetail, ExportSummary

if TYPE_CHECKING:
    from save_exporter.core.backend import ExportBackend
    from save_exporter.core.record_store import BackupRecordStore


class SummaryView(Protocol):
    def show_summary(self, summary: ExportSummary) -> None: ...

    def show_error_details(self, title: str, errors: list[ExportErrorDetail]) -> None: ...

    def restore_content(self) -> None: ...


class ExportSummaryPresenter:
    """Builds the summary model and drives the summary view.

    The total size is looked up for whatever is selected when the summary
    is built, not for the ids that were exported.
    """

    def __init__(
        self,
        backend: ExportBackend,
        store: BackupRecordStore,
        selected_ids: Callable[[], Iterable[str]],
        view: SummaryView,
    ) -> None:
        self._backend = backend
        self._store = store
        self._selected_ids = selected_ids
        self._view = view
        self._summary: ExportSummary | None = None
        self._dismissible = False

    @property
    def summary(self) -> ExportSummary | None:
        return self._summary

    @property
    def is_showing(self) -> bool:
        return self._dismissible

    def build_summary(
        self,
        succeeded_count: int,
        failed_count: int,
        errors: list[ExportErrorDetail],
        destination_path: str,
    ) -> ExportSummary:
        failure_message = ""
        if failed_count > 0:
            failure_message = self._backend.translate(
                "summary.total_export_failed", failed_count=failed_count
            )
        return ExportSummary(
            succeeded_count=succeeded_count,
            failed_count=failed_count,
            destination_path=destination_path,
            total_size=self._store.total_size(self._selected_ids()),
            errors=list(errors),
            failure_message=failure_message,
        )

    def present(
        self,
        succeeded_count: int,
        failed_count: int,
        errors: list[ExportErrorDetail],
        destination_path: str,
    ) -> ExportSummary:
        summary = self.build_summary(succeeded_count, failed_count, errors, destination_path)
        self._summary = summary
        self._dismissible = True
        self._view.show_summary(summary)
        if summary.has_failures:
            logger.warning(f"Export finished with {failed_count} failure(s)")
        return summary

    def show_errors(self) -> None:
        """Open the error detail view for the current summary."""
        if self._summary is None or not self._summary.has_failures:
            return
        self._view.show_error_details(self._summary.failure_message, self._summary.errors)

    def dismiss(self) -> bool:
        """Return to the table.  Returns False when already dismissed."""
        if not self._dismissible:
            return False
        self._dismissible = False
        self._view.restore_content()
        return True
