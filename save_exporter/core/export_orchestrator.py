"""Export orchestrator — the configure → run → summarize workflow with a single-flight guard."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Callable, Iterable, Protocol

from loguru import logger

from save_exporter.models.export_job import ExportJob
from save_exporter.utils import parse_count

if TYPE_CHECKING:
    from save_exporter.core.backend import ExportBackend
    from save_exporter.core.export_summary import ExportSummaryPresenter
    from save_exporter.models.export_job import ExportResult, ExportSettings, ExportSummary

EXPORT_OPERATION = "export"
EXPORTING_FLAG = "exporting"


class ExportState(StrEnum):
    IDLE = "idle"
    CONFIGURING = "configuring"
    RUNNING = "running"
    BLOCKED = "blocked"  # Transient rejection; falls back to the prior state


class ExportNotifier(Protocol):
    def warn(self, message: str) -> None: ...

    def error(self, title: str, message: str) -> None: ...


@dataclass
class ExportOutcome:
    """How one export attempt settled."""

    job: ExportJob
    result: ExportResult | None = None
    error: Exception | None = None
    blocked: bool = False

    @property
    def failed_count(self) -> int:
        return len(self.result.errors) if self.result else 0

    @property
    def succeeded_count(self) -> int:
        return len(self.job.selected_ids) - self.failed_count


class ExportOrchestrator:
    """
    Drives one export at a time.

    ``run()`` only talks to the backend and is safe to call from a worker
    thread; ``complete()`` touches the views and belongs on the UI thread.
    ``export()`` runs both in sequence.

    The local ``state`` only tracks the dialog flow.  Whether an export may
    actually start is decided by ``check_operation_may_start()`` on the
    backend, which owns the shared ``exporting`` flag.
    """

    def __init__(
        self,
        backend: ExportBackend,
        notifier: ExportNotifier,
        presenter: ExportSummaryPresenter,
        refresh: Callable[[], object],
        select_folder: Callable[[], str | None] | None = None,
    ) -> None:
        self._backend = backend
        self._notifier = notifier
        self._presenter = presenter
        self._refresh = refresh
        self._select_folder = select_folder
        self._state = ExportState.IDLE
        self._pending_ids: tuple[str, ...] = ()
        self._state_listeners: list[Callable[[ExportState], None]] = []

    @property
    def state(self) -> ExportState:
        return self._state

    def subscribe_state(self, listener: Callable[[ExportState], None]) -> None:
        self._state_listeners.append(listener)

    def _set_state(self, state: ExportState) -> None:
        self._state = state
        for listener in list(self._state_listeners):
            listener(state)

    # ── Configuring ──

    def request_export(self, selected_ids: Iterable[str]) -> ExportSettings | None:
        """Open the export configuration.  Returns the dialog defaults, or None."""
        if self._state == ExportState.RUNNING:
            # Re-entry while an export runs is rejected, then the run carries on
            self._set_state(ExportState.BLOCKED)
            self._set_state(ExportState.RUNNING)
            return None
        if self._state != ExportState.IDLE:
            return None
        ids = tuple(selected_ids)
        if not ids:
            self._notifier.warn(self._backend.translate("alert.no_games_selected"))
            return None
        self._pending_ids = ids
        self._set_state(ExportState.CONFIGURING)
        return self._backend.get_settings()

    def select_destination(self) -> str | None:
        if self._select_folder is None:
            return None
        path = self._select_folder()
        if path:
            self._backend.persist_setting("export_path", path)
        return path or None

    def cancel(self) -> None:
        if self._state == ExportState.CONFIGURING:
            self._pending_ids = ()
            self._set_state(ExportState.IDLE)

    def confirm(self, count_text: str | int | None, destination_path: str) -> ExportJob | None:
        """Validate the dialog input.  Returns None (still configuring) when invalid."""
        if self._state != ExportState.CONFIGURING:
            return None
        destination_path = (destination_path or "").strip()
        if not destination_path:
            self._notifier.warn(self._backend.translate("alert.empty_export_path"))
            return None

        count = parse_count(count_text)
        self._backend.persist_setting("export_count", count)

        job = ExportJob(self._pending_ids, count, destination_path)
        self._pending_ids = ()
        self._set_state(ExportState.RUNNING)
        return job

    # ── Running ──

    def run(self, job: ExportJob) -> ExportOutcome:
        """Run the backend export behind the single-flight guard."""
        try:
            title = self._backend.translate("main.export_in_progress")
            may_start = self._backend.check_operation_may_start(EXPORT_OPERATION)
        except Exception as e:
            # Flag was never claimed, nothing to release
            logger.error(f"Export could not be started: {e}")
            return ExportOutcome(job, error=e)

        if not may_start:
            logger.debug("Export already in progress elsewhere, ignoring request")
            return ExportOutcome(job, blocked=True)

        try:
            try:
                self._backend.report_progress(EXPORT_OPERATION, title, "start")
                result = self._backend.start_export_operation(
                    job.selected_ids, job.count, job.destination_path
                )
            finally:
                self._backend.report_progress(EXPORT_OPERATION, title, "end")
        except Exception as e:
            logger.error(f"Export to {job.destination_path} failed: {e}")
            return ExportOutcome(job, error=e)
        finally:
            self._backend.set_global_status(EXPORTING_FLAG, False)

        return ExportOutcome(job, result=result)

    def complete(self, outcome: ExportOutcome) -> ExportSummary | None:
        """Report the outcome and return to IDLE."""
        if outcome.blocked:
            self._set_state(ExportState.BLOCKED)
            self._set_state(ExportState.IDLE)
            return None

        if outcome.error is not None:
            self._set_state(ExportState.IDLE)
            self._notifier.error(
                self._backend.translate("alert.error_during_export"),
                str(outcome.error) or type(outcome.error).__name__,
            )
            return None

        assert outcome.result is not None
        job = outcome.job
        logger.info(
            f"Export finished: {outcome.succeeded_count} succeeded, "
            f"{outcome.failed_count} failed → {job.destination_path}"
        )
        try:
            summary = self._presenter.present(
                outcome.succeeded_count,
                outcome.failed_count,
                outcome.result.errors,
                job.destination_path,
            )
            self._refresh()
        finally:
            self._set_state(ExportState.IDLE)
        return summary

    def export(self, job: ExportJob) -> ExportSummary | None:
        return self.complete(self.run(job))
