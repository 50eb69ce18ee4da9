"""Operation status — process-wide busy flags and the single-flight arbiter."""

from __future__ import annotations

import threading

from loguru import logger

# Operation name → the status flag it owns
OPERATION_FLAGS: dict[str, str] = {
    "backup": "backing_up",
    "restore": "restoring",
    "export": "exporting",
}

# Operation name → flags that must all be clear before it may start
_CONFLICTS: dict[str, tuple[str, ...]] = {
    "backup": ("backing_up", "restoring"),
    "restore": ("backing_up", "restoring", "exporting"),
    "export": ("restoring", "exporting"),
}


class OperationStatus:
    """
    Owns the busy flags shared by every part of the application.

    ``may_start()`` is a test-and-set: checking the conflicting flags and
    claiming the operation's own flag happen under one lock, so two callers
    racing for the same operation can never both be admitted.  The flag is
    released with ``set_status(flag, False)``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._flags: dict[str, bool] = {flag: False for flag in OPERATION_FLAGS.values()}

    def may_start(self, operation: str) -> bool:
        """Claim *operation* if nothing conflicting is running."""
        if operation not in OPERATION_FLAGS:
            raise ValueError(f"Unknown operation: {operation}")
        with self._lock:
            busy = [flag for flag in _CONFLICTS[operation] if self._flags.get(flag)]
            if busy:
                logger.debug(f"Operation '{operation}' rejected, busy: {', '.join(busy)}")
                return False
            self._flags[OPERATION_FLAGS[operation]] = True
        logger.debug(f"Operation '{operation}' admitted")
        return True

    def set_status(self, flag: str, value: bool) -> None:
        if flag not in self._flags:
            raise ValueError(f"Unknown status flag: {flag}")
        with self._lock:
            self._flags[flag] = bool(value)

    def is_set(self, flag: str) -> bool:
        with self._lock:
            return self._flags.get(flag, False)

    def snapshot(self) -> dict[str, bool]:
        with self._lock:
            return dict(self._flags)
