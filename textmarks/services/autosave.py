"""Autosave service with debounced writes."""

import logging
import threading
from typing import TYPE_CHECKING

from textmarks.db import DEFAULT_AUTOSAVE_DEBOUNCE_MS

if TYPE_CHECKING:
    from collections.abc import Callable

    from textmarks.models.mark import Mark
    from textmarks.models.state import DocumentState
    from textmarks.services.persistence import StateStore
    from textmarks.services.store import MarkStore

logger = logging.getLogger(__name__)


class AutosaveService:
    """
    Service for debounced autosave operations.

    Args:
        save_callback: Function to call when saving
        debounce_ms: Debounce delay in milliseconds

    """

    def __init__(
        self,
        save_callback: "Callable[[], None]",
        debounce_ms: int = DEFAULT_AUTOSAVE_DEBOUNCE_MS,
    ) -> None:
        #: The function to call when saving.
        self.save_callback = save_callback
        #: The debounce delay in seconds.
        self.debounce_ms = debounce_ms / 1000.0
        #: The timer for the debounce.
        self._timer: threading.Timer | None = None
        #: The lock for the autosave.
        self._lock = threading.Lock()
        #: Whether there is a pending autosave.
        self._pending = False

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def trigger(self) -> None:
        """
        Trigger autosave (will be debounced).
        """
        with self._lock:
            self._pending = True
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_ms, self._save)
            self._timer.daemon = True
            self._timer.start()

    def _save(self) -> None:
        """
        Execute the save callback.

        Called by the autosave timer when the debounce delay has elapsed.  If
        there is a pending autosave, the save callback is called.  A failing
        save callback is logged and the pending autosave is dropped.
        """
        with self._lock:
            if self._pending:
                try:
                    self.save_callback()
                except Exception:
                    logger.exception("Autosave failed")
                finally:
                    self._pending = False

    def save_now(self) -> None:
        """
        Force immediate save (bypasses debounce), meaning the autosave timer is
        cancelled and the save callback is called immediately.

        Raises:
            Exception: Whatever the save callback raises

        """
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None
            self._pending = False
        self.save_callback()

    def flush(self) -> None:
        """
        Save immediately if an autosave is pending, e.g. before shutting down.
        """
        if self.pending:
            self.save_now()

    def cancel(self) -> None:
        """
        Cancel pending autosave, meaning the autosave timer is cancelled and the
        save callback is not called.
        """
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None
            self._pending = False


def autosave_marks(
    store: "MarkStore",
    state_store: "StateStore",
    state: "DocumentState",
    debounce_ms: int = DEFAULT_AUTOSAVE_DEBOUNCE_MS,
) -> AutosaveService:
    """
    Save ``state`` through ``state_store`` whenever the marks in ``store`` change.

    ``state.marks`` is kept in sync with the store on every change; the write
    itself is debounced.

    Args:
        store: The mark store to watch
        state_store: Where to save
        state: The document state the marks belong to
        debounce_ms: Debounce delay in milliseconds

    Returns:
        The :class:`AutosaveService`; call :meth:`AutosaveService.flush` before
        exiting so the last change is not lost

    """
    service = AutosaveService(lambda: state_store.save(state), debounce_ms)

    def on_change(marks: "tuple[Mark, ...]") -> None:
        state.marks = list(marks)
        service.trigger()

    store.subscribe(on_change)
    return service
