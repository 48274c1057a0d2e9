"""Mark store: the authoritative, thread-safe list of marks."""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from textmarks.exc import DoesNotExist
from textmarks.models.mark import Mark
from textmarks.services import marks as ops

logger = logging.getLogger(__name__)

#: Signature of change listeners: called with the new snapshot of marks.
ChangeListener = Callable[[tuple[Mark, ...]], None]


class MarkStore:
    """
    Holds the current marks.

    Every mutation replaces the internal tuple as a whole while holding a
    single lock, so readers always see a consistent snapshot.  Listeners
    registered with :meth:`subscribe` are called after each change, outside
    the lock.

    Args:
        marks: Initial marks

    """

    def __init__(self, marks: Iterable[Mark] = ()) -> None:
        #: The current marks.
        self._marks: tuple[Mark, ...] = tuple(marks)
        #: The lock around read-modify-write sequences.
        self._lock = threading.RLock()
        #: The change listeners.
        self._listeners: list[ChangeListener] = []

    def __len__(self) -> int:
        return len(self._marks)

    def __iter__(self) -> Iterator[Mark]:
        return iter(self.snapshot())

    def __contains__(self, mark_id: object) -> bool:
        return any(mark.id == mark_id for mark in self.snapshot())

    # ===============================
    # Listeners
    # ===============================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a change listener.

        Args:
            listener: Called with the new snapshot after every change

        Returns:
            A function that unregisters the listener

        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, marks: Iterable[Mark], action: str) -> tuple[Mark, ...]:
        """Replace the marks.  Must be called with the lock held."""
        self._marks = tuple(marks)
        logger.debug(f"{action}: {len(self._marks)} marks")
        return self._marks

    def _notify(self, snapshot: tuple[Mark, ...]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)

    # ===============================
    # Mutations
    # ===============================

    def add(self, mark: Mark) -> Mark:
        """
        Add a mark.

        Args:
            mark: The mark to add

        Returns:
            The added mark

        """
        with self._lock:
            snapshot = self._commit(ops.add_mark(self._marks, mark), "add")
        self._notify(snapshot)
        return mark

    def create(
        self, text: str, type_id: str, start_index: int, end_index: int
    ) -> Mark:
        """
        Create a mark over ``text[start_index:end_index]`` and add it.

        Args:
            text: The full text being annotated
            type_id: The annotation type ID
            start_index: Start offset
            end_index: End offset

        Raises:
            ValueError: If the span is empty once clamped to the text; the
                store is left unchanged

        Returns:
            The new mark

        """
        return self.add(ops.create_mark(text, type_id, start_index, end_index))

    def remove(self, mark_id: str) -> bool:
        """
        Remove a mark by ID.  Unknown IDs are ignored.

        Args:
            mark_id: ID of the mark to remove

        Returns:
            True if a mark was removed

        """
        with self._lock:
            marks = ops.remove_mark(self._marks, mark_id)
            if marks is self._marks:
                return False
            snapshot = self._commit(marks, "remove")
        self._notify(snapshot)
        return True

    def update(self, mark_id: str, **updates: Any) -> bool:
        """
        Update fields of a mark by ID.  Unknown IDs, unknown fields and
        updates that would leave the mark with an invalid span are ignored.

        Args:
            mark_id: ID of the mark to update

        Keyword Args:
            updates: :class:`~textmarks.models.mark.Mark` field values to change

        Returns:
            True if a mark was updated

        """
        with self._lock:
            marks = ops.update_mark(self._marks, mark_id, updates)
            if marks is self._marks:
                return False
            snapshot = self._commit(marks, "update")
        self._notify(snapshot)
        return True

    def replace_all(self, marks: Iterable[Mark]) -> None:
        """
        Replace every mark, e.g. after loading or importing a document.

        Args:
            marks: The new marks

        """
        with self._lock:
            snapshot = self._commit(marks, "replace")
        self._notify(snapshot)

    def clear(self) -> None:
        self.replace_all(())

    # ===============================
    # Queries
    # ===============================

    def snapshot(self) -> tuple[Mark, ...]:
        with self._lock:
            return self._marks

    def get(self, mark_id: str) -> Mark:
        """
        Get a mark by ID.

        Args:
            mark_id: Mark ID

        Raises:
            DoesNotExist: If no mark has that ID

        Returns:
            The mark

        """
        for mark in self.snapshot():
            if mark.id == mark_id:
                return mark
        raise DoesNotExist("Mark", mark_id)

    def in_range(self, start: int, end: int) -> list[Mark]:
        return ops.get_marks_in_range(self.snapshot(), start, end)

    def by_type(self, type_id: str) -> list[Mark]:
        return ops.get_marks_by_type(self.snapshot(), type_id)

    def sorted(self) -> list[Mark]:
        return ops.sort_marks_by_position(self.snapshot())
