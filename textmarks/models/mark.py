"""Mark model."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from textmarks.utils import from_timestamp, to_utc_iso, utc_now


@dataclass(frozen=True, slots=True)
class Mark:
    """
    Represents one annotated span of text.

    Marks may overlap or nest freely.  :attr:`text` is a snapshot of the
    source text taken when the mark was created; it is not re-derived if the
    source text changes later.
    """

    #: The mark ID.
    id: str
    #: The :class:`~textmarks.models.annotation_type.AnnotationType` ID.
    type_id: str
    #: The offset of the first annotated character.
    start_index: int
    #: The offset just past the last annotated character.
    end_index: int
    #: The annotated text at creation time.
    text: str
    #: The date and time the mark was created (naive UTC).
    created_at: datetime = field(default_factory=utc_now)
    #: Free-form metadata carried through import and export.
    metadata: dict[str, Any] | None = field(default=None, hash=False)

    @classmethod
    def create(
        cls, source_text: str, type_id: str, start_index: int, end_index: int
    ) -> "Mark":
        """
        Create a new mark over ``source_text[start_index:end_index]``.

        Indices are clamped to the text and put in ascending order, so the
        stored span always matches the snapshotted text.

        Args:
            source_text: The full text being annotated
            type_id: The annotation type ID
            start_index: Start offset of the span
            end_index: End offset of the span

        Raises:
            ValueError: If nothing of the text is left inside the span once it
                is clamped

        Returns:
            The new :class:`Mark` with a fresh ID and creation time

        """
        length = len(source_text)
        start = min(max(start_index, 0), length)
        end = min(max(end_index, 0), length)
        if start > end:
            start, end = end, start
        if start == end:
            msg = f"Cannot create an empty mark at [{start}, {end})"
            raise ValueError(msg)
        return cls(
            id=str(uuid.uuid4()),
            type_id=type_id,
            start_index=start,
            end_index=end,
            text=source_text[start:end],
        )

    @property
    def span(self) -> tuple[int, int]:
        return self.start_index, self.end_index

    @property
    def length(self) -> int:
        return self.end_index - self.start_index

    def contains(self, other: "Mark") -> bool:
        """
        Check whether this mark's span fully contains ``other``'s span.

        Args:
            other: The mark to test

        Returns:
            True if ``other`` lies within this mark (a mark contains itself)

        """
        return (
            self.start_index <= other.start_index
            and self.end_index >= other.end_index
        )

    def to_json(self) -> dict[str, Any]:
        """
        Serialize mark to JSON-compatible dictionary.

        Returns:
            Dictionary containing mark data

        """
        data: dict[str, Any] = {
            "id": self.id,
            "typeId": self.type_id,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "text": self.text,
            "createdAt": to_utc_iso(self.created_at),
        }
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_json(cls, mark_data: dict[str, Any]) -> "Mark":
        """
        Create a mark from JSON import data.

        Args:
            mark_data: Mark data dictionary from JSON

        Raises:
            KeyError: If a required field is missing
            ValueError: If the span is not a valid half-open range

        Returns:
            The :class:`Mark`

        """
        start = mark_data["startIndex"]
        end = mark_data["endIndex"]
        if not all(
            isinstance(value, int) and not isinstance(value, bool)
            for value in (start, end)
        ):
            msg = "startIndex and endIndex must be integers"
            raise ValueError(msg)
        if not 0 <= start < end:
            msg = f"Invalid mark span [{start}, {end})"
            raise ValueError(msg)
        created_at = from_timestamp(mark_data.get("createdAt"))
        return cls(
            id=str(mark_data["id"]),
            type_id=str(mark_data["typeId"]),
            start_index=start,
            end_index=end,
            text=str(mark_data.get("text", "")),
            created_at=created_at if created_at is not None else utc_now(),
            metadata=mark_data.get("metadata"),
        )
