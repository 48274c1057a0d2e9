"""Mark operations and statistics.

All functions here are pure: they never modify the sequences they are given
and return new lists instead.  :class:`~textmarks.services.store.MarkStore`
builds on them.
"""

import dataclasses
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from textmarks.models.annotation_type import AnnotationType
from textmarks.models.category import Category
from textmarks.models.mark import Mark

#: The field names an update may name.
MARK_FIELDS: frozenset[str] = frozenset(f.name for f in dataclasses.fields(Mark))


@dataclass(frozen=True, slots=True)
class TypeStat:
    """Number of marks of one annotation type."""

    #: The annotation type.
    type: AnnotationType
    #: The number of marks with this type.
    count: int

    def to_json(self) -> dict[str, Any]:
        return {"type": self.type.to_json(), "count": self.count}


@dataclass(frozen=True, slots=True)
class CategoryStat:
    """Number and share of marks whose type belongs to one category."""

    #: The category name.
    category_name: str
    #: The number of marks in the category.
    count: int
    #: ``count`` as a percentage (0-100) of all marks.
    percentage: float

    def to_json(self) -> dict[str, Any]:
        return {
            "categoryName": self.category_name,
            "count": self.count,
            "percentage": self.percentage,
        }


def create_mark(text: str, type_id: str, start_index: int, end_index: int) -> Mark:
    """
    Create a mark over ``text[start_index:end_index]``.

    Args:
        text: The full text being annotated
        type_id: The annotation type ID
        start_index: Start offset
        end_index: End offset

    Raises:
        ValueError: If the span is empty once clamped to the text

    Returns:
        The new :class:`~textmarks.models.mark.Mark`

    """
    return Mark.create(text, type_id, start_index, end_index)


def add_mark(marks: Sequence[Mark], mark: Mark) -> list[Mark]:
    return [*marks, mark]


def remove_mark(marks: Sequence[Mark], mark_id: str) -> Sequence[Mark]:
    """
    Remove the mark with ID ``mark_id``.

    Args:
        marks: The current marks
        mark_id: ID of the mark to remove

    Returns:
        A new list without the mark, or ``marks`` itself if no mark has that ID

    """
    if not any(mark.id == mark_id for mark in marks):
        return marks
    return [mark for mark in marks if mark.id != mark_id]


def _has_valid_span(mark: Mark) -> bool:
    start, end = mark.span
    if isinstance(start, bool) or isinstance(end, bool):
        return False
    return isinstance(start, int) and isinstance(end, int) and 0 <= start < end


def update_mark(
    marks: Sequence[Mark], mark_id: str, updates: dict[str, Any]
) -> Sequence[Mark]:
    """
    Apply ``updates`` to the mark with ID ``mark_id``.

    ``updates`` uses the :class:`~textmarks.models.mark.Mark` field names.
    The ``id`` field cannot be changed, and keys that are not mark fields are
    ignored.  An update that would leave the mark without a valid
    ``0 <= start_index < end_index`` span is not applied.

    Args:
        marks: The current marks
        mark_id: ID of the mark to update
        updates: Field values to change

    Returns:
        A new list with the mark replaced, or ``marks`` itself if no mark has
        that ID, the update changes nothing or the update is rejected

    """
    target = next((mark for mark in marks if mark.id == mark_id), None)
    if target is None:
        return marks
    changes = {
        key: value
        for key, value in updates.items()
        if key in MARK_FIELDS and key != "id"
    }
    updated = dataclasses.replace(target, **changes)
    if updated == target or not _has_valid_span(updated):
        return marks
    return [updated if mark.id == mark_id else mark for mark in marks]


def get_marks_in_range(marks: Iterable[Mark], start: int, end: int) -> list[Mark]:
    """
    Get the marks that overlap, touch the inside of, or contain ``[start, end)``.

    Args:
        marks: The marks to search
        start: Range start
        end: Range end

    Returns:
        Matching marks in their original order

    """
    return [
        mark
        for mark in marks
        if (start <= mark.start_index < end)
        or (start < mark.end_index <= end)
        or (mark.start_index <= start and mark.end_index >= end)
    ]


def get_marks_by_type(marks: Iterable[Mark], type_id: str) -> list[Mark]:
    return [mark for mark in marks if mark.type_id == type_id]


def sort_marks_by_position(marks: Iterable[Mark]) -> list[Mark]:
    """
    Sort marks by start offset, then by end offset, both ascending.

    Args:
        marks: The marks to sort

    Returns:
        A new sorted list

    """
    return sorted(marks, key=lambda mark: (mark.start_index, mark.end_index))


def get_mark_stats(
    marks: Iterable[Mark], annotation_types: Iterable[AnnotationType]
) -> list[TypeStat]:
    """
    Count marks per annotation type.

    Marks with an unknown type are not counted.  Types with no marks are
    left out.  The result is sorted by count, highest first; ties keep the
    order of ``annotation_types``.

    Args:
        marks: The marks to count
        annotation_types: The known annotation types

    Returns:
        List of :class:`TypeStat`

    """
    counts: dict[str, int] = {}
    types: dict[str, AnnotationType] = {}
    for annotation_type in annotation_types:
        types.setdefault(annotation_type.id, annotation_type)
        counts.setdefault(annotation_type.id, 0)
    for mark in marks:
        if mark.type_id in counts:
            counts[mark.type_id] += 1
    stats = [
        TypeStat(type=types[type_id], count=count)
        for type_id, count in counts.items()
        if count > 0
    ]
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


def get_category_stats(
    marks: Sequence[Mark], categories: Iterable[Category]
) -> list[CategoryStat]:
    """
    Count marks per category.

    Categories may overlap, so a mark can count towards several of them.
    The percentage is relative to all marks, and 0 when there are none.

    Args:
        marks: The marks to count
        categories: The categories, in display order

    Returns:
        List of :class:`CategoryStat`, one per category, in the same order

    """
    total = len(marks)
    stats = []
    for category in categories:
        type_ids = set(category.type_ids)
        count = sum(1 for mark in marks if mark.type_id in type_ids)
        stats.append(
            CategoryStat(
                category_name=category.name,
                count=count,
                percentage=(count / total) * 100 if total > 0 else 0.0,
            )
        )
    return stats
