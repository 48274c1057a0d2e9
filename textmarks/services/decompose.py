"""Decompose overlapping marks into flat, non-overlapping text segments."""

import bisect
import itertools
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from textmarks.models.annotation_type import AnnotationType
from textmarks.models.mark import Mark

#: Annotation types, either as a sequence or already keyed by ID.
TypesArg = Iterable[AnnotationType] | Mapping[str, AnnotationType]


@dataclass(frozen=True, slots=True)
class CoveringMark:
    """A mark together with its resolved annotation type."""

    #: The mark.
    mark: Mark
    #: The mark's annotation type.
    type: AnnotationType


@dataclass(frozen=True, slots=True)
class Segment:
    """
    A run of text covered by one fixed set of marks.

    :attr:`covering` is ordered outermost first: by mark start ascending,
    then by mark end descending.  The last entry is the innermost mark and
    is the one used for styling.
    """

    #: The offset of the first character of the segment.
    start: int
    #: The offset just past the last character of the segment.
    end: int
    #: The segment text.
    text: str
    #: The marks that fully contain the segment.
    covering: tuple[CoveringMark, ...] = field(default_factory=tuple)

    @property
    def is_marked(self) -> bool:
        return bool(self.covering)

    @property
    def primary(self) -> CoveringMark | None:
        return self.covering[-1] if self.covering else None

    @property
    def title(self) -> str:
        """The names of the covering types joined for a tooltip."""
        return " + ".join(item.type.name for item in self.covering)

    def to_json(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "marks": [
                {"markId": item.mark.id, "typeId": item.type.id}
                for item in self.covering
            ],
        }


class ClickAction(StrEnum):
    """What a click on a segment should do."""

    #: The segment carries no marks.
    NONE = "none"
    #: Remove the single mark under the pointer.
    REMOVE = "remove"
    #: Let the user choose among several marks under the pointer.
    CHOOSE = "choose"


@dataclass(frozen=True, slots=True)
class ClickResult:
    """The outcome of :func:`resolve_click`."""

    #: The action to take.
    action: ClickAction
    #: The mark to remove, for :attr:`ClickAction.REMOVE`.
    mark_id: str | None = None
    #: The marks to choose from, for :attr:`ClickAction.CHOOSE`.
    choices: tuple[CoveringMark, ...] = ()


def _type_map(annotation_types: TypesArg) -> Mapping[str, AnnotationType]:
    if isinstance(annotation_types, Mapping):
        return annotation_types
    return {t.id: t for t in annotation_types}


def _render_order(marks: Iterable[Mark]) -> list[Mark]:
    # Outermost first: a mark sorts before every mark nested inside it
    return sorted(marks, key=lambda mark: (mark.start_index, -mark.end_index))


def _resolve(
    marks: Iterable[Mark], types: Mapping[str, AnnotationType]
) -> list[CoveringMark]:
    return [
        CoveringMark(mark=mark, type=types[mark.type_id])
        for mark in marks
        if mark.type_id in types
    ]


def _clamped_span(mark: Mark, length: int) -> tuple[int, int]:
    return (
        min(max(mark.start_index, 0), length),
        min(max(mark.end_index, 0), length),
    )


def breakpoints(text: str, marks: Iterable[Mark]) -> list[int]:
    """
    Get the sorted, unique segment boundaries for ``marks`` over ``text``.

    Mark offsets outside the text are clamped to it.

    Args:
        text: The full text
        marks: The marks

    Returns:
        Ascending list of offsets, always starting at 0 and ending at
        ``len(text)``

    """
    length = len(text)
    points = {0, length}
    for mark in marks:
        points.update(_clamped_span(mark, length))
    return sorted(points)


def decompose(
    text: str, marks: Iterable[Mark], annotation_types: TypesArg
) -> list[Segment]:
    """
    Split ``text`` into segments that are each covered by a fixed set of marks.

    Every mark start and end becomes a segment boundary.  A mark covers a
    segment when it fully contains it, so nested and partially overlapping
    marks both break down into atomic pieces.  Marks whose type is unknown
    are silently left out of :attr:`Segment.covering`.

    The boundaries are swept once in order, adding marks where they start
    and dropping them where they end, so the cost is the sort of the marks
    plus the size of the output.

    Joining the texts of the returned segments gives back ``text``.

    Args:
        text: The full text
        marks: The marks, in any order
        annotation_types: The known annotation types

    Returns:
        List of :class:`Segment` in text order

    """
    marks = list(marks)
    length = len(text)
    ordered = _resolve(_render_order(marks), _type_map(annotation_types))
    # Positions in render order of the marks starting and ending at each offset
    starting: dict[int, list[int]] = defaultdict(list)
    ending: dict[int, list[int]] = defaultdict(list)
    for position, item in enumerate(ordered):
        start, end = _clamped_span(item.mark, length)
        if start < end:
            starting[start].append(position)
            ending[end].append(position)
    active: set[int] = set()
    segments = []
    for start, end in itertools.pairwise(breakpoints(text, marks)):
        active.difference_update(ending.get(start, ()))
        active.update(starting.get(start, ()))
        covering = tuple(ordered[position] for position in sorted(active))
        segments.append(
            Segment(start=start, end=end, text=text[start:end], covering=covering)
        )
    return segments


def segment_at(segments: Sequence[Segment], index: int) -> Segment | None:
    """
    Find the segment containing text offset ``index``.

    Args:
        segments: Segments from :func:`decompose`
        index: Text offset

    Returns:
        The segment with ``start <= index < end``, or None

    """
    starts = [segment.start for segment in segments]
    position = bisect.bisect_right(starts, index) - 1
    if position < 0:
        return None
    segment = segments[position]
    if segment.start <= index < segment.end:
        return segment
    return None


def marks_covering(
    mark: Mark, marks: Iterable[Mark], annotation_types: TypesArg
) -> list[CoveringMark]:
    """
    Get every mark whose span fully contains ``mark``'s span.

    This is what a popup for a click on ``mark`` lists.  ``mark`` itself is
    included when it is in ``marks``.

    Args:
        mark: The clicked mark
        marks: All marks
        annotation_types: The known annotation types

    Returns:
        List of :class:`CoveringMark`, outermost first

    """
    types = _type_map(annotation_types)
    containing = (other for other in marks if other.contains(mark))
    return _resolve(_render_order(containing), types)


def resolve_click(
    segment: Segment,
    marks: Iterable[Mark],
    annotation_types: TypesArg,
    *,
    secondary: bool = False,
) -> ClickResult:
    """
    Decide what a click on ``segment`` does.

    - A segment with no marks does nothing.
    - A primary click on a segment with exactly one mark removes that mark.
    - A primary click on a segment with several marks, or a secondary click
      on any marked segment, offers every mark containing the segment's
      innermost mark.

    Args:
        segment: The clicked segment
        marks: All marks
        annotation_types: The known annotation types

    Keyword Args:
        secondary: Whether this is a secondary activation (e.g. right-click)

    Returns:
        A :class:`ClickResult`

    """
    primary = segment.primary
    if primary is None:
        return ClickResult(action=ClickAction.NONE)
    if len(segment.covering) == 1 and not secondary:
        return ClickResult(action=ClickAction.REMOVE, mark_id=primary.mark.id)
    choices = marks_covering(primary.mark, marks, annotation_types)
    return ClickResult(action=ClickAction.CHOOSE, choices=tuple(choices))
