"""Selection snapping service."""

from textmarks.models.state import SelectionMode
from textmarks.services.boundaries import (
    Span,
    find_paragraph_boundaries,
    find_sentence_boundaries,
    find_word_boundaries,
)
from textmarks.services.tokenizer import is_word_char


def _snap_to_words(text: str, start: int, end: int) -> Span:
    """
    Grow a selection outward to whole words.

    The selection always covers the word at ``start``.  It only extends to
    the word at ``end`` if the selection reaches into that word, i.e. if
    there is at least one word character between the first word and ``end``;
    trailing whitespace or punctuation alone does not pull in the next word.

    Args:
        text: The full text
        start: Raw selection start
        end: Raw selection end

    Returns:
        The snapped :class:`~textmarks.services.boundaries.Span`

    """
    start_bounds = find_word_boundaries(text, start)
    if end <= start_bounds.end:
        return start_bounds
    between = text[start_bounds.end : end]
    if not any(is_word_char(char) for char in between):
        return start_bounds
    end_bounds = find_word_boundaries(text, max(0, end - 1))
    return Span(start_bounds.start, end_bounds.end)


def snap_selection_to_mode(
    text: str, start: int, end: int, mode: SelectionMode | str
) -> Span:
    """
    Snap a raw ``[start, end)`` selection to the given selection mode.

    - ``character``: the selection is returned unchanged.
    - ``word``: see :func:`_snap_to_words`.
    - ``sentence`` and ``paragraph``: the units at ``start`` and at
      ``end - 1`` are resolved independently and the result covers both.

    Callers reject zero-width selections before snapping.  No errors are
    raised; unusable input yields a degenerate span.

    Args:
        text: The full text
        start: Raw selection start
        end: Raw selection end
        mode: A :class:`~textmarks.models.state.SelectionMode` or its value

    Returns:
        The snapped :class:`~textmarks.services.boundaries.Span`

    """
    try:
        mode = SelectionMode(mode)
    except ValueError:
        return Span(start, end)

    if mode is SelectionMode.WORD:
        return _snap_to_words(text, start, end)
    if mode is SelectionMode.SENTENCE:
        finder = find_sentence_boundaries
    elif mode is SelectionMode.PARAGRAPH:
        finder = find_paragraph_boundaries
    else:
        return Span(start, end)
    start_bounds = finder(text, start)
    end_bounds = finder(text, end - 1)
    return Span(
        min(start_bounds.start, end_bounds.start),
        max(start_bounds.end, end_bounds.end),
    )
