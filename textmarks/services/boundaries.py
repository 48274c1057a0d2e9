"""Word, sentence and paragraph boundary resolution."""

import re
from typing import Final, NamedTuple

from textmarks.services.tokenizer import word_tokens

#: One or more sentence terminators followed by a whitespace character.
SENTENCE_END_RE: Final[re.Pattern[str]] = re.compile(r"[.!?]+\s")
#: A paragraph separator: two or more newlines.
PARAGRAPH_SEPARATOR_RE: Final[re.Pattern[str]] = re.compile(r"\n\n+")


class Span(NamedTuple):
    """A half-open ``[start, end)`` range of text offsets."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def find_word_boundaries(text: str, index: int) -> Span:
    """
    Find the word at ``index``.

    If ``index`` falls inside a word, that word is returned.  Otherwise the
    word ending exactly at ``index`` is preferred, then the word starting
    exactly at ``index``.  If there is no such word, the empty span
    ``(index, index)`` is returned.

    Args:
        text: The full text
        index: Text offset

    Returns:
        The :class:`Span` of the word

    """
    words = word_tokens(text)
    for token in words:
        if token.contains(index):
            return Span(token.start_index, token.end_index)
    for token in words:
        if token.end_index == index:
            return Span(token.start_index, token.end_index)
    for token in words:
        if token.start_index == index:
            return Span(token.start_index, token.end_index)
    return Span(index, index)


def find_sentence_boundaries(text: str, index: int) -> Span:
    """
    Find the sentence containing ``index``.

    A sentence ends with one or more of ``.``, ``!`` or ``?`` followed by
    whitespace.  The returned span includes the terminating punctuation but
    not the whitespace after it, and starts after any leading whitespace.
    The last sentence runs to the end of the text.

    Args:
        text: The full text
        index: Text offset

    Returns:
        The :class:`Span` of the sentence

    """
    start = 0
    end = len(text)
    for match in SENTENCE_END_RE.finditer(text):
        if match.end() <= index:
            start = match.end()
        else:
            end = match.start() + len(match.group().rstrip())
            break
    while start < len(text) and text[start].isspace():
        start += 1
    return Span(start, end)


def find_paragraph_boundaries(text: str, index: int) -> Span:
    """
    Find the paragraph containing ``index``.

    Paragraphs are separated by runs of two or more newlines.  An ``index``
    equal to a paragraph's end offset still belongs to that paragraph.  If
    ``index`` is inside a separator, the whole text is returned.

    Args:
        text: The full text
        index: Text offset

    Returns:
        The :class:`Span` of the paragraph

    """
    start = 0
    for separator in PARAGRAPH_SEPARATOR_RE.finditer(text):
        if start <= index <= separator.start():
            return Span(start, separator.start())
        start = separator.end()
    if start <= index <= len(text):
        return Span(start, len(text))
    return Span(0, len(text))
