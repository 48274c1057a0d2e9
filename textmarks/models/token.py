"""Token model."""

from dataclasses import dataclass
from enum import StrEnum


class TokenType(StrEnum):
    """The lexical class of a token."""

    WORD = "word"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"


@dataclass(frozen=True, slots=True)
class Token:
    """Represents a run of text of a single lexical class."""

    #: The token text.
    text: str
    #: The offset of the first character of the token.
    start_index: int
    #: The offset just past the last character of the token.
    end_index: int
    #: The lexical class.
    type: TokenType

    @property
    def is_word(self) -> bool:
        return self.type is TokenType.WORD

    def contains(self, index: int) -> bool:
        """
        Check whether ``index`` falls inside the token.

        Args:
            index: Text offset

        Returns:
            True if ``start_index <= index < end_index``

        """
        return self.start_index <= index < self.end_index

    def to_json(self) -> dict:
        return {
            "text": self.text,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "type": str(self.type),
        }
