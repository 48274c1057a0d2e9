"""Tokenizer service."""

import unicodedata

from textmarks.models.token import Token, TokenType

#: Unicode general category prefixes that count as word characters.  Combining
#: marks are included so that accented letters written with a combining accent
#: stay inside their word.
WORD_CATEGORY_PREFIXES: tuple[str, ...] = ("L", "N", "M")


def is_word_char(char: str) -> bool:
    """
    Check whether ``char`` is a word character.

    Word characters are Unicode letters, numbers, combining marks and the
    underscore.  This works for any script, not only Latin.

    Args:
        char: A single character

    Returns:
        True if ``char`` is a word character

    """
    return char == "_" or unicodedata.category(char).startswith(
        WORD_CATEGORY_PREFIXES
    )


def classify_char(char: str) -> TokenType:
    """
    Get the token type a single character belongs to.

    Anything that is neither a word character nor whitespace (punctuation,
    symbols, control and format characters) is punctuation.

    Args:
        char: A single character

    Returns:
        The :class:`~textmarks.models.token.TokenType`

    """
    if is_word_char(char):
        return TokenType.WORD
    if char.isspace():
        return TokenType.WHITESPACE
    return TokenType.PUNCTUATION


def tokenize(text: str) -> list[Token]:
    """
    Split text into word, punctuation and whitespace tokens.

    - A maximal run of word characters is one ``word`` token.
    - A maximal run of whitespace is one ``whitespace`` token.
    - Every punctuation or symbol character is its own ``punctuation`` token.

    The tokens are contiguous and cover the whole text, so joining their
    :attr:`~textmarks.models.token.Token.text` gives back ``text``.

    Args:
        text: Input text

    Returns:
        List of :class:`~textmarks.models.token.Token` objects in text order

    """
    tokens: list[Token] = []
    length = len(text)
    i = 0
    while i < length:
        token_type = classify_char(text[i])
        end = i + 1
        if token_type is not TokenType.PUNCTUATION:
            while end < length and classify_char(text[end]) is token_type:
                end += 1
        tokens.append(
            Token(text=text[i:end], start_index=i, end_index=end, type=token_type)
        )
        i = end
    return tokens


def word_tokens(text: str) -> list[Token]:
    """
    Get only the word tokens of ``text``.

    Args:
        text: Input text

    Returns:
        List of ``word`` tokens in text order

    """
    return [token for token in tokenize(text) if token.is_word]
