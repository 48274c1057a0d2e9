"""Unit tests for the tokenizer."""

import pytest

from textmarks.models.token import TokenType
from textmarks.services.tokenizer import classify_char, is_word_char, tokenize


def assert_covers(text, tokens):
    """Tokens must be contiguous, non-overlapping, and rebuild the text."""
    assert "".join(token.text for token in tokens) == text
    position = 0
    for token in tokens:
        assert token.start_index == position
        assert token.end_index > token.start_index
        assert text[token.start_index : token.end_index] == token.text
        position = token.end_index
    assert position == len(text)


class TestTokenize:
    """Test cases for tokenize()."""

    def test_empty_string(self):
        """Test empty text produces no tokens."""
        assert tokenize("") == []

    def test_cyrillic_words_and_whitespace(self):
        """Test Cyrillic words are word tokens with exact offsets."""
        tokens = tokenize("вы мне позволите")
        assert [(t.text, t.start_index, t.end_index, t.type) for t in tokens] == [
            ("вы", 0, 2, TokenType.WORD),
            (" ", 2, 3, TokenType.WHITESPACE),
            ("мне", 3, 6, TokenType.WORD),
            (" ", 6, 7, TokenType.WHITESPACE),
            ("позволите", 7, 16, TokenType.WORD),
        ]

    def test_each_punctuation_character_is_its_own_token(self):
        """Test runs of punctuation are not merged."""
        tokens = tokenize("Да?!")
        assert [(t.text, t.type) for t in tokens] == [
            ("Да", TokenType.WORD),
            ("?", TokenType.PUNCTUATION),
            ("!", TokenType.PUNCTUATION),
        ]

    def test_symbols_are_punctuation(self):
        """Test currency and math symbols are single punctuation tokens."""
        tokens = tokenize("5$+€")
        assert [(t.text, t.type) for t in tokens] == [
            ("5", TokenType.WORD),
            ("$", TokenType.PUNCTUATION),
            ("+", TokenType.PUNCTUATION),
            ("€", TokenType.PUNCTUATION),
        ]

    def test_whitespace_run_is_one_token(self):
        """Test mixed whitespace forms one token."""
        tokens = tokenize("a \t\n\n b")
        assert [t.text for t in tokens] == ["a", " \t\n\n ", "b"]
        assert tokens[1].type is TokenType.WHITESPACE

    def test_letters_digits_and_underscore_form_one_word(self):
        """Test a run of N word characters gives exactly one token of length N."""
        tokens = tokenize("snake_case42")
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.WORD
        assert tokens[0].end_index - tokens[0].start_index == 12

    def test_combining_accent_stays_in_word(self):
        """Test a combining acute accent does not split a word."""
        text = "позво́лите"
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].text == text

    def test_control_characters_are_kept(self):
        """Test control characters become punctuation tokens, leaving no gaps."""
        text = "a\x00b"
        tokens = tokenize(text)
        assert [(t.text, t.type) for t in tokens] == [
            ("a", TokenType.WORD),
            ("\x00", TokenType.PUNCTUATION),
            ("b", TokenType.WORD),
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "вы мне позволите",
            "Hello, world!  How are you?\n\nFine.",
            "日本語のテキスト、です。",
            "  leading and trailing  ",
            "«Цитата» — тире…",
            "emoji 👍🏽 here",
        ],
    )
    def test_tokens_cover_text(self, text):
        """Test tokens always reproduce the input exactly."""
        assert_covers(text, tokenize(text))


class TestClassifyChar:
    """Test cases for is_word_char() and classify_char()."""

    @pytest.mark.parametrize("char", ["a", "Ж", "ß", "7", "٣", "_", "中"])
    def test_word_chars(self, char):
        assert is_word_char(char)
        assert classify_char(char) is TokenType.WORD

    @pytest.mark.parametrize("char", [" ", "\t", "\n", "\u00a0"])
    def test_whitespace_chars(self, char):
        assert classify_char(char) is TokenType.WHITESPACE

    @pytest.mark.parametrize("char", [".", ",", "—", "«", "$", "+"])
    def test_punctuation_chars(self, char):
        assert not is_word_char(char)
        assert classify_char(char) is TokenType.PUNCTUATION
