"""Data models for textmarks."""

from textmarks.models.annotation_type import AnnotationType
from textmarks.models.category import Category
from textmarks.models.mark import Mark
from textmarks.models.state import DocumentState, SelectionMode
from textmarks.models.token import Token, TokenType

__all__ = [
    "AnnotationType",
    "Category",
    "DocumentState",
    "Mark",
    "SelectionMode",
    "Token",
    "TokenType",
]
