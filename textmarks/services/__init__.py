"""Services package initialization."""

from textmarks.services.autosave import AutosaveService, autosave_marks
from textmarks.services.boundaries import (
    Span,
    find_paragraph_boundaries,
    find_sentence_boundaries,
    find_word_boundaries,
)
from textmarks.services.decompose import (
    ClickAction,
    ClickResult,
    CoveringMark,
    Segment,
    decompose,
    marks_covering,
    resolve_click,
    segment_at,
)
from textmarks.services.import_export import DocumentExporter, DocumentImporter
from textmarks.services.marks import (
    CategoryStat,
    TypeStat,
    create_mark,
    get_category_stats,
    get_mark_stats,
    get_marks_by_type,
    get_marks_in_range,
    remove_mark,
    sort_marks_by_position,
    update_mark,
)
from textmarks.services.persistence import (
    MemoryStateStore,
    SQLStateStore,
    StateStore,
)
from textmarks.services.selection import snap_selection_to_mode
from textmarks.services.store import MarkStore
from textmarks.services.tokenizer import is_word_char, tokenize

__all__ = [
    "AutosaveService",
    "CategoryStat",
    "ClickAction",
    "ClickResult",
    "CoveringMark",
    "DocumentExporter",
    "DocumentImporter",
    "MarkStore",
    "MemoryStateStore",
    "SQLStateStore",
    "Segment",
    "Span",
    "StateStore",
    "TypeStat",
    "autosave_marks",
    "create_mark",
    "decompose",
    "find_paragraph_boundaries",
    "find_sentence_boundaries",
    "find_word_boundaries",
    "get_category_stats",
    "get_mark_stats",
    "get_marks_by_type",
    "get_marks_in_range",
    "is_word_char",
    "marks_covering",
    "remove_mark",
    "resolve_click",
    "segment_at",
    "snap_selection_to_mode",
    "sort_marks_by_position",
    "tokenize",
    "update_mark",
]
