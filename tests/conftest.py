"""Shared pytest fixtures for textmarks tests."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine

from textmarks.db import create_session_factory
from textmarks.models.annotation_type import AnnotationType
from textmarks.models.mark import Mark
from textmarks.models.state import DocumentState, SelectionMode

#: The reference text: "вы" 0-2, "мне" 3-6, "позволите" 7-16.
SAMPLE_TEXT = "вы мне позволите"


def make_mark(
    mark_id: str,
    start: int,
    end: int,
    type_id: str = "t1",
    text: str = SAMPLE_TEXT,
) -> Mark:
    """
    Helper to build a mark with a fixed ID and creation time.

    Args:
        mark_id: Mark ID
        start: Start offset
        end: End offset
        type_id: Annotation type ID
        text: Source text the mark's text is cut from

    Returns:
        The :class:`Mark`

    """
    return Mark(
        id=mark_id,
        type_id=type_id,
        start_index=start,
        end_index=end,
        text=text[start:end],
        created_at=datetime(2024, 1, 15, 10, 30, 45),
    )


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def annotation_types():
    """Three annotation types in display order."""
    return [
        AnnotationType(id="t1", name="Proactive", color="#ef4444"),
        AnnotationType(
            id="t2",
            name="Reactive",
            color="#3b82f6",
            description="Waits for others",
            shortcut="2",
        ),
        AnnotationType(id="t3", name="Internal", color="#22c55e"),
    ]


@pytest.fixture
def nested_marks():
    """An outer mark over the whole text with two marks nested inside it."""
    return [
        make_mark("inner", 3, 6, type_id="t2"),
        make_mark("outer", 0, 16, type_id="t1"),
        make_mark("middle", 0, 6, type_id="t3"),
    ]


@pytest.fixture
def sample_state(annotation_types, nested_marks):
    return DocumentState(
        text=SAMPLE_TEXT,
        marks=list(nested_marks),
        annotation_types=list(annotation_types),
        selected_type_id="t1",
        selection_mode=SelectionMode.SENTENCE,
    )


@pytest.fixture
def session_factory(tmp_path):
    """Create a temporary SQLite database and return a session factory."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    factory = create_session_factory(engine)
    yield factory
    engine.dispose()
