"""Persistence adapters for :class:`~textmarks.models.state.DocumentState`."""

from __future__ import annotations

import builtins
import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from textmarks.db import DEFAULT_DOCUMENT_NAME, Base
from textmarks.exc import DoesNotExist
from textmarks.models.annotation_type import AnnotationType
from textmarks.models.mark import Mark
from textmarks.models.state import DocumentState, SelectionMode
from textmarks.utils import utc_now

if TYPE_CHECKING:
    from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Loads and saves the whole document state as one unit."""

    def load(self) -> DocumentState: ...

    def save(self, state: DocumentState) -> None: ...


class MemoryStateStore:
    """
    Keeps the last saved state in memory.

    Args:
        state: Initial state; an empty document if None

    """

    def __init__(self, state: DocumentState | None = None) -> None:
        #: The last saved state.
        self._state = _copy_state(state or DocumentState())
        #: The number of times :meth:`save` was called.
        self.save_count = 0

    def load(self) -> DocumentState:
        return _copy_state(self._state)

    def save(self, state: DocumentState) -> None:
        self._state = _copy_state(state)
        self.save_count += 1


def _copy_state(state: DocumentState) -> DocumentState:
    # Marks and types are immutable, so copying the lists is enough
    return DocumentState(
        text=state.text,
        marks=list(state.marks),
        annotation_types=list(state.annotation_types),
        selected_type_id=state.selected_type_id,
        selection_mode=state.selection_mode,
    )


# ===============================
# SQL records
# ===============================


class Document(Base):
    """
    Represents a saved document: its text and editor settings.
    """

    __tablename__ = "documents"

    #: The document ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The document name.
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    #: The annotated text.
    text: Mapped[str] = mapped_column(String, nullable=False, default="")
    #: The selected annotation type ID.
    selected_type_id: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The selection mode.
    selection_mode: Mapped[str] = mapped_column(
        String, nullable=False, default=SelectionMode.WORD.value
    )
    #: The date and time the document was created.
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    #: The date and time the document was last saved.
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    # Relationships
    annotation_types: Mapped[builtins.list[StoredAnnotationType]] = relationship(
        "StoredAnnotationType",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="StoredAnnotationType.position",
    )
    marks: Mapped[builtins.list[StoredMark]] = relationship(
        "StoredMark",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="StoredMark.position",
    )

    @classmethod
    def get_by_name(cls, session: Session, name: str) -> Document | None:
        return session.scalar(select(cls).where(cls.name == name))

    def to_state(self) -> DocumentState:
        """
        Build the in-memory state for this document.

        Returns:
            The :class:`~textmarks.models.state.DocumentState`

        """
        try:
            selection_mode = SelectionMode(self.selection_mode)
        except ValueError:
            selection_mode = SelectionMode.WORD
        return DocumentState(
            text=self.text,
            marks=[stored.to_mark() for stored in self.marks],
            annotation_types=[
                stored.to_annotation_type() for stored in self.annotation_types
            ],
            selected_type_id=self.selected_type_id,
            selection_mode=selection_mode,
        )


class StoredAnnotationType(Base):
    """Represents an annotation type saved with a document."""

    __tablename__ = "annotation_types"
    __table_args__ = (
        UniqueConstraint("document_id", "type_id", name="uq_annotation_types_type"),
    )

    #: The row ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The document ID.
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    #: The annotation type ID.
    type_id: Mapped[str] = mapped_column(String, nullable=False)
    #: The display name.
    name: Mapped[str] = mapped_column(String, nullable=False)
    #: The display color.
    color: Mapped[str] = mapped_column(String, nullable=False, default="")
    #: The description.
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The keyboard shortcut.
    shortcut: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The position of the type in the document's type list.
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    document: Mapped[Document] = relationship(
        "Document", back_populates="annotation_types"
    )

    @classmethod
    def from_annotation_type(
        cls, annotation_type: AnnotationType, position: int
    ) -> StoredAnnotationType:
        return cls(
            type_id=annotation_type.id,
            name=annotation_type.name,
            color=annotation_type.color,
            description=annotation_type.description,
            shortcut=annotation_type.shortcut,
            position=position,
        )

    def to_annotation_type(self) -> AnnotationType:
        return AnnotationType(
            id=self.type_id,
            name=self.name,
            color=self.color,
            description=self.description,
            shortcut=self.shortcut,
        )


class StoredMark(Base):
    """Represents a mark saved with a document."""

    __tablename__ = "marks"
    __table_args__ = (
        UniqueConstraint("document_id", "mark_id", name="uq_marks_mark"),
        CheckConstraint(
            "start_index >= 0 AND end_index >= start_index", name="ck_marks_span"
        ),
    )

    #: The row ID.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    #: The document ID.
    document_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    #: The mark ID.
    mark_id: Mapped[str] = mapped_column(String, nullable=False)
    #: The annotation type ID.  Not a foreign key: marks may outlive their type.
    type_id: Mapped[str] = mapped_column(String, nullable=False)
    #: The start offset.
    start_index: Mapped[int] = mapped_column(Integer, nullable=False)
    #: The end offset.
    end_index: Mapped[int] = mapped_column(Integer, nullable=False)
    #: The annotated text snapshot.
    text: Mapped[str] = mapped_column(String, nullable=False, default="")
    #: The mark metadata in JSON format.
    metadata_json: Mapped[str | None] = mapped_column(String, nullable=True)
    #: The date and time the mark was created.
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    #: The position of the mark in the document's mark list.
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    document: Mapped[Document] = relationship("Document", back_populates="marks")

    @classmethod
    def from_mark(cls, mark: Mark, position: int) -> StoredMark:
        return cls(
            mark_id=mark.id,
            type_id=mark.type_id,
            start_index=mark.start_index,
            end_index=mark.end_index,
            text=mark.text,
            metadata_json=(
                json.dumps(mark.metadata, ensure_ascii=False)
                if mark.metadata is not None
                else None
            ),
            created_at=mark.created_at,
            position=position,
        )

    def to_mark(self) -> Mark:
        return Mark(
            id=self.mark_id,
            type_id=self.type_id,
            start_index=self.start_index,
            end_index=self.end_index,
            text=self.text,
            created_at=self.created_at,
            metadata=json.loads(self.metadata_json) if self.metadata_json else None,
        )


class SQLStateStore:
    """
    Saves a named document to a SQL database.

    Each :meth:`save` replaces the stored marks and types of the document in
    a single transaction.

    Args:
        session_factory: SQLAlchemy session factory (see
            :func:`~textmarks.db.create_session_factory`)

    Keyword Args:
        document_name: Name of the document to load and save

    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        document_name: str = DEFAULT_DOCUMENT_NAME,
    ) -> None:
        #: The session factory.
        self.session_factory = session_factory
        #: The document name.
        self.document_name = document_name

    def exists(self) -> bool:
        with self.session_factory() as session:
            return Document.get_by_name(session, self.document_name) is not None

    def load(self) -> DocumentState:
        """
        Load the document.

        Raises:
            DoesNotExist: If the document has never been saved

        Returns:
            The saved :class:`~textmarks.models.state.DocumentState`

        """
        with self.session_factory() as session:
            document = Document.get_by_name(session, self.document_name)
            if document is None:
                raise DoesNotExist("Document", self.document_name)
            state = document.to_state()
        logger.info(
            f"Loaded document {self.document_name!r} ({len(state.marks)} marks)"
        )
        return state

    def load_or_default(self) -> DocumentState:
        try:
            return self.load()
        except DoesNotExist:
            return DocumentState()

    def save(self, state: DocumentState) -> None:
        """
        Save the document, replacing what was stored before.

        Args:
            state: The state to save

        """
        with self.session_factory() as session, session.begin():
            document = Document.get_by_name(session, self.document_name)
            if document is None:
                document = Document(name=self.document_name)
                session.add(document)
            document.text = state.text
            document.selected_type_id = state.selected_type_id
            document.selection_mode = str(state.selection_mode)
            document.updated_at = utc_now()
            # Flush the deletes before inserting rows with the same unique keys
            document.annotation_types.clear()
            document.marks.clear()
            session.flush()
            document.annotation_types.extend(
                StoredAnnotationType.from_annotation_type(annotation_type, position)
                for position, annotation_type in enumerate(state.annotation_types)
            )
            document.marks.extend(
                StoredMark.from_mark(mark, position)
                for position, mark in enumerate(state.marks)
            )
        logger.debug(
            f"Saved document {self.document_name!r} ({len(state.marks)} marks)"
        )

    def delete(self) -> None:
        """
        Delete the document.

        Raises:
            DoesNotExist: If the document has never been saved

        """
        with self.session_factory() as session, session.begin():
            document = Document.get_by_name(session, self.document_name)
            if document is None:
                raise DoesNotExist("Document", self.document_name)
            session.delete(document)
