"""Document state model."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from textmarks.models.annotation_type import AnnotationType
from textmarks.models.mark import Mark


class SelectionMode(StrEnum):
    """The granularity a raw selection is snapped to."""

    CHARACTER = "character"
    WORD = "word"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"


@dataclass
class DocumentState:
    """
    The whole application state that is loaded and saved as one unit.

    This is what persistence adapters and the JSON importer/exporter exchange;
    the core functions only ever see its parts.
    """

    #: The text being annotated.
    text: str = ""
    #: The marks over :attr:`text`.
    marks: list[Mark] = field(default_factory=list)
    #: The known annotation types.
    annotation_types: list[AnnotationType] = field(default_factory=list)
    #: The annotation type new marks are created with.
    selected_type_id: str | None = None
    #: The mode raw selections are snapped with.
    selection_mode: SelectionMode = SelectionMode.WORD

    def type_map(self) -> dict[str, AnnotationType]:
        """
        Get the annotation types keyed by ID.

        Returns:
            Dictionary of annotation type ID to :class:`AnnotationType`

        """
        return {t.id: t for t in self.annotation_types}

    def to_json(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "marks": [mark.to_json() for mark in self.marks],
            "annotationTypes": [t.to_json() for t in self.annotation_types],
            "selectedTypeId": self.selected_type_id,
            "selectionMode": str(self.selection_mode),
        }
