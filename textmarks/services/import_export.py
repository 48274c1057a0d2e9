"""Document import/export service for textmarks."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Final

from textmarks.exc import MalformedImport
from textmarks.models.annotation_type import AnnotationType
from textmarks.models.mark import Mark
from textmarks.models.state import DocumentState, SelectionMode

logger = logging.getLogger(__name__)

#: The export format version.
EXPORT_VERSION: Final[str] = "1.0"


class DocumentExporter:
    """Exports documents to JSON format."""

    @staticmethod
    def to_dict(state: DocumentState) -> dict[str, Any]:
        """
        Build the export payload for ``state``.

        Args:
            state: The document state

        Returns:
            JSON-compatible dictionary

        """
        return {
            "version": EXPORT_VERSION,
            "exportedAt": datetime.now(UTC).isoformat(),
            "text": state.text,
            "marks": [mark.to_json() for mark in state.marks],
            "annotationTypes": [t.to_json() for t in state.annotation_types],
        }

    def export_json(self, state: DocumentState) -> str:
        return json.dumps(self.to_dict(state), indent=2, ensure_ascii=False)

    def export_json_file(self, state: DocumentState, filename: str | Path) -> Path:
        """
        Export document as JSON to a file.

        Args:
            state: The document state
            filename: Filename to export the document to; ``.json`` is added
                if missing

        Raises:
            ValueError: If the file cannot be written, with a descriptive message

        Returns:
            The path written to

        """
        path = Path(filename)
        if path.suffix != ".json":
            path = path.with_name(path.name + ".json")
        try:
            path.write_text(self.export_json(state), encoding="utf-8")
        except OSError as e:
            msg = f"Failed to write export file:\n{e!s}"
            raise ValueError(msg) from e
        logger.info(f"Exported {len(state.marks)} marks to {path}")
        return path


class DocumentImporter:
    """Parses exported JSON back into document state."""

    def _parse_types(self, data: dict[str, Any]) -> list[AnnotationType]:
        raw_types = data.get("annotationTypes") or []
        if not isinstance(raw_types, list):
            msg = "annotationTypes must be a list"
            raise MalformedImport(msg)
        types: dict[str, AnnotationType] = {}
        for position, type_data in enumerate(raw_types):
            try:
                annotation_type = AnnotationType.from_json(type_data)
            except (KeyError, TypeError, AttributeError) as e:
                msg = f"annotation type #{position} is invalid: {e!s}"
                raise MalformedImport(msg) from e
            if annotation_type.id in types:
                logger.warning(
                    f"Skipping duplicate annotation type {annotation_type.id!r}"
                )
                continue
            types[annotation_type.id] = annotation_type
        return list(types.values())

    def _parse_marks(self, data: dict[str, Any]) -> list[Mark]:
        marks: dict[str, Mark] = {}
        for position, mark_data in enumerate(data["marks"]):
            try:
                mark = Mark.from_json(mark_data)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                msg = f"mark #{position} is invalid: {e!s}"
                raise MalformedImport(msg) from e
            if mark.id in marks:
                logger.warning(f"Skipping duplicate mark {mark.id!r}")
                continue
            marks[mark.id] = mark
        return list(marks.values())

    def from_dict(self, data: Any) -> DocumentState:
        """
        Build a document state from an export payload.

        Args:
            data: Decoded JSON payload

        Raises:
            MalformedImport: If the payload has no text, its marks are not a
                list, or an entry cannot be parsed

        Returns:
            The imported :class:`~textmarks.models.state.DocumentState`

        """
        if not isinstance(data, dict):
            msg = "payload is not a JSON object"
            raise MalformedImport(msg)
        text = data.get("text")
        if not text or not isinstance(text, str):
            msg = "missing required field 'text'"
            raise MalformedImport(msg)
        if not isinstance(data.get("marks"), list):
            msg = "field 'marks' must be a list"
            raise MalformedImport(msg)

        annotation_types = self._parse_types(data)
        marks = self._parse_marks(data)
        unknown = {mark.type_id for mark in marks} - {t.id for t in annotation_types}
        if unknown and annotation_types:
            logger.warning(f"Imported marks refer to unknown types: {sorted(unknown)}")
        try:
            selection_mode = SelectionMode(data.get("selectionMode", "word"))
        except ValueError:
            selection_mode = SelectionMode.WORD
        return DocumentState(
            text=text,
            marks=marks,
            annotation_types=annotation_types,
            selected_type_id=data.get("selectedTypeId"),
            selection_mode=selection_mode,
        )

    def import_json(self, payload: str | bytes) -> DocumentState:
        """
        Import a document from a JSON string.

        Args:
            payload: JSON text

        Raises:
            MalformedImport: If the payload is not valid JSON or not a valid
                export

        Returns:
            The imported :class:`~textmarks.models.state.DocumentState`

        """
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Rejected import: {e!s}")
            msg = f"invalid JSON: {e!s}"
            raise MalformedImport(msg) from e
        try:
            return self.from_dict(data)
        except MalformedImport as e:
            logger.warning(f"Rejected import: {e.reason}")
            raise

    def import_json_file(self, filename: str | Path) -> DocumentState:
        """
        Import a document from a JSON file.

        Args:
            filename: Filename to import the document from

        Raises:
            MalformedImport: If the file cannot be read or is not a valid export

        Returns:
            The imported :class:`~textmarks.models.state.DocumentState`

        """
        path = Path(filename)
        try:
            payload = path.read_bytes()
        except OSError as e:
            msg = f"failed to read {path}: {e!s}"
            raise MalformedImport(msg) from e
        return self.import_json(payload)
