"""Annotation type model."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AnnotationType:
    """
    Represents a named, colored label that marks refer to.

    Identity is :attr:`id`; edit a type with :func:`dataclasses.replace`.
    """

    #: The annotation type ID.
    id: str
    #: The display name.
    name: str
    #: The display color (e.g. ``#3b82f6``).  Only a hint for renderers.
    color: str
    #: An optional longer description.
    description: str | None = None
    #: An optional keyboard shortcut.
    shortcut: str | None = None

    def to_json(self) -> dict[str, Any]:
        """
        Serialize annotation type to JSON-compatible dictionary.

        Optional fields are omitted when unset.

        Returns:
            Dictionary containing annotation type data

        """
        data: dict[str, Any] = {"id": self.id, "name": self.name, "color": self.color}
        if self.description is not None:
            data["description"] = self.description
        if self.shortcut is not None:
            data["shortcut"] = self.shortcut
        return data

    @classmethod
    def from_json(cls, type_data: dict[str, Any]) -> "AnnotationType":
        """
        Create an annotation type from JSON import data.

        Args:
            type_data: Annotation type data dictionary from JSON

        Raises:
            KeyError: If ``id`` or ``name`` is missing

        Returns:
            The new :class:`AnnotationType`

        """
        return cls(
            id=str(type_data["id"]),
            name=str(type_data["name"]),
            color=str(type_data.get("color", "")),
            description=type_data.get("description"),
            shortcut=type_data.get("shortcut"),
        )
