"""Category model."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Category:
    """
    A named group of annotation types, used only for aggregate statistics.

    Categories are not a partition: a type may belong to any number of them.
    """

    #: The category name.
    name: str
    #: The annotation type IDs in this category, in display order.
    type_ids: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable, but store an ordered set
        object.__setattr__(self, "type_ids", tuple(dict.fromkeys(self.type_ids)))

    def includes(self, type_id: str) -> bool:
        return type_id in self.type_ids

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "typeIds": list(self.type_ids)}

    @classmethod
    def from_json(cls, category_data: dict[str, Any]) -> "Category":
        return cls(
            name=str(category_data["name"]),
            type_ids=tuple(str(t) for t in category_data.get("typeIds", [])),
        )
