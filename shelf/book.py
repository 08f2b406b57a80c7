from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass
class Book:
    """Represents a single book item in the catalog."""

    kind: ClassVar[str] = "book"

    id: int
    title: str
    author: str
    page_count: int
    issued: bool = field(default=False)

    def __post_init__(self) -> None:
        self.title = self.title.strip()
        self.author = self.author.strip()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    @property
    def status(self) -> str:
        return "Issued" if self.issued else "Available"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "page_count": self.page_count,
            "issued": self.issued,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            id=int(data["id"]),
            title=data["title"],
            author=data["author"],
            page_count=int(data["page_count"]),
            issued=bool(data.get("issued", False)),
        )


# Closed set of borrowable item variants. Only books exist today.
Item = Union[Book]
