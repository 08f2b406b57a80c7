from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union


class IdCounter:
    """Hands out sequential member ids, starting at ``start``."""

    def __init__(self, start: int = 1001) -> None:
        self._next = start

    def peek(self) -> int:
        return self._next

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value


@dataclass
class Member:
    """A person entitled to borrow items."""

    kind: ClassVar[str] = "member"

    id: int
    name: str

    def __post_init__(self) -> None:
        self.name = self.name.strip()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} (ID: {self.id})"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "id": self.id, "name": self.name}


@dataclass
class StudentMember(Member):
    """A member carrying an extra, free-form student identifier."""

    kind: ClassVar[str] = "student"

    student_id: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        self.student_id = self.student_id.strip()

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["student_id"] = self.student_id
        return data


MemberRecord = Union[Member, StudentMember]
