"""Result and CatalogError: the return contract of catalog operations.

Lookups and issuing report failures through a ``Result`` instead of raising,
so the shell decides how each failure kind is shown to the user.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_ISSUED = "already_issued"
    IO_ERROR = "io_error"
    PARSE_ERROR = "parse_error"


class CatalogError(BaseModel):
    """Structured error payload within a Result."""

    model_config = {"frozen": True}

    kind: ErrorKind
    message: str


class IssueReceipt(BaseModel):
    """Confirmation produced by a successful issue."""

    model_config = {"frozen": True}

    title: str
    member_name: str
    loan_days: int


class Result(BaseModel):
    """Outcome of a catalog operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"find_item"``).
        value: Operation payload on success (a record, a receipt, ...).
        error: Structured error if ``ok`` is False.
        warnings: Non-fatal issues met along the way.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    value: Any = None
    error: Optional[CatalogError] = None
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def success(cls, op: str, value: Any = None, warnings: Optional[List[str]] = None) -> "Result":
        return cls(ok=True, op=op, value=value, warnings=warnings or [])

    @classmethod
    def failure(cls, op: str, kind: ErrorKind, message: str) -> "Result":
        return cls(ok=False, op=op, error=CatalogError(kind=kind, message=message))

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None
