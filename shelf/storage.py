"""Flat-file persistence for the catalog.

Each catalog kind lives in its own text file, one record per line, fields
separated by commas and led by a one-letter discriminator::

    items.csv     B,<id>,<title>,<author>,<pages>
    members.csv   M,<id>,<name>
                  S,<id>,<name>,<student_id>

Fields are written verbatim: there is no quoting or escaping. A comma inside
a title, author or name shifts every following field of that row, so the row
is misread (or skipped) on the next load. Use ``shelf.fields.has_delimiter`` to detect
such values before they are stored.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Collection, Dict, Iterator, List, Optional, Tuple, Union

from shelf.book import Book, Item
from shelf.fields import DELIMITER
from shelf.library import Library
from shelf.member import MemberRecord
from shelf.result import ErrorKind, Result

logger = logging.getLogger(__name__)

BOOK_TAG = "B"
MEMBER_TAG = "M"
STUDENT_TAG = "S"

ITEMS = "items"
MEMBERS = "members"

PathLike = Union[str, Path]


class StorageError(OSError):
    """A data file could not be opened for reading or writing."""


class RecordParseError(ValueError):
    """A persisted line is not valid UTF-8, has a malformed numeric field or is missing fields."""


@dataclass
class LoadReport:
    items_loaded: int = 0
    members_loaded: int = 0
    errors: List[str] = field(default_factory=list)
    io_errors: List[str] = field(default_factory=list)
    unreadable: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.errors or self.io_errors)

    def merge(self, other: "LoadReport") -> "LoadReport":
        return LoadReport(
            items_loaded=self.items_loaded + other.items_loaded,
            members_loaded=self.members_loaded + other.members_loaded,
            errors=self.errors + other.errors,
            io_errors=self.io_errors + other.io_errors,
            unreadable=self.unreadable + other.unreadable,
        )


# ------------------------- Encoding ------------------------- #
def _encode_book(book: Book) -> str:
    return DELIMITER.join([BOOK_TAG, str(book.id), book.title, book.author, str(book.page_count)])


def _encode_member(member: MemberRecord) -> str:
    return DELIMITER.join([MEMBER_TAG, str(member.id), member.name])


def _encode_student(member: MemberRecord) -> str:
    return DELIMITER.join([STUDENT_TAG, str(member.id), member.name, member.student_id])


_ITEM_ENCODERS: Dict[str, Callable[[Item], str]] = {"book": _encode_book}
_MEMBER_ENCODERS: Dict[str, Callable[[MemberRecord], str]] = {
    "member": _encode_member,
    "student": _encode_student,
}


def encode_item(item: Item) -> Optional[str]:
    """Serialize an item. Variants without an item line format return None."""
    encoder = _ITEM_ENCODERS.get(item.kind)
    return encoder(item) if encoder else None


def encode_member(member: MemberRecord) -> str:
    return _MEMBER_ENCODERS[member.kind](member)


# ------------------------- Decoding ------------------------- #
def split_record(line: str) -> List[str]:
    return line.split(DELIMITER)


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise RecordParseError(f"invalid {name} {value!r}") from exc


def _field(fields: List[str], index: int, name: str) -> str:
    try:
        return fields[index]
    except IndexError as exc:
        raise RecordParseError(f"missing {name}") from exc


def decode_item_line(fields: List[str]) -> Optional[Book]:
    """Build an item from split fields; unknown discriminators yield None."""
    if fields[0] != BOOK_TAG:
        return None
    item_id = _parse_int(_field(fields, 1, "id"), "id")
    title = _field(fields, 2, "title")
    author = _field(fields, 3, "author")
    pages = _parse_int(_field(fields, 4, "page count"), "page count")
    return Book(id=item_id, title=title, author=author, page_count=pages)


def _iter_lines(path: Path) -> Iterator[Tuple[int, bytes]]:
    """Yield ``(lineno, raw)`` for each line; decoding is left to the caller."""
    try:
        with open(path, "rb") as f:
            for lineno, raw in enumerate(f, 1):
                yield lineno, raw.rstrip(b"\r\n")
    except FileNotFoundError:
        logger.info("Data file %s not found, starting empty", path)
    except OSError as exc:
        raise StorageError(f"Could not open {path} for loading: {exc}") from exc


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RecordParseError(f"invalid UTF-8 at byte {exc.start}") from exc


def _skip(report: "LoadReport", kind: str, path: Path, lineno: int, exc: Exception) -> None:
    message = f"{path.name}:{lineno}: {exc}"
    logger.warning("Skipping %s record %s", kind, message)
    report.errors.append(message)


# ------------------------- Load ------------------------- #
def load_items(library: Library, path: PathLike) -> LoadReport:
    """Append every well-formed item line of ``path`` to the library.

    Raises StorageError when the file exists but cannot be read.
    """
    path = Path(path)
    report = LoadReport()
    for lineno, raw in _iter_lines(path):
        try:
            line = _decode_line(raw)
            if not line.strip():
                continue
            item = decode_item_line(split_record(line))
        except RecordParseError as exc:
            _skip(report, "item", path, lineno, exc)
            continue
        if item is None:
            continue
        library.add_item(item)
        report.items_loaded += 1
    return report


def load_members(library: Library, path: PathLike) -> LoadReport:
    """Register a member for every well-formed member line of ``path``.

    Members are registered through the library's id counter, so the
    persisted ids are validated but not restored.
    """
    path = Path(path)
    report = LoadReport()
    for lineno, raw in _iter_lines(path):
        try:
            line = _decode_line(raw)
            if not line.strip():
                continue
            fields = split_record(line)
            tag = fields[0]
            if tag not in (MEMBER_TAG, STUDENT_TAG):
                continue
            _parse_int(_field(fields, 1, "id"), "id")
            name = _field(fields, 2, "name")
            student_id = _field(fields, 3, "student id") if tag == STUDENT_TAG else None
        except RecordParseError as exc:
            _skip(report, "member", path, lineno, exc)
            continue
        if student_id is None:
            library.register_member(name)
        else:
            library.register_student(name, student_id)
        report.members_loaded += 1
    return report


def load_catalog(library: Library, items_path: PathLike, members_path: PathLike) -> LoadReport:
    """Load both data files. A file that cannot be read does not stop the other.

    Kinds whose file could not be read are listed in ``unreadable`` so the
    caller can avoid overwriting them on save.
    """
    report = LoadReport()
    for kind, loader, path in (
        (ITEMS, load_items, items_path),
        (MEMBERS, load_members, members_path),
    ):
        try:
            report = report.merge(loader(library, path))
        except StorageError as exc:
            logger.error("%s", exc)
            report.io_errors.append(str(exc))
            report.unreadable.append(kind)
    logger.info(
        "Loaded %d items and %d members (%d problems)",
        report.items_loaded, report.members_loaded, len(report.errors) + len(report.io_errors),
    )
    return report


# ------------------------- Save ------------------------- #
def _write_lines(path: Path, lines: List[str]) -> None:
    try:
        f = open(path, "w", encoding="utf-8", newline="\n")
    except OSError as exc:
        raise StorageError(f"Could not open {path} for saving: {exc}") from exc
    with f:
        for line in lines:
            f.write(line + "\n")


def save_items(items: List[Item], path: PathLike) -> int:
    lines = [line for line in (encode_item(item) for item in items) if line is not None]
    _write_lines(Path(path), lines)
    return len(lines)


def save_members(members: List[MemberRecord], path: PathLike) -> int:
    lines = [encode_member(member) for member in members]
    _write_lines(Path(path), lines)
    return len(lines)


def save_catalog(
    library: Library,
    items_path: PathLike,
    members_path: PathLike,
    skip: Collection[str] = (),
) -> Result:
    """Write both data files. A failure on one file does not skip the other.

    Kinds named in ``skip`` (``"items"``, ``"members"``) are left untouched on
    disk, e.g. because their file could not be read at startup.
    """
    failures: List[str] = []
    warnings: List[str] = []
    written = {ITEMS: 0, MEMBERS: 0}

    for kind, saver, records, path in (
        (ITEMS, save_items, library.list_items(), items_path),
        (MEMBERS, save_members, library.list_members(), members_path),
    ):
        if kind in skip:
            message = f"Not saving {kind}: {path} could not be loaded, leaving it unchanged"
            logger.warning("%s", message)
            warnings.append(message)
            continue
        try:
            written[kind] = saver(records, path)
        except StorageError as exc:
            logger.error("%s", exc)
            failures.append(str(exc))

    if failures:
        return Result.failure("save_catalog", ErrorKind.IO_ERROR, "; ".join(failures))
    logger.info("Saved %d items and %d members", written[ITEMS], written[MEMBERS])
    return Result.success("save_catalog", written, warnings=warnings)
