import logging
from typing import List, Optional

from shelf.book import Book, Item
from shelf.config import settings
from shelf.member import IdCounter, Member, MemberRecord, StudentMember
from shelf.result import ErrorKind, IssueReceipt, Result

logger = logging.getLogger(__name__)

DEFAULT_BOOKS = (
    (101, "The C++ Book", "Some Guy", 100),
    (102, "Another C++ Book", "Some Girl", 200),
    (103, "C++ for Dummies", "A Smart Person", 300),
)
DEFAULT_MEMBER_NAME = "Default User"


class Library:
    """Manages the in-memory collection of items and members."""

    def __init__(self, member_id_start: Optional[int] = None, loan_days: Optional[int] = None) -> None:
        start = settings.member_id_start if member_id_start is None else member_id_start
        self.counter = IdCounter(start)
        self.loan_days = settings.loan_days if loan_days is None else loan_days
        self.items: List[Item] = []
        self.members: List[MemberRecord] = []

    # ------------------------- Core operations ------------------------- #
    def add_item(self, item: Item) -> None:
        """Append an item. Item ids are caller-assigned and not checked for duplicates."""
        self.items.append(item)

    def add_member(self, member: MemberRecord) -> None:
        self.members.append(member)

    def add_book(self, item_id: int, title: str, author: str, pages: int) -> Book:
        book = Book(id=item_id, title=title, author=author, page_count=pages)
        self.add_item(book)
        return book

    def register_member(self, name: str) -> Member:
        """Create a standard member with the next counter id and add it."""
        member = Member(id=self.counter.next(), name=name)
        self.add_member(member)
        return member

    def register_student(self, name: str, student_id: str) -> StudentMember:
        member = StudentMember(id=self.counter.next(), name=name, student_id=student_id)
        self.add_member(member)
        return member

    def list_items(self) -> List[Item]:
        return list(self.items)

    def list_members(self) -> List[MemberRecord]:
        return list(self.members)

    def find_item(self, item_id: int) -> Result:
        for item in self.items:
            if item.id == item_id:
                return Result.success("find_item", item)
        return Result.failure("find_item", ErrorKind.NOT_FOUND, f"Book with ID {item_id} not found.")

    def find_member(self, member_id: int) -> Result:
        for member in self.members:
            if member.id == member_id:
                return Result.success("find_member", member)
        return Result.failure("find_member", ErrorKind.NOT_FOUND, f"Member with ID {member_id} not found.")

    def issue_book(self, item_id: int, member_id: int, loan_days: Optional[int] = None) -> Result:
        """Mark an item as issued to a member.

        The item is looked up first, then the member; the first miss is
        returned as-is. Issuing is one-way: there is no return operation.
        """
        days = self.loan_days if loan_days is None else loan_days

        found_item = self.find_item(item_id)
        if not found_item.ok:
            return Result.failure("issue_book", found_item.error.kind, found_item.error.message)
        found_member = self.find_member(member_id)
        if not found_member.ok:
            return Result.failure("issue_book", found_member.error.kind, found_member.error.message)

        item, member = found_item.value, found_member.value
        if item.issued:
            return Result.failure(
                "issue_book", ErrorKind.ALREADY_ISSUED, f"Book with ID {item_id} is already issued."
            )

        item.issued = True
        logger.info("Issued '%s' to %s for %d days", item.title, member.name, days)
        receipt = IssueReceipt(title=item.title, member_name=member.name, loan_days=days)
        return Result.success("issue_book", receipt)

    def seed_defaults(self) -> None:
        """Populate starter records for whichever kind is still empty."""
        if not self.items:
            logger.info("No items loaded, adding default books")
            for item_id, title, author, pages in DEFAULT_BOOKS:
                self.add_book(item_id, title, author, pages)
        if not self.members:
            logger.info("No members loaded, adding default member")
            self.register_member(DEFAULT_MEMBER_NAME)
