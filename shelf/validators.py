import re
from typing import Optional

from shelf.fields import has_delimiter


class NumberValidator:
    """Converts raw shell input into the integers catalog operations expect."""

    @staticmethod
    def parse_int(raw: Optional[str]) -> Optional[int]:
        if raw is None:
            return None
        s = raw.strip()
        if not re.fullmatch(r"[+-]?\d+", s):
            return None
        return int(s)

    @staticmethod
    def parse_positive_int(raw: Optional[str]) -> Optional[int]:
        value = NumberValidator.parse_int(raw)
        if value is None or value <= 0:
            return None
        return value


class TextValidator:
    """Basic text validations for titles, authors and names."""

    @staticmethod
    def _is_non_empty_alpha(text: Optional[str]) -> bool:
        if text is None:
            return False
        t = text.strip()
        if not t:
            return False
        # allow spaces and letters, basic punctuation; reject purely numeric
        return any(c.isalpha() for c in t)

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        if title is None:
            return False
        return bool(title.strip())

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        # must not be digits only
        if author is None:
            return False
        t = author.strip()
        if not t:
            return False
        return not t.isdigit()

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator._is_non_empty_alpha(name)

    @staticmethod
    def breaks_record(text: Optional[str]) -> bool:
        """True when the value would corrupt its row in the data files."""
        return text is not None and has_delimiter(text)
