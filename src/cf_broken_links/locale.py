"""
Locale tokens found in DAM paths.

Content trees encode locales as path segments in one of two styles:
- five-letter language/country codes (``en-US``, ``en_us``)
- bare two-letter country codes (``US``, ``fr``)
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LocaleType(Enum):
    """Shape of a locale token."""
    FIVE_LETTER_LOCALE = "FIVE_LETTER_LOCALE"
    TWO_LETTER_COUNTRY = "TWO_LETTER_COUNTRY"


FIVE_LETTER_PATTERN = re.compile(r"^[a-zA-Z]{2}[-_][a-zA-Z]{2}$")
TWO_LETTER_PATTERN = re.compile(r"^[a-zA-Z]{2}$")


def is_locale_token(segment: Optional[str]) -> bool:
    """Check whether a path segment looks like a locale token."""
    if not segment:
        return False
    return bool(FIVE_LETTER_PATTERN.match(segment) or TWO_LETTER_PATTERN.match(segment))


@dataclass(frozen=True)
class Locale:
    """
    A parsed locale token.

    ``code`` keeps the token exactly as it appeared (trimmed), so it can be
    located and replaced inside the path it came from. ``language`` is
    lower-cased and ``country`` upper-cased.
    """
    code: str
    type: LocaleType
    language: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["Locale"]:
        """
        Parse a locale token.

        Args:
            code: Raw token such as ``en-US``, ``en_us`` or ``US``.

        Returns:
            The parsed Locale, or None for empty or unrecognized input.
        """
        if code is None:
            return None

        trimmed = code.strip()
        if not trimmed:
            return None

        if FIVE_LETTER_PATTERN.match(trimmed):
            language, country = re.split(r"[-_]", trimmed)
            return cls(
                code=trimmed,
                type=LocaleType.FIVE_LETTER_LOCALE,
                language=language.lower(),
                country=country.upper(),
            )

        if TWO_LETTER_PATTERN.match(trimmed):
            return cls(
                code=trimmed,
                type=LocaleType.TWO_LETTER_COUNTRY,
                language=None,
                country=trimmed.upper(),
            )

        return None

    @classmethod
    def from_path(cls, path: Optional[str]) -> Optional["Locale"]:
        """Return the locale of the first path segment that parses as one."""
        if not path:
            return None

        for segment in path.split("/"):
            locale = cls.from_code(segment)
            if locale is not None:
                return locale

        return None

    @property
    def is_valid(self) -> bool:
        return isinstance(self.code, str) and len(self.code) > 0

    def replace_in_path(self, path: Optional[str], new_code: str) -> Optional[str]:
        """
        Swap this locale's segment in a path for another locale code.

        Only the first segment equal to ``code`` is replaced. The path is
        returned unchanged when it does not contain the code.
        """
        if not self.code or path is None:
            return path

        segments = path.split("/")
        for i, segment in enumerate(segments):
            if segment == self.code:
                segments[i] = new_code
                return "/".join(segments)

        return path

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "type": self.type.value,
            "language": self.language,
            "country": self.country,
        }
