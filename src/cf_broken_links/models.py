"""
Data models for the broken-links audit.

This module defines the content paths stored in the path index, the
suggestions produced by the rule engine, and the broken-path records fed
into an audit run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .locale import Locale


class ContentStatus(Enum):
    """Publication status of a content fragment on AEM Author."""
    PUBLISHED = "PUBLISHED"
    MODIFIED = "MODIFIED"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "ContentStatus":
        """Parse a status string case-insensitively, defaulting to UNKNOWN."""
        if isinstance(value, ContentStatus):
            return value
        if not value or not isinstance(value, str):
            return cls.UNKNOWN
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class ContentPath:
    """A known content path, stored as a leaf of the path index."""
    path: str
    status: Optional[ContentStatus] = None
    locale: Optional[str] = None  # Locale code such as "en-US"

    def __post_init__(self) -> None:
        """Accept raw status strings and Locale objects."""
        if self.status is not None:
            self.status = ContentStatus.parse(self.status)
        if isinstance(self.locale, Locale):
            self.locale = self.locale.code

    @property
    def is_valid(self) -> bool:
        """Check if the path is a non-blank string."""
        return isinstance(self.path, str) and len(self.path.strip()) > 0

    @property
    def is_published(self) -> bool:
        return self.status is ContentStatus.PUBLISHED

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status.value if self.status else None,
            "locale": self.locale,
        }


class SuggestionType(Enum):
    """Kind of fix proposed for a broken path."""
    PUBLISH = "PUBLISH"
    LOCALE = "LOCALE"
    SIMILAR = "SIMILAR"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class Suggestion:
    """A proposed fix for one broken content fragment path."""
    requested_path: str
    suggested_path: Optional[str]
    type: SuggestionType
    reason: str

    @classmethod
    def publish(
        cls,
        requested_path: str,
        suggested_path: Optional[str] = None,
        reason: str = "Content exists on Author",
    ) -> "Suggestion":
        """The content exists on Author and only needs publishing."""
        return cls(requested_path, suggested_path or requested_path, SuggestionType.PUBLISH, reason)

    @classmethod
    def locale(
        cls,
        requested_path: str,
        suggested_path: str,
        reason: str = "Locale fallback detected",
    ) -> "Suggestion":
        return cls(requested_path, suggested_path, SuggestionType.LOCALE, reason)

    @classmethod
    def similar(
        cls,
        requested_path: str,
        suggested_path: str,
        reason: str = "Similar path found",
    ) -> "Suggestion":
        return cls(requested_path, suggested_path, SuggestionType.SIMILAR, reason)

    @classmethod
    def not_found(cls, requested_path: str, reason: str = "Not found") -> "Suggestion":
        return cls(requested_path, None, SuggestionType.NOT_FOUND, reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requested_path": self.requested_path,
            "suggested_path": self.suggested_path,
            "type": self.type.value,
            "reason": self.reason,
        }


@dataclass
class BrokenPath:
    """A broken content fragment path reported by a collector."""
    url: str
    request_user_agents: list[str] = field(default_factory=list)
    request_count: Optional[int] = None

    def __post_init__(self) -> None:
        """Normalize the URL."""
        self.url = self.url.strip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "request_user_agents": list(self.request_user_agents),
            "request_count": self.request_count,
        }
