"""Tests for data models."""

from cf_broken_links.locale import Locale
from cf_broken_links.models import (
    BrokenPath,
    ContentPath,
    ContentStatus,
    Suggestion,
    SuggestionType,
)


class TestContentStatus:
    """Tests for ContentStatus.parse."""

    def test_parses_case_insensitively(self):
        assert ContentStatus.parse("published") is ContentStatus.PUBLISHED
        assert ContentStatus.parse("Modified") is ContentStatus.MODIFIED
        assert ContentStatus.parse("DRAFT") is ContentStatus.DRAFT
        assert ContentStatus.parse(" archived ") is ContentStatus.ARCHIVED
        assert ContentStatus.parse("deleted") is ContentStatus.DELETED

    def test_unknown_values(self):
        assert ContentStatus.parse("INVALID") is ContentStatus.UNKNOWN
        assert ContentStatus.parse("") is ContentStatus.UNKNOWN
        assert ContentStatus.parse(None) is ContentStatus.UNKNOWN
        assert ContentStatus.parse(42) is ContentStatus.UNKNOWN

    def test_passes_enum_through(self):
        assert ContentStatus.parse(ContentStatus.DRAFT) is ContentStatus.DRAFT


class TestContentPath:
    """Tests for ContentPath."""

    def test_valid_path(self):
        content_path = ContentPath("/content/dam/test/image.jpg", ContentStatus.PUBLISHED, "en-US")

        assert content_path.is_valid
        assert content_path.is_published

    def test_invalid_paths(self):
        """Empty, blank and non-string paths are invalid."""
        assert not ContentPath("").is_valid
        assert not ContentPath("   ").is_valid
        assert not ContentPath(None).is_valid
        assert not ContentPath(123).is_valid

    def test_status_string_is_parsed(self):
        content_path = ContentPath("/content/dam/a.jpg", "draft")

        assert content_path.status is ContentStatus.DRAFT
        assert not content_path.is_published

    def test_locale_object_becomes_code(self):
        content_path = ContentPath("/content/dam/en-US/a.jpg", "PUBLISHED", Locale.from_code("en-US"))
        assert content_path.locale == "en-US"

    def test_missing_status_is_not_published(self):
        assert not ContentPath("/content/dam/a.jpg").is_published

    def test_to_dict(self):
        content_path = ContentPath("/content/dam/en-US/a.jpg", "MODIFIED", "en-US")

        assert content_path.to_dict() == {
            "path": "/content/dam/en-US/a.jpg",
            "status": "MODIFIED",
            "locale": "en-US",
        }
        assert ContentPath("/a").to_dict() == {"path": "/a", "status": None, "locale": None}


class TestSuggestion:
    """Tests for Suggestion factories."""

    def test_publish_defaults_to_requested_path(self):
        suggestion = Suggestion.publish("/content/dam/a.jpg")

        assert suggestion.type == SuggestionType.PUBLISH
        assert suggestion.requested_path == "/content/dam/a.jpg"
        assert suggestion.suggested_path == "/content/dam/a.jpg"
        assert suggestion.reason == "Content exists on Author"

    def test_publish_with_custom_path_and_reason(self):
        suggestion = Suggestion.publish("/a", "/b", "Custom")

        assert suggestion.suggested_path == "/b"
        assert suggestion.reason == "Custom"

    def test_locale(self):
        suggestion = Suggestion.locale("/content/dam/fr-CA/a.jpg", "/content/dam/fr-FR/a.jpg")

        assert suggestion.type == SuggestionType.LOCALE
        assert suggestion.suggested_path == "/content/dam/fr-FR/a.jpg"
        assert suggestion.reason == "Locale fallback detected"

    def test_similar(self):
        suggestion = Suggestion.similar("/content/dam/imge.jpg", "/content/dam/image.jpg")

        assert suggestion.type == SuggestionType.SIMILAR
        assert suggestion.reason == "Similar path found"

    def test_not_found(self):
        suggestion = Suggestion.not_found("/content/dam/gone.jpg")

        assert suggestion.type == SuggestionType.NOT_FOUND
        assert suggestion.suggested_path is None
        assert suggestion.reason == "Not found"

    def test_to_dict(self):
        suggestion = Suggestion.similar("/a/imge.jpg", "/a/image.jpg")

        assert suggestion.to_dict() == {
            "requested_path": "/a/imge.jpg",
            "suggested_path": "/a/image.jpg",
            "type": "SIMILAR",
            "reason": "Similar path found",
        }


class TestBrokenPath:
    """Tests for BrokenPath."""

    def test_strips_url(self):
        assert BrokenPath(url="  /content/dam/a.jpg ").url == "/content/dam/a.jpg"

    def test_to_dict(self):
        broken_path = BrokenPath(url="/content/dam/a.jpg", request_user_agents=["curl"], request_count=3)

        assert broken_path.to_dict() == {
            "url": "/content/dam/a.jpg",
            "request_user_agents": ["curl"],
            "request_count": 3,
        }
