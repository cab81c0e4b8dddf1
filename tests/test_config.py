"""Tests for configuration."""

import logging
from pathlib import Path

import pytest

from cf_broken_links.config import (
    DEFAULT_MAX_LEVENSHTEIN_DISTANCE,
    DEFAULT_RULE_PRIORITY,
    AuditConfig,
    AuditContext,
    ConfigError,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("AEM_AUTHOR_URL", "AEM_AUTHOR_TOKEN", "CF_MAX_LEVENSHTEIN_DISTANCE", "CF_BROKEN_PATHS_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAuditConfig:
    """Tests for AuditConfig."""

    def test_defaults(self):
        config = AuditConfig()

        assert config.default_rule_priority == DEFAULT_RULE_PRIORITY == 42
        assert config.max_levenshtein_distance == DEFAULT_MAX_LEVENSHTEIN_DISTANCE == 1
        assert config.nearest_match_max_ratio == 0.75
        assert config.max_pages == 10
        assert config.pagination_delay_ms == 100
        assert not config.has_aem_author

    def test_has_aem_author_requires_both(self):
        assert AuditConfig(aem_author_url="https://a", aem_author_token="t").has_aem_author
        assert not AuditConfig(aem_author_url="https://a").has_aem_author
        assert not AuditConfig(aem_author_token="t").has_aem_author

    def test_broken_paths_file_becomes_path(self):
        assert AuditConfig(broken_paths_file="broken.csv").broken_paths_file == Path("broken.csv")

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"max_levenshtein_distance": -1}, "max_levenshtein_distance"),
            ({"nearest_match_max_ratio": 1.5}, "nearest_match_max_ratio"),
            ({"nearest_match_max_ratio": -0.1}, "nearest_match_max_ratio"),
            ({"max_pages": 0}, "max_pages"),
            ({"pagination_delay_ms": -5}, "pagination_delay_ms"),
            ({"request_timeout": 0}, "request_timeout"),
        ],
    )
    def test_validation(self, kwargs, message):
        with pytest.raises(ConfigError, match=message):
            AuditConfig(**kwargs)


class TestFromEnv:
    """Tests for AuditConfig.from_env."""

    def test_reads_environment(self, clean_env):
        clean_env.setenv("AEM_AUTHOR_URL", "https://author.example.com")
        clean_env.setenv("AEM_AUTHOR_TOKEN", "secret")
        clean_env.setenv("CF_MAX_LEVENSHTEIN_DISTANCE", "3")
        clean_env.setenv("CF_BROKEN_PATHS_FILE", "/tmp/broken.csv")

        config = AuditConfig.from_env()

        assert config.aem_author_url == "https://author.example.com"
        assert config.aem_author_token == "secret"
        assert config.max_levenshtein_distance == 3
        assert config.broken_paths_file == Path("/tmp/broken.csv")
        assert config.has_aem_author

    def test_empty_environment(self, clean_env):
        config = AuditConfig.from_env()

        assert config.aem_author_url is None
        assert config.max_levenshtein_distance == 1
        assert config.broken_paths_file is None

    def test_overrides_win(self, clean_env):
        clean_env.setenv("CF_MAX_LEVENSHTEIN_DISTANCE", "3")

        config = AuditConfig.from_env(max_levenshtein_distance=2, aem_author_url=None)

        assert config.max_levenshtein_distance == 2
        assert config.aem_author_url is None

    def test_invalid_distance(self, clean_env):
        clean_env.setenv("CF_MAX_LEVENSHTEIN_DISTANCE", "two")

        with pytest.raises(ConfigError, match="must be an integer, got: two"):
            AuditConfig.from_env()

    def test_negative_distance(self, clean_env):
        clean_env.setenv("CF_MAX_LEVENSHTEIN_DISTANCE", "-2")

        with pytest.raises(ConfigError):
            AuditConfig.from_env()


class TestAuditContext:
    """Tests for AuditContext."""

    def test_defaults(self):
        context = AuditContext(site_id="s", base_url="https://example.com")

        assert isinstance(context.config, AuditConfig)
        assert context.log is logging.getLogger("cf_broken_links")
        assert context.audit_result is None
