"""
Centralized configuration for the broken-links audit.

This module provides the configuration dataclass that controls rule
thresholds and AEM Author access, plus the per-run audit context handed
to rules, the client and the handler steps.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


# Priority given to a rule that does not ask for one
DEFAULT_RULE_PRIORITY = 42

DEFAULT_MAX_LEVENSHTEIN_DISTANCE = 1
DEFAULT_NEAREST_MATCH_MAX_RATIO = 0.75
DEFAULT_MAX_PAGES = 10
DEFAULT_PAGINATION_DELAY_MS = 100


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
    pass


@dataclass
class AuditConfig:
    """
    Configuration for one broken-links audit run.

    Attributes:
        aem_author_url: Base URL of the AEM Author instance. When either this
            or the token is missing, analysis runs against the path index only.
        aem_author_token: Bearer token for the AEM Author API.

        default_rule_priority: Priority for rules constructed without one.
        max_levenshtein_distance: Largest edit distance the similar-path rule
            accepts between a broken path and a sibling (locale segments
            removed). Keeps that rule to typo-level fixes.
        nearest_match_max_ratio: Largest edit distance, as a fraction of the
            longer basename, the nearest-match rule accepts. 1.0 accepts any
            candidate, 0.0 only identical basenames.

        max_pages: Page limit for one paginated AEM Author crawl.
        pagination_delay_ms: Pause between paginated requests.
        request_timeout: HTTP timeout in seconds for AEM Author calls.

        broken_paths_file: Export of broken paths read by the file collector.
    """

    aem_author_url: Optional[str] = None
    aem_author_token: Optional[str] = None

    default_rule_priority: int = DEFAULT_RULE_PRIORITY
    max_levenshtein_distance: int = DEFAULT_MAX_LEVENSHTEIN_DISTANCE
    nearest_match_max_ratio: float = DEFAULT_NEAREST_MATCH_MAX_RATIO

    max_pages: int = DEFAULT_MAX_PAGES
    pagination_delay_ms: int = DEFAULT_PAGINATION_DELAY_MS
    request_timeout: float = 30.0

    broken_paths_file: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_levenshtein_distance < 0:
            raise ConfigError("max_levenshtein_distance must be >= 0")
        if not 0.0 <= self.nearest_match_max_ratio <= 1.0:
            raise ConfigError("nearest_match_max_ratio must be between 0.0 and 1.0")
        if self.max_pages < 1:
            raise ConfigError("max_pages must be >= 1")
        if self.pagination_delay_ms < 0:
            raise ConfigError("pagination_delay_ms must be >= 0")
        if self.request_timeout <= 0:
            raise ConfigError("request_timeout must be > 0")
        if self.broken_paths_file is not None:
            self.broken_paths_file = Path(self.broken_paths_file)

    @property
    def has_aem_author(self) -> bool:
        """Check if AEM Author credentials are configured."""
        return bool(self.aem_author_url and self.aem_author_token)

    @classmethod
    def from_env(cls, **overrides: Any) -> "AuditConfig":
        """
        Build a configuration from environment variables.

        Reads AEM_AUTHOR_URL, AEM_AUTHOR_TOKEN, CF_MAX_LEVENSHTEIN_DISTANCE and
        CF_BROKEN_PATHS_FILE. Keyword arguments take precedence over the
        environment.
        """
        values: dict[str, Any] = {
            "aem_author_url": os.environ.get("AEM_AUTHOR_URL"),
            "aem_author_token": os.environ.get("AEM_AUTHOR_TOKEN"),
        }

        max_distance = os.environ.get("CF_MAX_LEVENSHTEIN_DISTANCE")
        if max_distance:
            try:
                values["max_levenshtein_distance"] = int(max_distance)
            except ValueError:
                raise ConfigError(
                    f"CF_MAX_LEVENSHTEIN_DISTANCE must be an integer, got: {max_distance}"
                )

        broken_paths_file = os.environ.get("CF_BROKEN_PATHS_FILE")
        if broken_paths_file:
            values["broken_paths_file"] = Path(broken_paths_file)

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class AuditContext:
    """
    State shared by the steps of one audit run.

    ``audit_result`` carries the output of the previous step into the next.
    """

    site_id: str
    base_url: str
    config: AuditConfig = field(default_factory=AuditConfig)
    log: logging.Logger = field(default_factory=lambda: logging.getLogger("cf_broken_links"))
    audit_result: Optional[dict[str, Any]] = None
