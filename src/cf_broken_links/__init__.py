"""
Content Fragment Broken Links

Suggests fixes for broken content fragment references:
- Indexes known DAM content paths in a trie
- Runs broken paths through prioritized repair rules
- Checks candidates against AEM Author or a content listing export
"""

__version__ = "1.0.0"
__author__ = "Content Fragment Broken Links Team"

from .config import AuditConfig, AuditContext, ConfigError, DEFAULT_RULE_PRIORITY

from .models import (
    BrokenPath,
    ContentPath,
    ContentStatus,
    Suggestion,
    SuggestionType,
)

from .levenshtein import LevenshteinDistance
from .locale import Locale, LocaleType
from .language_tree import LanguageTree
from .path_index import PathIndex

from .rules import (
    BaseRule,
    LocaleFallbackRule,
    NearestMatchRule,
    PublishRule,
    RuleError,
    SimilarPathRule,
)

from .analysis import AnalysisStrategy
from .aem_client import AemAuthorClient, AemClientError, IndexAuthorClient
from .collector import CollectorError, FileCollector, load_broken_paths, load_content_listing

from .handler import (
    AuditError,
    analyze_broken_content_fragment_links,
    fetch_broken_content_fragment_links,
    provide_content_fragment_link_suggestions,
    run_audit,
)

__all__ = [
    # Configuration
    "AuditConfig",
    "AuditContext",
    "ConfigError",
    "DEFAULT_RULE_PRIORITY",
    # Models
    "BrokenPath",
    "ContentPath",
    "ContentStatus",
    "Suggestion",
    "SuggestionType",
    # Core
    "LevenshteinDistance",
    "Locale",
    "LocaleType",
    "LanguageTree",
    "PathIndex",
    # Rules
    "BaseRule",
    "LocaleFallbackRule",
    "NearestMatchRule",
    "PublishRule",
    "RuleError",
    "SimilarPathRule",
    "AnalysisStrategy",
    # AEM Author
    "AemAuthorClient",
    "AemClientError",
    "IndexAuthorClient",
    # Collection
    "CollectorError",
    "FileCollector",
    "load_broken_paths",
    "load_content_listing",
    # Audit steps
    "AuditError",
    "analyze_broken_content_fragment_links",
    "fetch_broken_content_fragment_links",
    "provide_content_fragment_link_suggestions",
    "run_audit",
]
