"""
Rule engine for broken content fragment paths.

Runs every broken path through the repair rules in priority order and
post-processes the resulting suggestions against the path index.
"""

import re
from typing import Optional

from .config import AuditContext
from .models import Suggestion, SuggestionType
from .path_index import PathIndex
from .rules import (
    AuthorClient,
    BaseRule,
    LocaleFallbackRule,
    NearestMatchRule,
    PublishRule,
    SimilarPathRule,
)

# GraphQL/JSON renditions such as /content/dam/site/article.cfm.model.json
GRAPHQL_SUFFIX = re.compile(r"\.cfm.*\.json$")


class AnalysisStrategy:
    """
    Short-circuiting chain of repair rules.

    The first rule that returns a suggestion wins. A rule that raises is
    logged and skipped so the remaining rules still get their chance.
    Paths no rule can repair get a NOT_FOUND suggestion.
    """

    def __init__(
        self,
        context: AuditContext,
        aem_author_client: Optional[AuthorClient],
        path_index: PathIndex,
        rules: Optional[list[BaseRule]] = None,
    ):
        self.context = context
        self.aem_author_client = aem_author_client
        self.path_index = path_index

        if rules is None:
            rules = [
                PublishRule(context, aem_author_client),
                LocaleFallbackRule(context, aem_author_client),
                SimilarPathRule(context, aem_author_client, path_index),
                NearestMatchRule(context, path_index, aem_author_client),
            ]
        # sorted() is stable, equal priorities keep declaration order
        self.rules = sorted(rules, key=lambda rule: rule.get_priority())

    @staticmethod
    def clean_path(path: str) -> str:
        """Strip a GraphQL rendition suffix from a content fragment path."""
        return GRAPHQL_SUFFIX.sub("", path)

    async def analyze(self, broken_paths: list[str]) -> list[Suggestion]:
        """
        Produce one suggestion per broken path.

        Args:
            broken_paths: Broken content fragment paths, as requested.

        Returns:
            Post-processed suggestions, in input order.
        """
        suggestions: list[Suggestion] = []

        for broken_path in broken_paths:
            suggestion = await self.analyze_path(self.clean_path(broken_path))
            if suggestion is not None:
                suggestions.append(suggestion)

        return self.process_suggestions(suggestions)

    async def analyze_path(self, broken_path: str) -> Suggestion:
        log = self.context.log
        log.info(f"Analyzing broken path: {broken_path}")

        for rule in self.rules:
            try:
                suggestion = await rule.apply(broken_path)
            except Exception as e:
                log.error(f"Error applying {type(rule).__name__} to {broken_path}: {e}")
                continue

            if suggestion is not None:
                log.info(f"Rule {type(rule).__name__} applied to {broken_path}")
                return suggestion

        log.warning(f"No rules applied to {broken_path}")
        return Suggestion.not_found(broken_path)

    def process_suggestions(self, suggestions: list[Suggestion]) -> list[Suggestion]:
        """
        Check suggested paths against the index.

        A LOCALE or SIMILAR suggestion that points at content which exists
        but is not published keeps its type, and its reason is changed to
        ask for publishing.
        """
        log = self.context.log
        log.info(f"Post-processing {len(suggestions)} suggestions")

        for suggestion in suggestions:
            if suggestion.type not in (SuggestionType.LOCALE, SuggestionType.SIMILAR):
                continue
            if not suggestion.suggested_path:
                continue

            content_path = self.path_index.find(suggestion.suggested_path)
            if content_path is None:
                continue

            status = content_path.status.value if content_path.status else "UNKNOWN"
            if content_path.is_published:
                log.debug(
                    f"Kept original suggestion type for {suggestion.suggested_path} "
                    f"with status: {status}"
                )
            else:
                suggestion.reason = f"Content is in {status} state. Suggest publishing."

        return suggestions
