"""
Repair rules for broken content fragment paths.

Each rule tries one repair heuristic for a single broken path and returns a
Suggestion, or None when it has nothing to offer. Rules are tried in
ascending priority order by the analysis strategy:

1. PublishRule - the content exists on Author but is not published
2. LocaleFallbackRule - the same content exists under a sibling locale
3. SimilarPathRule - a sibling in the parent folder is a near-typo match
4. NearestMatchRule - the closest file name anywhere in the locale tree
"""

from typing import Any, Optional, Protocol

from .config import AuditContext
from .language_tree import LanguageTree
from .levenshtein import LevenshteinDistance
from .locale import Locale
from .models import ContentPath, Suggestion
from .path_index import PathIndex
from .path_utils import (
    get_parent_path,
    has_double_slashes,
    remove_double_slashes,
    remove_locale_from_path,
)


class RuleError(Exception):
    """Raised when a rule cannot run with the collaborators it was given."""
    pass


class AuthorClient(Protocol):
    """What the rules need from an AEM Author client."""

    async def is_available(self, path: str) -> bool: ...

    async def get_children_from_path(self, parent_path: str) -> list[ContentPath]: ...


class BaseRule:
    """
    Base class for repair rules.

    Subclasses implement ``apply_rule``. Rules hold no per-path state, so
    one instance serves every broken path of an audit run.
    """

    def __init__(
        self,
        context: AuditContext,
        priority: Optional[int] = None,
        aem_author_client: Optional[AuthorClient] = None,
    ):
        self.context = context
        if priority is None:
            priority = context.config.default_rule_priority
        self.priority = priority
        self.aem_author_client = aem_author_client

    def get_priority(self) -> int:
        return self.priority

    def get_aem_author_client(self) -> AuthorClient:
        """
        Return the injected AEM Author client.

        Raises:
            RuleError: If the rule was constructed without a client.
        """
        if self.aem_author_client is None:
            message = "AemAuthorClient not injected"
            self.context.log.error(message)
            raise RuleError(message)
        return self.aem_author_client

    async def apply(self, broken_path: str) -> Optional[Suggestion]:
        return await self.apply_rule(broken_path)

    async def apply_rule(self, broken_path: str) -> Optional[Suggestion]:
        raise NotImplementedError("Subclasses must implement apply_rule()")


class PublishRule(BaseRule):
    """Suggest publishing when the broken path exists on Author."""

    def __init__(self, context: AuditContext, aem_author_client: Optional[AuthorClient] = None):
        super().__init__(context, 1, aem_author_client)

    async def apply_rule(self, broken_path: str) -> Optional[Suggestion]:
        self.context.log.debug(f"Applying PublishRule to path: {broken_path}")

        if await self.get_aem_author_client().is_available(broken_path):
            return Suggestion.publish(broken_path)

        return None


class LocaleFallbackRule(BaseRule):
    """
    Suggest the same path under a related locale.

    When the path carries a locale segment, every similar language root is
    substituted in turn and the first one available on Author wins. When it
    carries none but has an empty segment (``//``), the English fallbacks are
    tried in that gap, since a missing locale usually leaves one behind.
    """

    def __init__(self, context: AuditContext, aem_author_client: Optional[AuthorClient] = None):
        super().__init__(context, 2, aem_author_client)

    async def apply_rule(self, broken_path: str) -> Optional[Suggestion]:
        self.context.log.debug(f"Applying LocaleFallbackRule to path: {broken_path}")

        if not broken_path:
            return None

        client = self.get_aem_author_client()
        locale = Locale.from_path(broken_path)

        if locale is not None:
            for candidate_code in LanguageTree.find_similar_language_roots(locale.code):
                candidate = locale.replace_in_path(broken_path, candidate_code)
                if candidate == broken_path:
                    continue
                if await client.is_available(candidate):
                    self.context.log.info(
                        f"Found locale fallback for {broken_path}: {candidate}"
                    )
                    return Suggestion.locale(broken_path, candidate)
            return None

        if has_double_slashes(broken_path):
            return await self.try_locale_insertion(broken_path)

        return None

    async def try_locale_insertion(self, broken_path: str) -> Optional[Suggestion]:
        """Insert each English fallback into the first ``//`` of the path."""
        client = self.get_aem_author_client()

        for code in LanguageTree.find_english_fallbacks():
            candidate = broken_path.replace("//", f"/{code}/", 1)
            if await client.is_available(candidate):
                self.context.log.info(
                    f"Found locale insertion for {broken_path}: {candidate}"
                )
                return Suggestion.locale(broken_path, candidate)

        return None


class SimilarPathRule(BaseRule):
    """
    Suggest a sibling of the broken path with a near-identical name.

    Double slashes are repaired first. Siblings come from the path index,
    or from the Author client when the index knows none under the parent
    folder. They are compared with locale segments removed, accepting at
    most ``config.max_levenshtein_distance`` edits.
    """

    def __init__(
        self,
        context: AuditContext,
        aem_author_client: Optional[AuthorClient] = None,
        path_index: Optional[PathIndex] = None,
    ):
        super().__init__(context, 3, aem_author_client)
        self.path_index = path_index

    async def apply_rule(self, broken_path: str) -> Optional[Suggestion]:
        self.context.log.debug(f"Applying SimilarPathRule to path: {broken_path}")

        client = self.get_aem_author_client()
        path = broken_path

        double_slash = await self.check_double_slash(broken_path)
        if double_slash is not None:
            if double_slash["suggestion"] is not None:
                return double_slash["suggestion"]
            path = double_slash["fixed_path"]

        parent_path = get_parent_path(path)
        if not parent_path:
            return None

        children: list[ContentPath] = []
        if self.path_index is not None:
            children = self.path_index.find_children(parent_path)
        if not children:
            children = await client.get_children_from_path(parent_path)
        if not children:
            return None

        match = self.find_similar_path(
            path, children, self.context.config.max_levenshtein_distance
        )
        if match is None:
            return None

        self.context.log.info(f"Found similar path for {broken_path}: {match.path}")
        return Suggestion.similar(broken_path, match.path)

    async def check_double_slash(self, broken_path: str) -> Optional[dict[str, Any]]:
        """
        Try the broken path with its double slashes collapsed.

        Returns:
            None when the path has no double slashes. Otherwise a dict with
            the collapsed ``fixed_path`` and a ``suggestion`` that is set
            only when the collapsed path is available.
        """
        if not has_double_slashes(broken_path):
            return None

        fixed_path = remove_double_slashes(broken_path)
        suggestion = None
        if await self.get_aem_author_client().is_available(fixed_path):
            suggestion = Suggestion.similar(broken_path, fixed_path)

        return {"suggestion": suggestion, "fixed_path": fixed_path}

    @staticmethod
    def find_similar_path(
        broken_path: str,
        candidates: list[ContentPath],
        max_distance: int,
    ) -> Optional[ContentPath]:
        """
        Pick the candidate closest to the broken path.

        Locale segments are ignored on both sides. The first candidate wins
        ties.
        """
        target = remove_locale_from_path(broken_path)
        best: Optional[ContentPath] = None
        best_distance = max_distance + 1

        for candidate in candidates:
            distance = LevenshteinDistance.calculate(
                target, remove_locale_from_path(candidate.path)
            )
            if distance < best_distance:
                best = candidate
                best_distance = distance

        return best


class NearestMatchRule(BaseRule):
    """
    Suggest the indexed file whose name is closest to the broken one.

    Candidates are the indexed paths under the broken path's locale root
    (everything up to and including the locale segment), or under its
    parent folder when the path has no locale. Only file names are
    compared. Works from the index alone and needs no Author client.
    """

    REASON = "Nearest match in locale tree"

    def __init__(
        self,
        context: AuditContext,
        path_index: Optional[PathIndex] = None,
        aem_author_client: Optional[AuthorClient] = None,
    ):
        super().__init__(context, 4, aem_author_client)
        self.path_index = path_index

    async def apply_rule(self, broken_path: str) -> Optional[Suggestion]:
        self.context.log.debug(f"Applying NearestMatchRule to path: {broken_path}")

        if self.path_index is None or not broken_path:
            return None

        scope = self.candidate_scope(broken_path)
        if not scope:
            return None

        candidates = [
            candidate
            for candidate in self.path_index.find_paths_with_prefix(scope)
            if candidate.path != broken_path
        ]
        match = self.find_nearest(
            broken_path, candidates, self.context.config.nearest_match_max_ratio
        )
        if match is None:
            return None

        return Suggestion.similar(broken_path, match.path, reason=self.REASON)

    @staticmethod
    def candidate_scope(broken_path: str) -> Optional[str]:
        """Return the folder prefix that candidates must live under."""
        locale = Locale.from_path(broken_path)
        segments = broken_path.split("/")
        if locale is not None and locale.code in segments[:-1]:
            index = segments.index(locale.code)
            return "/".join(segments[: index + 1]) + "/"

        parent_path = get_parent_path(broken_path)
        return parent_path + "/" if parent_path else None

    @staticmethod
    def find_nearest(
        broken_path: str,
        candidates: list[ContentPath],
        max_ratio: float,
    ) -> Optional[ContentPath]:
        """
        Pick the candidate with the closest basename.

        A candidate is accepted when its edit distance divided by the longer
        basename length is at most ``max_ratio``. The first candidate wins
        ties.
        """
        name = _basename(broken_path)
        best: Optional[ContentPath] = None
        best_distance: Optional[int] = None

        for candidate in candidates:
            candidate_name = _basename(candidate.path)
            longest = max(len(name), len(candidate_name))
            if longest == 0:
                continue

            distance = LevenshteinDistance.calculate(name, candidate_name)
            if distance / longest > max_ratio:
                continue
            if best_distance is None or distance < best_distance:
                best = candidate
                best_distance = distance

        return best


def _basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]
