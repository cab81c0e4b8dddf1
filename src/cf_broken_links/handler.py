"""
Broken content fragment links audit.

The audit runs in three steps, each reading the previous step's result from
``context.audit_result``:
1. Collect the broken content fragment paths
2. Analyze them with the rule engine
3. Hand the suggestions to the caller
"""

from typing import Any, Optional, Protocol

from .aem_client import AemAuthorClient, IndexAuthorClient
from .analysis import AnalysisStrategy
from .collector import FileCollector
from .config import AuditContext
from .models import BrokenPath, ContentPath
from .path_index import PathIndex


class AuditError(Exception):
    """Raised when an audit step runs after a failed step."""
    pass


class BrokenPathCollector(Protocol):
    def fetch_broken_paths(self) -> list[BrokenPath]: ...


def fetch_broken_content_fragment_links(
    context: AuditContext,
    collector: Optional[BrokenPathCollector] = None,
) -> dict[str, Any]:
    """
    Step 1: collect broken content fragment paths.

    Args:
        context: The audit context.
        collector: Source of broken paths. Defaults to the file collector for
            ``config.broken_paths_file``.

    Returns:
        Audit result with ``broken_paths`` and ``success``. Collection errors
        are logged and reported as ``success: False``.
    """
    log = context.log

    try:
        collector = collector or FileCollector.create_from(context)
        broken_paths = collector.fetch_broken_paths()
        log.info(
            f"Found {len(broken_paths)} broken content fragment paths "
            f"from {type(collector).__name__}"
        )

        return {
            "site_id": context.site_id,
            "full_audit_ref": context.base_url,
            "audit_result": {
                "broken_paths": [broken_path.to_dict() for broken_path in broken_paths],
                "success": True,
            },
        }
    except Exception as e:
        log.error(f"Failed to fetch broken content fragment paths: {e}")
        return {
            "site_id": context.site_id,
            "full_audit_ref": context.base_url,
            "audit_result": {
                "error": str(e),
                "success": False,
            },
        }


async def analyze_broken_content_fragment_links(
    context: AuditContext,
    content_listing: Optional[list[ContentPath]] = None,
    aem_author_client: Optional[Any] = None,
) -> dict[str, Any]:
    """
    Step 2: produce a suggestion for every collected broken path.

    The path index is seeded from ``content_listing`` when given. Lookups go
    to AEM Author when credentials are configured, otherwise they are
    answered from the index alone.

    Raises:
        AuditError: If the collection step did not succeed.
    """
    log = context.log
    audit_result = context.audit_result or {}

    if not audit_result.get("success"):
        raise AuditError("Audit failed, skipping content fragment path analysis")

    broken_paths = audit_result.get("broken_paths") or []

    owned_client: Optional[AemAuthorClient] = None
    try:
        path_index = PathIndex(context)
        for content_path in content_listing or []:
            path_index.insert_content_path(content_path)

        if aem_author_client is None:
            if context.config.has_aem_author:
                owned_client = AemAuthorClient.create_from(context, path_index)
                aem_author_client = owned_client
            else:
                log.info("AEM Author not configured, analyzing against the path index only")
                aem_author_client = IndexAuthorClient(context, path_index)

        strategy = AnalysisStrategy(context, aem_author_client, path_index)
        urls = [
            broken_path["url"] if isinstance(broken_path, dict) else str(broken_path)
            for broken_path in broken_paths
        ]
        suggestions = await strategy.analyze(urls)
        log.info(f"Found {len(suggestions)} suggestions for broken content fragment paths")

        return {
            "site_id": context.site_id,
            "full_audit_ref": context.base_url,
            "audit_result": {
                "broken_paths": broken_paths,
                "suggestions": [suggestion.to_dict() for suggestion in suggestions],
                "success": True,
            },
        }
    except Exception as e:
        log.error(f"Failed to analyze broken content fragment paths: {e}")
        return {
            "site_id": context.site_id,
            "full_audit_ref": context.base_url,
            "audit_result": {
                "broken_paths": broken_paths,
                "error": str(e),
                "success": False,
            },
        }
    finally:
        if owned_client is not None:
            await owned_client.close()


def provide_content_fragment_link_suggestions(context: AuditContext) -> dict[str, Any]:
    """
    Step 3: return the suggestions for the caller to persist.

    Raises:
        AuditError: If the analysis step did not succeed.
    """
    audit_result = context.audit_result or {}

    if not audit_result.get("success"):
        raise AuditError("Audit failed, skipping content fragment path suggestions generation")

    suggestions = audit_result.get("suggestions") or []
    context.log.info(f"Providing {len(suggestions)} content fragment path suggestions")

    return {
        "site_id": context.site_id,
        "full_audit_ref": context.base_url,
        "audit_result": {
            "suggestions": suggestions,
            "success": True,
        },
    }


async def run_audit(
    context: AuditContext,
    collector: Optional[BrokenPathCollector] = None,
    content_listing: Optional[list[ContentPath]] = None,
    aem_author_client: Optional[Any] = None,
) -> dict[str, Any]:
    """
    Run all three audit steps.

    Returns:
        The final step's result.

    Raises:
        AuditError: If collection or analysis failed.
    """
    result = fetch_broken_content_fragment_links(context, collector)
    context.audit_result = result["audit_result"]

    result = await analyze_broken_content_fragment_links(
        context, content_listing, aem_author_client
    )
    context.audit_result = result["audit_result"]

    return provide_content_fragment_link_suggestions(context)
