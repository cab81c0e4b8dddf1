"""
AEM Author client for content fragment lookups.

This module talks to the AEM Sites content fragments API to check whether a
path exists on Author and to crawl folders. Everything it sees is cached in
the run's PathIndex so later rules can answer from memory.
"""

import asyncio
from typing import Any, Optional

import httpx

from .config import AuditContext
from .locale import Locale
from .models import ContentPath, ContentStatus
from .path_index import PathIndex
from .path_utils import DAM_PREFIX, DAM_ROOT, get_parent_path


class AemClientError(Exception):
    """Raised when AEM Author requests fail."""
    pass


class AemAuthorClient:
    """
    Async client for the AEM Author content fragments API.

    Usage:
        async with AemAuthorClient.create_from(context, path_index) as client:
            if await client.is_available("/content/dam/site/en-US/article"):
                ...
    """

    API_SITES_BASE = "/adobe/sites/cf"
    API_SITES_FRAGMENTS = f"{API_SITES_BASE}/fragments"

    def __init__(
        self,
        context: AuditContext,
        author_url: str,
        auth_token: str,
        path_index: Optional[PathIndex] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the client.

        Args:
            context: Audit context, used for configuration and logging.
            author_url: Base URL of the AEM Author instance.
            auth_token: Bearer token for the API.
            path_index: Index that receives every fetched content path.
            http_client: Optional preconfigured httpx client. One is created
                (and closed by ``close``) when not given.
        """
        self.context = context
        self.author_url = author_url.rstrip("/")
        self.auth_token = auth_token
        self.path_index = path_index

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(context.config.request_timeout, connect=10.0),
        )

    @classmethod
    def create_from(
        cls,
        context: AuditContext,
        path_index: Optional[PathIndex] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "AemAuthorClient":
        """
        Create a client from the audit configuration.

        Raises:
            AemClientError: If the Author URL or token is not configured.
        """
        config = context.config
        if not config.aem_author_url or not config.aem_author_token:
            raise AemClientError(
                "AEM Author configuration missing: AEM_AUTHOR_URL and AEM_AUTHOR_TOKEN required"
            )
        return cls(context, config.aem_author_url, config.aem_author_token, path_index, http_client)

    async def __aenter__(self) -> "AemAuthorClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    @staticmethod
    def is_breaking_point(path: Optional[str]) -> bool:
        """Check if a folder walk has left the DAM and must stop."""
        return not path or not path.startswith(DAM_PREFIX) or path == DAM_ROOT

    @staticmethod
    def parse_content_status(status: Optional[str]) -> ContentStatus:
        return ContentStatus.parse(status)

    def create_url(self, fragment_path: str, cursor: Optional[str] = None) -> httpx.URL:
        params = {"path": fragment_path, "projection": "minimal"}
        if cursor:
            params["cursor"] = cursor
        return httpx.URL(f"{self.author_url}{self.API_SITES_FRAGMENTS}", params=params)

    def create_auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.auth_token}",
            "Accept": "application/json",
        }

    async def is_available(self, path: str) -> bool:
        """
        Check whether exactly one content fragment exists at ``path``.

        A folder lists several items and a missing path none, so neither
        counts as available. Any items returned are cached in the index.

        Raises:
            AemClientError: If the request or response parsing fails.
        """
        try:
            response = await self.http_client.get(
                self.create_url(path), headers=self.create_auth_headers()
            )
            if not response.is_success:
                return False

            items = _items_from(response.json())
            self._cache_items(items)
            return len(items) == 1
        except Exception as e:
            raise AemClientError(f"Failed to check AEM Author availability for {path}: {e}")

    async def fetch_with_pagination(
        self, path: str, cursor: Optional[str] = None
    ) -> tuple[list[dict[str, Any]], Optional[str]]:
        """
        Fetch one page of content.

        Returns:
            The page items and the cursor of the next page (None on the last).

        Raises:
            AemClientError: If the API answers with an error status.
        """
        response = await self.http_client.get(
            self.create_url(path, cursor), headers=self.create_auth_headers()
        )
        if not response.is_success:
            raise AemClientError(f"HTTP {response.status_code}: {response.reason_phrase}")

        data = response.json()
        next_cursor = data.get("cursor") if isinstance(data, dict) else None
        return _items_from(data), next_cursor or None

    async def fetch_content_with_pagination(self, path: str) -> list[dict[str, Any]]:
        """
        Crawl all content under ``path``, following cursors.

        Stops after ``config.max_pages`` pages. A failing page ends the crawl
        and whatever was fetched so far is kept.
        """
        log = self.context.log
        config = self.context.config

        all_items: list[dict[str, Any]] = []
        cursor: Optional[str] = None
        page_count = 0

        log.debug(f"Starting crawl for path: {path}")

        while True:
            page_count += 1
            try:
                suffix = f" (cursor: {cursor})" if cursor else ""
                log.debug(f"Fetching page {page_count} for path: {path}{suffix}")

                items, cursor = await self.fetch_with_pagination(path, cursor)
                if items:
                    all_items.extend(items)
                    log.debug(
                        f"Page {page_count}: Found {len(items)} items (total: {len(all_items)})"
                    )
            except Exception as e:
                log.error(f"Error fetching page {page_count} for path {path}: {e}")
                break

            if not cursor or page_count >= config.max_pages:
                break
            await asyncio.sleep(config.pagination_delay_ms / 1000)

        self._cache_items(all_items)

        log.info(
            f"Complete crawl finished for path: {path}. "
            f"Found {len(all_items)} total items across {page_count} pages"
        )
        return all_items

    async def fetch_content(self, path: str) -> list[dict[str, Any]]:
        try:
            return await self.fetch_content_with_pagination(path)
        except Exception as e:
            raise AemClientError(f"Failed to fetch AEM Author content for {path}: {e}")

    async def get_children_from_path(self, parent_path: str) -> list[ContentPath]:
        """
        Return the content directly under ``parent_path``.

        Answers from the index when it already knows children of the folder.
        Otherwise the folder is crawled if it exists on Author, or the lookup
        moves one folder up until it leaves the DAM.
        """
        log = self.context.log
        log.debug(f"Getting children paths from parent: {parent_path}")

        if self.path_index is None:
            log.debug("PathIndex not available, returning empty list")
            return []

        if self.is_breaking_point(parent_path):
            log.debug(f"Reached breaking point: {parent_path}")
            return []

        cached_children = self.path_index.find_children(parent_path)
        if cached_children:
            log.debug(f"Found {len(cached_children)} children in cache for parent: {parent_path}")
            return cached_children

        log.debug("No children found in cache")

        try:
            available = await self.is_available(parent_path)
        except AemClientError as e:
            log.error(f"Error getting children from path {parent_path}: {e}")
            return []

        if available:
            log.info(f"Parent path is available on Author: {parent_path}")
            try:
                await self.fetch_content(parent_path)
                log.debug(f"Fetched all content for parent path: {parent_path}")
            except AemClientError as e:
                log.warning(f"Failed to fetch complete content for {parent_path}: {e}")
            return self.path_index.find_children(parent_path)

        next_parent = get_parent_path(parent_path)
        if not next_parent:
            log.debug(f"No next parent found for: {parent_path}")
            return []

        log.debug(f"Parent path not available, trying next parent up: {next_parent}")
        return await self.get_children_from_path(next_parent)

    def _cache_items(self, items: list[dict[str, Any]]) -> None:
        if self.path_index is None:
            return

        for item in items:
            path = item.get("path") if isinstance(item, dict) else None
            if not isinstance(path, str):
                continue
            self.path_index.insert_content_path(
                ContentPath(
                    path,
                    self.parse_content_status(item.get("status")),
                    Locale.from_path(path),
                )
            )


class IndexAuthorClient:
    """
    Answers Author lookups from the path index alone.

    Used when no AEM Author credentials are configured and the index was
    filled from a content listing export instead.
    """

    def __init__(self, context: AuditContext, path_index: PathIndex):
        self.context = context
        self.path_index = path_index

    async def is_available(self, path: str) -> bool:
        return self.path_index.contains(path)

    async def get_children_from_path(self, parent_path: str) -> list[ContentPath]:
        """Return indexed children, moving up a folder while none are found."""
        current: Optional[str] = parent_path
        while not AemAuthorClient.is_breaking_point(current):
            children = self.path_index.find_children(current)
            if children:
                return children
            current = get_parent_path(current)

        self.context.log.debug(f"No indexed children found above: {parent_path}")
        return []


def _items_from(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    return []
