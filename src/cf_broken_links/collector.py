"""
Broken path and content listing loading from CSV, Excel and JSON exports.

This module handles ingestion of:
- Broken content fragment paths (404 exports from CDN logs or RUM)
- Content listings (path/status exports of the DAM) used to seed the index
"""

from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .config import AuditContext
from .locale import Locale
from .models import BrokenPath, ContentPath, ContentStatus


class CollectorError(Exception):
    """Raised when broken path or content listing loading fails."""
    pass


# Common column name variations for exported data
URL_COLUMN_VARIANTS = ["url", "path", "request_url", "request_path", "uri", "broken_path"]
USER_AGENT_COLUMN_VARIANTS = ["request_user_agents", "user_agents", "user_agent", "request_user_agent"]
COUNT_COLUMN_VARIANTS = ["request_count", "count", "requests", "hits", "total_requests"]
STATUS_COLUMN_VARIANTS = ["status", "content_status", "state", "publish_status"]

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls", ".json")


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Args:
        df: The DataFrame to search.
        variants: List of possible column name variants.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        if variant in normalized_columns:
            return normalized_columns[variant]

    return None


def read_table(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> pd.DataFrame:
    """
    Read a CSV, Excel or JSON export into a DataFrame.

    Raises:
        CollectorError: If the file is missing, unsupported or unreadable.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if not path.exists():
        raise CollectorError(f"File not found: {file_path}")

    if suffix not in SUPPORTED_SUFFIXES:
        raise CollectorError(
            f"Unsupported file format: {suffix}. Supported formats: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        if suffix == ".csv":
            try:
                return pd.read_csv(path, encoding="utf-8")
            except UnicodeDecodeError:
                return pd.read_csv(path, encoding="latin-1")
        if suffix == ".json":
            return pd.read_json(path, orient="records")
        if sheet_name:
            return pd.read_excel(path, sheet_name=sheet_name)
        return pd.read_excel(path)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except Exception as e:
        raise CollectorError(f"Failed to read {suffix.lstrip('.').upper()} file: {e}")


def _parse_user_agents(value: object) -> list[str]:
    """User agents come as a list (JSON) or a ``;``/``|`` separated string."""
    if isinstance(value, (list, tuple)):
        return [str(agent).strip() for agent in value if str(agent).strip()]
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return []
    text = str(value)
    for separator in ("|", ";"):
        text = text.replace(separator, "\n")
    return [agent.strip() for agent in text.splitlines() if agent.strip()]


def parse_broken_paths(df: pd.DataFrame) -> list[BrokenPath]:
    """
    Parse a DataFrame into BrokenPath records.

    Rows for the same URL are merged: counts are summed and user agents
    combined in first-seen order. An export without any rows, or with
    only blank URLs, means nothing was broken and yields an empty list.

    Raises:
        CollectorError: If the frame has columns but no URL column.
    """
    if len(df.columns) == 0:
        return []

    url_col = _find_column(df, URL_COLUMN_VARIANTS)
    if url_col is None:
        raise CollectorError(
            f"No URL column found. Expected one of: {', '.join(URL_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(col) for col in df.columns)}"
        )

    agent_col = _find_column(df, USER_AGENT_COLUMN_VARIANTS)
    count_col = _find_column(df, COUNT_COLUMN_VARIANTS)

    by_url: dict[str, BrokenPath] = {}

    for _, row in df.iterrows():
        url = row[url_col]
        if pd.isna(url) or not str(url).strip():
            continue
        url = str(url).strip()

        agents = _parse_user_agents(row[agent_col]) if agent_col else []

        count: Optional[int] = None
        if count_col and not pd.isna(row[count_col]):
            try:
                count = int(float(row[count_col]))
            except (ValueError, TypeError):
                pass

        existing = by_url.get(url)
        if existing is None:
            by_url[url] = BrokenPath(url=url, request_user_agents=agents, request_count=count)
            continue

        for agent in agents:
            if agent not in existing.request_user_agents:
                existing.request_user_agents.append(agent)
        if count is not None:
            existing.request_count = (existing.request_count or 0) + count

    return list(by_url.values())


def load_broken_paths(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[BrokenPath]:
    """
    Load broken paths from a CSV, Excel or JSON file.

    Args:
        file_path: Path to the export.
        sheet_name: Optional sheet name for Excel files.

    Returns:
        De-duplicated BrokenPath records in file order, empty when the
        export holds no broken paths.

    Raises:
        CollectorError: If the file cannot be read or is invalid.
    """
    return parse_broken_paths(read_table(file_path, sheet_name))


def load_content_listing(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[ContentPath]:
    """
    Load a content listing export of ``path`` and ``status`` columns.

    Locales are derived from the paths. Rows without a path are skipped and
    a missing status column means UNKNOWN.

    Raises:
        CollectorError: If the file cannot be read or has no path column.
    """
    df = read_table(file_path, sheet_name)
    if df.empty:
        return []

    path_col = _find_column(df, URL_COLUMN_VARIANTS)
    if path_col is None:
        raise CollectorError(
            f"No path column found. Expected one of: {', '.join(URL_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(col) for col in df.columns)}"
        )
    status_col = _find_column(df, STATUS_COLUMN_VARIANTS)

    content_paths: list[ContentPath] = []
    for _, row in df.iterrows():
        path = row[path_col]
        if pd.isna(path) or not str(path).strip():
            continue
        path = str(path).strip()
        status = row[status_col] if status_col and not pd.isna(row[status_col]) else None
        content_paths.append(
            ContentPath(path, ContentStatus.parse(status), Locale.from_path(path))
        )

    return content_paths


class FileCollector:
    """
    Collects broken content fragment paths from an exported file.

    Stands in for the CDN log query of the hosted audit: the export holds the
    content fragment requests that answered 404.
    """

    def __init__(self, context: AuditContext, file_path: Union[str, Path]):
        self.context = context
        self.file_path = Path(file_path)

    @classmethod
    def create_from(cls, context: AuditContext) -> "FileCollector":
        """
        Create a collector for the configured broken paths file.

        Raises:
            CollectorError: If no broken paths file is configured.
        """
        file_path = context.config.broken_paths_file
        if file_path is None:
            raise CollectorError(
                "Broken paths file missing: set CF_BROKEN_PATHS_FILE or pass a file"
            )
        return cls(context, file_path)

    def fetch_broken_paths(self) -> list[BrokenPath]:
        self.context.log.debug(f"Loading broken paths from {self.file_path}")
        return load_broken_paths(self.file_path)
