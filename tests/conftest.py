"""
Pytest fixtures and configuration for broken-links audit tests.
"""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from cf_broken_links.config import AuditConfig, AuditContext
from cf_broken_links.path_index import PathIndex


@pytest.fixture
def config() -> AuditConfig:
    """Configuration without pagination delays."""
    return AuditConfig(
        aem_author_url="https://author.example.com",
        aem_author_token="test-token",
        pagination_delay_ms=0,
    )


@pytest.fixture
def context(config: AuditConfig) -> AuditContext:
    """Audit context logging to the package logger."""
    return AuditContext(
        site_id="site-123",
        base_url="https://www.example.com",
        config=config,
        log=logging.getLogger("cf_broken_links.tests"),
    )


@pytest.fixture
def path_index(context: AuditContext) -> PathIndex:
    return PathIndex(context)


@pytest.fixture
def mock_client() -> MagicMock:
    """AEM Author client where nothing is available."""
    client = MagicMock()
    client.is_available = AsyncMock(return_value=False)
    client.get_children_from_path = AsyncMock(return_value=[])
    return client


@pytest.fixture
def sample_broken_paths_csv(tmp_path: Path) -> Path:
    """Create a sample broken paths CSV export."""
    csv_path = tmp_path / "broken.csv"
    csv_content = """url,request_user_agents,request_count
/content/dam/site/en-US/articles/missing.cfm.model.json,Mozilla/5.0;curl/8.0,12
/content/dam/site/fr-FR/images/photo.jpg,Mozilla/5.0,3
/content/dam/site/en-US/articles/missing.cfm.model.json,Googlebot,5
,Mozilla/5.0,1
"""
    csv_path.write_text(csv_content)
    return csv_path


@pytest.fixture
def sample_broken_paths_excel(tmp_path: Path) -> Path:
    """Create a sample broken paths Excel export."""
    import pandas as pd

    xlsx_path = tmp_path / "broken.xlsx"
    data = {
        "Request URL": [
            "/content/dam/site/en-US/a.jpg",
            "/content/dam/site/de-DE/b.jpg",
        ],
        "Hits": [10, 4],
    }
    pd.DataFrame(data).to_excel(xlsx_path, index=False)
    return xlsx_path


@pytest.fixture
def sample_content_listing_csv(tmp_path: Path) -> Path:
    """Create a sample content listing export."""
    csv_path = tmp_path / "listing.csv"
    csv_content = """path,status
/content/dam/site/en-US/articles/intro,PUBLISHED
/content/dam/site/en-US/articles/missing-draft,draft
/content/dam/site/fr-FR/images/photo.jpg,PUBLISHED
/content/dam/site/en-US/images/photo.jpg,
"""
    csv_path.write_text(csv_content)
    return csv_path
