"""Shared fixtures for the audit engine tests.

No test here launches a browser: live pages and sessions are replaced by
mocks that record calls and return canned measurements.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from seo_audit.browser_config import BrowserConfig
from seo_audit.models import PageSnapshot, ProbeResponse


def build_snapshot(html: str, url: str = "https://example.com/", **kwargs) -> PageSnapshot:
    """PageSnapshot from raw HTML, with optional headers/resources/page/session."""
    return PageSnapshot.from_html(html, final_url=url, **kwargs)


def fake_page(evaluate_result=None):
    """Mock Playwright page whose evaluate() returns ``evaluate_result``."""
    page = MagicMock()
    page.evaluate = AsyncMock(return_value=evaluate_result)
    page.set_content = AsyncMock()
    page.close = AsyncMock()
    return page


def fake_session(probe=None, page=None):
    """Mock BrowserSession.

    Args:
        probe: Callable url -> ProbeResponse (or exception to raise); defaults to 404
        page: Page returned by new_page()
    """
    session = MagicMock()
    session.config = BrowserConfig()

    async def _probe(url, method="HEAD", timeout=5.0):
        if probe is None:
            return ProbeResponse(status=404)
        outcome = probe(url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    session.probe = AsyncMock(side_effect=_probe)
    session.new_page = AsyncMock(return_value=page or fake_page())
    session.close_page = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def snapshot_factory():
    """Factory fixture building PageSnapshots from HTML."""
    return build_snapshot


@pytest.fixture
def page_factory():
    return fake_page


@pytest.fixture
def session_factory():
    return fake_session
