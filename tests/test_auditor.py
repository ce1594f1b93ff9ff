"""Tests for the audit pipeline."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from seo_audit.analyzers import ContentAnalyzer, HeadingsAnalyzer, MetaTagsAnalyzer
from seo_audit.auditor import AuditRun, AuditState, PageAuditor
from seo_audit.config import AuditConfig
from seo_audit.errors import HttpError, NoBrowserAvailable, OperationTimeout
from seo_audit.fallback import MOCK_WARNING
from seo_audit.models import AnalysisDepth, AuditRequest, Category, MANDATORY_CATEGORIES
from seo_audit.scoring import calculate_overall_score

from tests.conftest import build_snapshot, fake_page, fake_session


HTML = """
<html><head><title>Plumbing Services in Springfield | Example Co</title></head>
<body><h1>Plumbing</h1><h2>Repairs</h2><p>We fix pipes.</p></body></html>
"""

MANDATORY_KEYS = {category.value for category in MANDATORY_CATEGORIES}


class ExplodingAnalyzer(ContentAnalyzer):
    async def _analyze(self, snapshot, depth):
        raise RuntimeError("boom")


def _auditor(config=None, session=None, load=None, acquire=None, analyzers=None):
    session = session or fake_session()
    session_manager = MagicMock()
    session_manager.acquire = acquire or AsyncMock(return_value=session)

    navigator = MagicMock()
    navigator.load = load or AsyncMock(
        return_value=build_snapshot(HTML, url="https://www.example.com/", session=session)
    )

    auditor = PageAuditor(
        config or AuditConfig(),
        session_manager=session_manager,
        navigator=navigator,
        analyzers=analyzers if analyzers is not None else [MetaTagsAnalyzer(), HeadingsAnalyzer()],
    )
    return auditor, session


async def _hang(*args, **kwargs):
    await asyncio.sleep(10)


class TestPageAuditor:
    """Test cases for PageAuditor."""

    @pytest.mark.asyncio
    async def test_successful_audit(self):
        auditor, session = _auditor()
        run = AuditRun(AuditRequest("https://example.com/", AnalysisDepth.BASIC))

        result = await auditor.execute(run)

        assert run.state is AuditState.DONE
        assert [state for state, _ in run.history] == [
            AuditState.ACQUIRING,
            AuditState.NAVIGATING,
            AuditState.ANALYZING,
            AuditState.AGGREGATING,
            AuditState.DONE,
        ]
        assert result.analyzed_url == "https://www.example.com/"
        assert result.analysis_depth is AnalysisDepth.BASIC
        assert list(result.categories) == ["metaTags", "headings"]
        assert result.overall_score == calculate_overall_score(result.categories)
        assert result.warning is None
        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_navigation_uses_configured_timeout(self):
        auditor, session = _auditor(AuditConfig(navigation_timeout=12))

        await auditor.audit("https://example.com/")

        auditor.navigator.load.assert_awaited_once_with(session, "https://example.com/", 12)

    @pytest.mark.asyncio
    async def test_analyzer_failure_is_isolated(self):
        auditor, _ = _auditor(analyzers=[MetaTagsAnalyzer(), ExplodingAnalyzer()])

        result = await auditor.audit("https://example.com/")

        assert result.categories["content"].score == 0
        assert result.categories["content"].issues == ("Error analyzing content: boom",)
        assert result.categories["metaTags"].score > 0
        assert "Error analyzing content: boom" in result.recommendations

    @pytest.mark.asyncio
    async def test_timeout_with_fallback(self):
        """A timed-out audit returns the simulated result and releases the browser."""
        config = AuditConfig(analysis_timeout=0.05, fallback_to_mock=True)
        auditor, session = _auditor(config, load=AsyncMock(side_effect=_hang))
        run = AuditRun(AuditRequest("https://example.com/"))

        result = await auditor.execute(run)

        assert run.state is AuditState.TIMED_OUT
        assert isinstance(run.error, OperationTimeout)
        assert result.warning == (
            "Live analysis failed (Operation timed out after 0.05s); "
            "showing simulated data instead"
        )
        assert set(result.to_dict()["categories"]) == MANDATORY_KEYS
        assert result.overall_score == calculate_overall_score(result.categories)
        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout_without_fallback(self):
        config = AuditConfig(analysis_timeout=0.05, fallback_to_mock=False)
        auditor, session = _auditor(config, load=AsyncMock(side_effect=_hang))

        with pytest.raises(OperationTimeout):
            await auditor.audit("https://example.com/")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_http_error_without_fallback(self):
        load = AsyncMock(side_effect=HttpError("https://example.com/", 500))
        auditor, session = _auditor(load=load)

        with pytest.raises(HttpError):
            await auditor.audit("https://example.com/")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_browser_with_fallback(self):
        acquire = AsyncMock(side_effect=NoBrowserAvailable([("managed", "not installed")]))
        auditor, session = _auditor(AuditConfig(fallback_to_mock=True), acquire=acquire)

        result = await auditor.audit("https://example.com/")

        assert "Could not launch any browser" in result.warning
        session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_mask_result(self):
        auditor, session = _auditor()
        session.close.side_effect = RuntimeError("connection lost")

        result = await auditor.audit("https://example.com/")

        assert result.warning is None

    @pytest.mark.asyncio
    async def test_mock_mode_skips_browser(self):
        auditor, _ = _auditor(AuditConfig(use_mock=True))

        result = await auditor.audit("https://example.com/", "deep")

        auditor.session_manager.acquire.assert_not_awaited()
        assert result.warning == MOCK_WARNING
        assert result.analysis_depth is AnalysisDepth.DEEP
        assert set(result.categories) == MANDATORY_KEYS

    @pytest.mark.asyncio
    async def test_empty_url(self):
        auditor, _ = _auditor()

        with pytest.raises(ValueError, match="URL is required"):
            await auditor.audit("  ")

    @pytest.mark.asyncio
    async def test_invalid_depth(self):
        auditor, _ = _auditor()

        with pytest.raises(ValueError):
            await auditor.audit("https://example.com/", "exhaustive")

    @pytest.mark.asyncio
    async def test_concurrent_audits_get_separate_sessions(self):
        sessions = [fake_session(), fake_session()]
        acquire = AsyncMock(side_effect=sessions)

        async def load(session, url, timeout):
            return build_snapshot(HTML, url=url, session=session)

        auditor, _ = _auditor(acquire=acquire, load=AsyncMock(side_effect=load))

        results = await asyncio.gather(
            auditor.audit("https://a.example.com/"),
            auditor.audit("https://b.example.com/"),
        )

        assert [r.analyzed_url for r in results] == ["https://a.example.com/", "https://b.example.com/"]
        for session in sessions:
            session.close.assert_awaited_once()


class TestAuditRun:
    """Test cases for AuditRun state bookkeeping."""

    def test_terminal_state_is_final(self):
        run = AuditRun(AuditRequest("https://example.com/"))
        run.transition(AuditState.ACQUIRING)
        run.transition(AuditState.FAILED)

        run.transition(AuditState.DONE)

        assert run.state is AuditState.FAILED
        assert len(run.history) == 2


class TestDefaultAnalyzerSet:
    """A live audit with every default analyzer, against mocked browser objects."""

    @pytest.mark.parametrize("html", [HTML, ""])
    @pytest.mark.asyncio
    async def test_all_categories_reported(self, html):
        page = fake_page({"overflow": False, "targets": 10, "tooSmallTargets": 0,
                          "textElements": 20, "tooSmallText": 0})
        session = fake_session(page=page)
        session_manager = MagicMock()
        session_manager.acquire = AsyncMock(return_value=session)
        navigator = MagicMock()
        navigator.load = AsyncMock(
            return_value=build_snapshot(html, url="https://www.example.com/", session=session)
        )
        auditor = PageAuditor(AuditConfig(), session_manager=session_manager, navigator=navigator)

        result = await auditor.audit("https://example.com/", "standard")

        assert len(auditor.analyzers) == 10
        assert set(result.categories) == {category.value for category in Category}
        for name, category in result.categories.items():
            assert 0 <= category.score <= 100, name
            assert isinstance(category.issues, tuple), name
            assert not any(issue.startswith("Error analyzing") for issue in category.issues), name
        assert result.overall_score == calculate_overall_score(result.categories)
        assert result.warning is None
        session.close.assert_awaited_once()
