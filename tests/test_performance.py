"""Tests for the performance analyzer."""

import pytest

from seo_audit.analyzers.performance import (
    TIMING_SCRIPT,
    PerformanceAnalyzer,
    format_bytes,
    summarize_resources,
)
from seo_audit.models import ResourceTiming


class TestFormatBytes:
    """Test cases for human-readable sizes."""

    def test_zero(self):
        assert format_bytes(0) == "0 Bytes"

    def test_bytes(self):
        assert format_bytes(1000) == "1000 Bytes"

    def test_kilobytes(self):
        assert format_bytes(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_bytes(2 * 1024 * 1024) == "2 MB"

    def test_decimals(self):
        assert format_bytes(1234567) == "1.18 MB"


class TestSummarizeResources:
    """Test cases for the resource summary."""

    def test_counts_by_type_and_size(self):
        resources = [
            ResourceTiming(url="https://example.com/", type="document", size=2048),
            ResourceTiming(url="https://example.com/a.js", type="script", size=1024),
            ResourceTiming(url="https://example.com/b.js", type="script"),
            ResourceTiming(url="https://example.com/c.png", type="image", size=-1),
        ]

        summary = summarize_resources(resources)

        assert summary.total == 4
        assert summary.by_type == {"document": 1, "script": 2, "image": 1}
        assert summary.total_size_bytes == 3072
        assert summary.total_size == "3 KB"

    def test_empty(self):
        summary = summarize_resources([])

        assert summary.total == 0
        assert summary.total_size == "0 Bytes"


class TestPerformanceAnalyzer:
    """Test cases for PerformanceAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        return PerformanceAnalyzer()

    @pytest.mark.asyncio
    async def test_fast_page_scores_100(self, analyzer, snapshot_factory, page_factory):
        page = page_factory({"ttfb": 120, "loadTime": 1500, "fcp": 900, "tti": 1100})
        snapshot = snapshot_factory("<p>x</p>", page=page)

        result = await analyzer.analyze(snapshot)

        assert result.ttfb_ms == 120
        assert result.load_time_ms == 1500
        assert result.fcp_ms == 900
        assert result.tti_ms == 1100
        assert result.issues == []
        assert result.score == 100
        page.evaluate.assert_awaited_once_with(TIMING_SCRIPT, 50)

    @pytest.mark.asyncio
    async def test_slow_timings(self, analyzer, snapshot_factory, page_factory):
        """Each exceeded timing threshold costs 20 points."""
        page = page_factory({"ttfb": 350, "loadTime": 4200, "fcp": 2500, "tti": 3000})
        snapshot = snapshot_factory("<p>x</p>", page=page)

        result = await analyzer.analyze(snapshot)

        assert result.issues == [
            "Time to First Byte (TTFB) is slow: 350ms (should be under 200ms)",
            "Page load time is slow: 4.20s (should be under 3s)",
            "First Contentful Paint is slow: 2.50s (should be under 1.8s)",
        ]
        assert result.score == 40

    @pytest.mark.asyncio
    async def test_heavy_page(self, analyzer, snapshot_factory):
        """Too many requests and too many bytes are both flagged."""
        resources = [
            ResourceTiming(url=f"https://example.com/{i}.js", type="script", size=40 * 1024)
            for i in range(81)
        ]
        snapshot = snapshot_factory("<p>x</p>", resources=resources)

        result = await analyzer.analyze(snapshot)

        assert "High number of HTTP requests: 81 (try to reduce below 80)" in result.issues
        assert "Page size is too large: 3.16 MB (should be under 2 MB)" in result.issues
        assert result.score == 60

    @pytest.mark.asyncio
    async def test_without_live_page(self, analyzer, snapshot_factory):
        """Timings default to zero when there is no page to measure."""
        result = await analyzer.analyze(snapshot_factory("<p>x</p>"))

        assert result.ttfb_ms == 0
        assert result.score == 100

    @pytest.mark.asyncio
    async def test_evaluate_failure_is_isolated(self, analyzer, snapshot_factory, page_factory):
        page = page_factory()
        page.evaluate.side_effect = RuntimeError("Target closed")

        result = await analyzer.analyze(snapshot_factory("<p>x</p>", page=page))

        assert result.score == 0
        assert result.issues == ["Error analyzing performance: Target closed"]

    @pytest.mark.asyncio
    async def test_to_dict_shape(self, analyzer, snapshot_factory):
        data = (await analyzer.analyze(snapshot_factory("<p>x</p>"))).to_dict()

        assert set(data) >= {"score", "issues", "ttfbMs", "loadTimeMs", "fcpMs", "ttiMs", "resources"}
        assert data["resources"]["byType"] == {}
