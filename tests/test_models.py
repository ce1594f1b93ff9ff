"""Tests for the audit data models."""

import pytest

from seo_audit.models import (
    RESULT_TYPES,
    AnalysisDepth,
    Category,
    CategoryResult,
    LinksResult,
    PageSnapshot,
    ProbeResponse,
    clamp_score,
    round_half_up,
)


class TestAnalysisDepth:
    """Test cases for AnalysisDepth parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("basic", AnalysisDepth.BASIC),
        ("STANDARD", AnalysisDepth.STANDARD),
        (AnalysisDepth.DEEP, AnalysisDepth.DEEP),
    ])
    def test_parse(self, value, expected):
        assert AnalysisDepth.parse(value) is expected

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid depth 'thorough'"):
            AnalysisDepth.parse("thorough")


class TestScoreRounding:
    """Test cases for half-up rounding and clamping."""

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(78.4) == 78

    def test_clamp(self):
        assert clamp_score(-15) == 0
        assert clamp_score(130) == 100
        assert clamp_score(99.5) == 100

    def test_result_score_is_clamped_on_creation(self):
        assert LinksResult(score=-30).score == 0


class TestCategory:
    """Test cases for Category."""

    def test_every_category_has_a_result_type(self):
        assert set(RESULT_TYPES) == set(Category)
        for category, result_type in RESULT_TYPES.items():
            assert issubclass(result_type, CategoryResult)
            assert result_type.category is category

    def test_labels(self):
        assert Category.MOBILE_OPTIMIZATION.label == "mobile optimization"
        assert Category.META_TAGS.label == "meta tags"


class TestPageSnapshot:
    """Test cases for PageSnapshot."""

    def test_from_html(self):
        snapshot = PageSnapshot.from_html("<title>x</title>", final_url="https://example.com/b")

        assert snapshot.url == "https://example.com/b"
        assert snapshot.document.title.string == "x"
        assert snapshot.page is None

    def test_header_lookup_is_case_insensitive(self):
        snapshot = PageSnapshot.from_html(
            "", final_url="https://example.com/", headers={"X-Frame-Options": "DENY"}
        )

        assert snapshot.header("x-frame-options") == "DENY"
        assert snapshot.header("content-security-policy") is None


class TestProbeResponse:
    """Test cases for ProbeResponse."""

    def test_content_length(self):
        assert ProbeResponse(200, {"Content-Length": "2048"}).content_length == 2048

    def test_missing_or_invalid_content_length(self):
        assert ProbeResponse(200).content_length == 0
        assert ProbeResponse(200, {"content-length": "n/a"}).content_length == 0
