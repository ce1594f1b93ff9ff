"""Tests for the content analyzer."""

import pytest

from seo_audit.analyzers.content import ContentAnalyzer, classify_readability, top_keyword
from seo_audit.models import AnalysisDepth


def _paragraphs(count, sentence="The quick brown fox jumps over the lazy dog.", sentences=1):
    body = "".join(f"<p>{' '.join([sentence] * sentences)}</p>" for _ in range(count))
    return f"<html><body>{body}</body></html>"


class TestReadability:
    """Test cases for readability bands."""

    def test_bands(self):
        assert classify_readability(8) == "easy"
        assert classify_readability(12) == "medium"
        assert classify_readability(20) == "medium"
        assert classify_readability(21) == "difficult"


class TestTopKeyword:
    """Test cases for keyword extraction."""

    def test_short_tokens_are_ignored(self):
        """Tokens of three characters or fewer never win."""
        assert top_keyword(["the", "the", "the", "plumbing"]) == ("plumbing", 1)

    def test_normalization(self):
        """Case and punctuation are stripped before counting."""
        assert top_keyword(["Plumbing,", "plumbing.", "PLUMBING", "repair"]) == ("plumbing", 3)

    def test_first_seen_wins_ties(self):
        assert top_keyword(["alpha", "bravo", "bravo", "alpha"]) == ("alpha", 2)

    def test_no_keywords(self):
        assert top_keyword(["a", "an", "the"]) is None


class TestContentAnalyzer:
    """Test cases for ContentAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        return ContentAnalyzer()

    @pytest.mark.asyncio
    async def test_thin_content(self, analyzer, snapshot_factory):
        """A short page is thin and has too few paragraphs."""
        result = await analyzer.analyze(snapshot_factory(_paragraphs(1)))

        assert result.word_count == 9
        assert result.paragraphs == 1
        assert result.sentence_count == 1
        assert "Content is too thin (less than 300 words)" in result.issues
        assert "Too few paragraphs (less than 3)" in result.issues
        assert result.score == 70

    @pytest.mark.asyncio
    async def test_healthy_content_scores_100(self, analyzer, snapshot_factory):
        """Enough words in enough short paragraphs raises no issues."""
        # 10 paragraphs x 4 sentences x 9 words = 360 words
        result = await analyzer.analyze(snapshot_factory(_paragraphs(10, sentences=4)))

        assert result.word_count == 360
        assert result.avg_paragraph_length == 36
        assert result.avg_sentence_length == 9
        assert result.readability == "easy"
        assert result.issues == []
        assert result.score == 100

    @pytest.mark.asyncio
    async def test_container_text_counts_twice(self, analyzer, snapshot_factory):
        """Paragraphs inside <article> contribute to both sources of text."""
        html = "<body><article><p>one two three four</p></article></body>"

        result = await analyzer.analyze(snapshot_factory(html))

        assert result.word_count == 8

    @pytest.mark.asyncio
    async def test_long_sentences(self, analyzer, snapshot_factory):
        """Sentences averaging over 25 words are flagged and read as difficult."""
        sentence = " ".join(["word"] * 30) + "."
        result = await analyzer.analyze(snapshot_factory(_paragraphs(12, sentence=sentence)))

        assert result.avg_sentence_length == 30
        assert result.readability == "difficult"
        assert "Sentences are too long (aim for less than 25 words per sentence)" in result.issues

    @pytest.mark.asyncio
    async def test_keyword_density_only_when_deep(self, analyzer, snapshot_factory):
        """Standard depth leaves keyword density at its default."""
        result = await analyzer.analyze(snapshot_factory(_paragraphs(3)), AnalysisDepth.STANDARD)

        assert result.keyword_density == "0%"
        assert result.top_keyword is None

    @pytest.mark.asyncio
    async def test_keyword_stuffing_when_deep(self, analyzer, snapshot_factory):
        """A dominant keyword above 5% density is flagged in deep mode."""
        sentence = "plumbing plumbing plumbing repair service today."
        result = await analyzer.analyze(
            snapshot_factory(_paragraphs(3, sentence=sentence)), "deep"
        )

        assert result.top_keyword == "plumbing"
        assert result.keyword_density == "50.0%"
        assert "Potential keyword stuffing detected (density > 5%)" in result.issues

    @pytest.mark.asyncio
    async def test_empty_document(self, analyzer, snapshot_factory):
        """An empty document is thin, not an error."""
        result = await analyzer.analyze(snapshot_factory(""), AnalysisDepth.DEEP)

        assert result.word_count == 0
        assert result.avg_sentence_length == 0
        assert not any(issue.startswith("Error analyzing") for issue in result.issues)
