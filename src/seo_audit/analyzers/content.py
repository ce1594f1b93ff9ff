"""
Content Analyzer

Measures the body copy: word, paragraph and sentence counts, average
lengths, a sentence-length readability band and, for deep audits, the
density of the most frequent keyword.
"""

import re
from collections import Counter
from typing import List, Optional, Tuple

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import (
    CONTENT_CONTAINER_SELECTORS,
    CONTENT_ISSUE_PENALTY,
    DIFFICULT_SENTENCE_WORDS,
    EASY_SENTENCE_WORDS,
    HIGH_KEYWORD_DENSITY_PERCENT,
    LOW_KEYWORD_DENSITY_PERCENT,
    MAX_AVG_PARAGRAPH_WORDS,
    MAX_AVG_SENTENCE_WORDS,
    MAX_SCORE,
    MIN_KEYWORD_LENGTH,
    MIN_PARAGRAPHS,
    THIN_CONTENT_WORDS,
)
from seo_audit.models import AnalysisDepth, Category, ContentResult, PageSnapshot, round_half_up

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def classify_readability(avg_sentence_length: float) -> str:
    """Map average sentence length (words) to easy / medium / difficult."""
    if avg_sentence_length > DIFFICULT_SENTENCE_WORDS:
        return "difficult"
    if avg_sentence_length < EASY_SENTENCE_WORDS:
        return "easy"
    return "medium"


def top_keyword(words: List[str]) -> Optional[Tuple[str, int]]:
    """
    Most frequent normalized token and its count.

    Tokens are lower-cased, stripped of non-alphanumerics and must be at
    least MIN_KEYWORD_LENGTH characters long. Ties go to the first seen.
    """
    counts = Counter()
    for word in words:
        token = _NON_ALPHANUMERIC.sub("", word.lower())
        if len(token) >= MIN_KEYWORD_LENGTH:
            counts[token] += 1
    if not counts:
        return None
    return counts.most_common(1)[0]


class ContentAnalyzer(Analyzer):
    """Score the amount and readability of the page copy."""

    category = Category.CONTENT

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> ContentResult:
        document = snapshot.document
        paragraphs = document.find_all("p")

        # Paragraphs inside a container are counted twice
        chunks = [p.get_text() for p in paragraphs]
        chunks.extend(area.get_text() for area in document.select(CONTENT_CONTAINER_SELECTORS))
        text = " ".join(" ".join(chunks).split())

        words = text.split()
        sentences = [s for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]

        result = ContentResult(
            word_count=len(words),
            paragraphs=len(paragraphs),
            sentence_count=len(sentences),
        )
        if result.sentence_count:
            result.avg_sentence_length = round_half_up(result.word_count / result.sentence_count)
        if result.paragraphs:
            result.avg_paragraph_length = round_half_up(result.word_count / result.paragraphs)

        if result.word_count < THIN_CONTENT_WORDS:
            result.issues.append(f"Content is too thin (less than {THIN_CONTENT_WORDS} words)")
        if result.paragraphs < MIN_PARAGRAPHS:
            result.issues.append(f"Too few paragraphs (less than {MIN_PARAGRAPHS})")
        if result.avg_paragraph_length > MAX_AVG_PARAGRAPH_WORDS:
            result.issues.append(
                f"Paragraphs are too long (aim for less than {MAX_AVG_PARAGRAPH_WORDS} words per paragraph)"
            )
        if result.avg_sentence_length > MAX_AVG_SENTENCE_WORDS:
            result.issues.append(
                f"Sentences are too long (aim for less than {MAX_AVG_SENTENCE_WORDS} words per sentence)"
            )

        result.readability = classify_readability(result.avg_sentence_length)

        if depth == AnalysisDepth.DEEP:
            keyword = top_keyword(words)
            if keyword and result.word_count:
                token, frequency = keyword
                density = frequency / result.word_count * 100
                result.top_keyword = token
                result.keyword_density = f"{density:.1f}%"

                if density > HIGH_KEYWORD_DENSITY_PERCENT:
                    result.issues.append(
                        f"Potential keyword stuffing detected (density > {HIGH_KEYWORD_DENSITY_PERCENT:g}%)"
                    )
                elif density < LOW_KEYWORD_DENSITY_PERCENT:
                    result.issues.append(
                        f"Main keyword density may be too low (< {LOW_KEYWORD_DENSITY_PERCENT:g}%)"
                    )

        result.score = MAX_SCORE - CONTENT_ISSUE_PENALTY * len(result.issues)
        return result
