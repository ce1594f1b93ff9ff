"""
Simulated audit results.

Used when live analysis is disabled (mock mode) or could not complete and
fallback is enabled. The content is fixed and realistic; it covers only
the seven mandatory categories and always carries a warning so callers can
tell it apart from a measured result.
"""

import logging
from typing import Dict

from seo_audit.models import (
    AuditRequest,
    AuditResult,
    Category,
    CategoryResult,
    ContentResult,
    DescriptionTag,
    HeadingLevel,
    HeadingsResult,
    ImagesResult,
    LinksResult,
    MetaTagsResult,
    OptionalTag,
    PerformanceResult,
    ResourceSummary,
    SecurityResult,
    SocialTags,
    TitleTag,
)
from seo_audit.scoring import build_audit_result

logger = logging.getLogger(__name__)

MOCK_WARNING = "Using mock data; no live analysis was performed"

SAMPLE_TITLE = "Example Website - Professional Services & Solutions"
SAMPLE_DESCRIPTION = (
    "Example Website offers professional services and innovative solutions for "
    "businesses. Our experienced team delivers high-quality results tailored to your needs."
)


def fallback_warning(error: BaseException) -> str:
    """Warning text for a simulated result that replaced a failed live audit."""
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return f"Live analysis failed ({message}); showing simulated data instead"


def simulated_categories(url: str) -> Dict[Category, CategoryResult]:
    """Fixed category results for the mandatory categories."""
    return {
        Category.META_TAGS: MetaTagsResult(
            score=100,
            title=TitleTag(
                exists=True,
                length=len(SAMPLE_TITLE),
                optimal=True,
                value=SAMPLE_TITLE,
                includes_site_name=True,
            ),
            description=DescriptionTag(
                exists=True,
                length=len(SAMPLE_DESCRIPTION),
                optimal=True,
                value=SAMPLE_DESCRIPTION,
            ),
            keywords=OptionalTag(
                exists=True,
                value="professional services, business solutions, innovation",
            ),
            canonical=OptionalTag(exists=True, value=url),
            social_tags=SocialTags(open_graph=True, twitter_card=True),
        ),
        Category.HEADINGS: HeadingsResult(
            score=80,
            issues=["Multiple H1 headings found (recommended: one H1 per page)"],
            h1=HeadingLevel(
                count=2,
                optimal=False,
                values=["Welcome to Example Website", "Our Services"],
            ),
            h2=HeadingLevel(
                count=5,
                optimal=True,
                values=["About Us", "Why Choose Us", "Our Approach", "Testimonials", "Contact"],
            ),
            h3=HeadingLevel(count=8, optimal=True),
        ),
        Category.CONTENT: ContentResult(
            score=85,
            issues=["Sentences are too long (aim for less than 25 words per sentence)"],
            word_count=850,
            paragraphs=12,
            sentence_count=32,
            avg_sentence_length=27,
            avg_paragraph_length=71,
            readability="difficult",
        ),
        Category.IMAGES: ImagesResult(
            score=66,
            issues=[
                "5 image(s) missing alt text",
                "2 image(s) are over 100KB and could be optimized",
            ],
            total=12,
            with_alt=7,
            without_alt=5,
            large_images=2,
            avg_size=84 * 1024,
        ),
        Category.PERFORMANCE: PerformanceResult(
            score=80,
            issues=["Time to First Byte (TTFB) is slow: 350ms (should be under 200ms)"],
            ttfb_ms=350.0,
            load_time_ms=2400.0,
            fcp_ms=1200.0,
            tti_ms=1800.0,
            resources=ResourceSummary(
                total=45,
                by_type={"script": 15, "stylesheet": 8, "image": 18, "font": 4},
                total_size_bytes=1258291,
                total_size="1.2 MB",
            ),
        ),
        Category.LINKS: LinksResult(
            score=100,
            total=23,
            internal=18,
            external=5,
            unique_urls=23,
        ),
        Category.SECURITY: SecurityResult(
            score=90,
            issues=["Content-Security-Policy header not found (recommended for security)"],
            https=True,
            x_frame_options=True,
            strict_transport_security=True,
            x_content_type_options=True,
        ),
    }


def build_simulated_result(
    request: AuditRequest,
    warning: str = MOCK_WARNING,
    general_advisories: bool = True,
) -> AuditResult:
    """
    Build the simulated AuditResult for a request.

    The overall score and recommendations are aggregated from the fixed
    categories exactly as for a live audit.

    Args:
        request: The audit request being answered
        warning: Explanation shown to the caller; never empty
        general_advisories: Append general advice to low-scoring results

    Returns:
        AuditResult with ``warning`` set and only mandatory categories
    """
    logger.warning(f"Returning simulated result for {request.url}: {warning}")
    return build_audit_result(
        request,
        simulated_categories(request.url),
        analyzed_url=request.url,
        warning=warning or MOCK_WARNING,
        general_advisories=general_advisories,
    )


def simulated_result_for_error(
    request: AuditRequest, error: BaseException, general_advisories: bool = True
) -> AuditResult:
    """Simulated result whose warning names the error that stopped the live audit."""
    return build_simulated_result(request, fallback_warning(error), general_advisories)


__all__ = [
    "MOCK_WARNING",
    "build_simulated_result",
    "fallback_warning",
    "simulated_categories",
    "simulated_result_for_error",
]
