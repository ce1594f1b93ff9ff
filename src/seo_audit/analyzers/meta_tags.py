"""
Meta Tags Analyzer

Checks the <head> tags search engines read first:
- Title presence and length
- Meta description presence and length
- Keywords meta tag (informational only)
- Canonical link
- Open Graph / Twitter Card social tags
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import (
    DESCRIPTION_MAX_LENGTH,
    DESCRIPTION_MIN_LENGTH,
    META_TAGS_BASE_SCORE,
    META_TAGS_CHECK_POINTS,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    TITLE_SITE_NAME_SEPARATORS,
)
from seo_audit.models import (
    AnalysisDepth,
    Category,
    DescriptionTag,
    MetaTagsResult,
    OptionalTag,
    PageSnapshot,
    SocialTags,
    TitleTag,
)


def _meta_content(document: BeautifulSoup, name: str) -> Optional[str]:
    tag = document.find("meta", attrs={"name": re.compile(f"^{name}$", re.I)})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def _includes_site_name(title: str) -> bool:
    for separator in TITLE_SITE_NAME_SEPARATORS:
        head, found, tail = title.rpartition(separator)
        if found and head.strip() and tail.strip():
            return True
    return False


class MetaTagsAnalyzer(Analyzer):
    """Score title, description, canonical and social meta tags."""

    category = Category.META_TAGS

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> MetaTagsResult:
        document = snapshot.document
        result = MetaTagsResult()
        passed = 0

        # Title (prefer the one in <head> over inline SVG titles)
        title_tag = document.select_one("head > title") or document.find("title")
        title = title_tag.get_text().strip() if title_tag else ""
        if title:
            length = len(title)
            result.title = TitleTag(
                exists=True,
                length=length,
                optimal=TITLE_MIN_LENGTH <= length <= TITLE_MAX_LENGTH,
                value=title,
                includes_site_name=_includes_site_name(title),
            )
            if result.title.optimal:
                passed += 1
            elif length < TITLE_MIN_LENGTH:
                result.issues.append(
                    f"Title tag is too short (should be {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters)"
                )
            else:
                result.issues.append(
                    f"Title tag is too long (should be {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters)"
                )
        else:
            result.issues.append("Missing title tag")

        # Description
        description = _meta_content(document, "description")
        if description:
            length = len(description)
            result.description = DescriptionTag(
                exists=True,
                length=length,
                optimal=DESCRIPTION_MIN_LENGTH <= length <= DESCRIPTION_MAX_LENGTH,
                value=description,
            )
            if result.description.optimal:
                passed += 1
            elif length < DESCRIPTION_MIN_LENGTH:
                result.issues.append(
                    f"Meta description is too short (should be "
                    f"{DESCRIPTION_MIN_LENGTH}-{DESCRIPTION_MAX_LENGTH} characters)"
                )
            else:
                result.issues.append(
                    f"Meta description is too long (should be "
                    f"{DESCRIPTION_MIN_LENGTH}-{DESCRIPTION_MAX_LENGTH} characters)"
                )
        else:
            result.issues.append("Missing meta description")

        # Keywords carry no ranking weight; recorded only
        keywords = _meta_content(document, "keywords")
        result.keywords = OptionalTag(exists=keywords is not None, value=keywords or "")

        canonical_tag = document.find("link", rel="canonical")
        canonical = (canonical_tag.get("href") or "").strip() if canonical_tag else ""
        result.canonical = OptionalTag(exists=bool(canonical), value=canonical)
        if canonical:
            passed += 1
        else:
            result.issues.append("Missing canonical link (recommended to prevent duplicate content)")

        result.social_tags = SocialTags(
            open_graph=document.select_one('meta[property^="og:"]') is not None,
            twitter_card=(
                document.select_one('meta[name^="twitter:"]') is not None
                or document.select_one('meta[property^="twitter:"]') is not None
            ),
        )
        if result.social_tags.open_graph or result.social_tags.twitter_card:
            passed += 1
        else:
            result.issues.append("Missing social media tags (Open Graph or Twitter Card)")

        result.score = META_TAGS_BASE_SCORE + META_TAGS_CHECK_POINTS * passed
        return result
