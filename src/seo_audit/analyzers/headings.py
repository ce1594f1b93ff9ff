"""Heading hierarchy analyzer (h1-h6 counts, single-H1 rule, skipped levels)."""

import re

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import HEADINGS_ISSUE_PENALTY, MAX_SCORE
from seo_audit.models import AnalysisDepth, Category, HeadingLevel, HeadingsResult, PageSnapshot

_HEADING_TAG = re.compile(r"^h[1-6]$")


class HeadingsAnalyzer(Analyzer):
    """Check heading counts and that the outline never skips a level."""

    category = Category.HEADINGS

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> HeadingsResult:
        headings = snapshot.document.find_all(_HEADING_TAG)

        by_level = {level: [] for level in range(1, 7)}
        for heading in headings:
            by_level[int(heading.name[1])].append(heading)

        def texts(level):
            return [h.get_text(" ", strip=True) for h in by_level[level] if h.get_text(strip=True)]

        result = HeadingsResult(
            h1=HeadingLevel(count=len(by_level[1]), values=texts(1)),
            h2=HeadingLevel(count=len(by_level[2]), values=texts(2)),
            h3=HeadingLevel(count=len(by_level[3])),
            h4=len(by_level[4]),
            h5=len(by_level[5]),
            h6=len(by_level[6]),
        )

        if result.h1.count == 0:
            result.issues.append("Missing H1 heading")
        elif result.h1.count > 1:
            result.issues.append("Multiple H1 headings found (recommended: one H1 per page)")
        else:
            result.h1.optimal = True

        if result.h2.count == 0:
            result.issues.append("No H2 headings found (recommended for content structure)")
        else:
            result.h2.optimal = True

        result.h3.optimal = result.h3.count == 0 or result.h2.count > 0
        if not result.h3.optimal:
            result.issues.append("H3 headings used without H2 headings (improper hierarchy)")

        previous = 0
        for heading in headings:
            level = int(heading.name[1])
            if previous and level > previous + 1:
                result.structure_issues += 1
            previous = level

        if result.structure_issues:
            result.structure = "improper"
            result.issues.append("Improper heading structure (headings should not skip levels)")

        result.score = MAX_SCORE - HEADINGS_ISSUE_PENALTY * len(result.issues)
        return result
