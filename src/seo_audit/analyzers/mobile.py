"""
Mobile Optimization Analyzer

Four equally weighted checks:
- viewport meta tag (static document)
- no horizontal overflow at a phone-sized viewport
- touch targets of at least 48x48px
- readable (>= 12px) font sizes

The last three need layout, so they render the page HTML in a temporary
phone-sized page of the same browser session. The page the other
analyzers read is never resized.
"""

import logging
import re
from typing import Any, Dict, Optional

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import (
    MIN_FONT_SIZE_PX,
    MIN_READABLE_FONT_RATIO,
    MIN_TOUCH_TARGET_PX,
    MIN_TOUCH_TARGET_RATIO,
    MOBILE_CHECK_POINTS,
)
from seo_audit.models import (
    AnalysisDepth,
    Category,
    MobileOptimizationResult,
    PageSnapshot,
    TapTargetResults,
)

logger = logging.getLogger(__name__)

MOBILE_METRICS_SCRIPT = """
([minTarget, minFont]) => {
    const body = document.body;
    const html = document.documentElement;
    const width = window.innerWidth;
    const overflow = !!body && (body.scrollWidth > width || body.scrollWidth > html.clientWidth);

    const targets = Array.from(document.querySelectorAll(
        'button, a, input, select, textarea, [role="button"]'
    )).filter(el => el.getClientRects().length > 0);
    const tooSmallTargets = targets.filter(el => {
        const rect = el.getBoundingClientRect();
        return rect.width < minTarget || rect.height < minTarget;
    }).length;

    const textElements = Array.from(document.querySelectorAll(
        'p, span, div, li, h1, h2, h3, h4, h5, h6, button, a'
    ));
    const tooSmallText = textElements.filter(el => {
        const size = parseFloat(window.getComputedStyle(el).fontSize);
        return size < minFont && el.textContent && el.textContent.trim().length > 0;
    }).length;

    return {
        overflow,
        targets: targets.length,
        tooSmallTargets,
        textElements: textElements.length,
        tooSmallText,
    };
}
"""

_HEAD_TAG = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)
_BASE_TAG = re.compile(r"<base\s", re.IGNORECASE)


def with_base_url(html: str, base_url: str) -> str:
    """Insert a <base href> so relative URLs resolve when rendered out of place."""
    if _BASE_TAG.search(html):
        return html
    base = f'<base href="{base_url}">'
    match = _HEAD_TAG.search(html)
    if match:
        return html[:match.end()] + base + html[match.end():]
    return base + html


def passing_ratio(total: int, failing: int) -> float:
    return (total - failing) / total if total > 0 else 1.0


class MobileAnalyzer(Analyzer):
    """Score viewport, responsiveness, touch targets and font sizes."""

    category = Category.MOBILE_OPTIMIZATION

    async def measure(self, snapshot: PageSnapshot) -> Optional[Dict[str, Any]]:
        """
        Render the snapshot at the session's mobile viewport and measure it.

        Returns:
            Raw layout metrics, or None when no live session is attached
        """
        session = snapshot.session
        if session is None:
            return None

        page = await session.new_page(viewport=session.config.mobile_viewport)
        try:
            await page.set_content(
                with_base_url(snapshot.html, snapshot.final_url),
                wait_until="load",
            )
            return await page.evaluate(
                MOBILE_METRICS_SCRIPT, [MIN_TOUCH_TARGET_PX, MIN_FONT_SIZE_PX]
            )
        finally:
            await session.close_page(page)

    async def _analyze(
        self, snapshot: PageSnapshot, depth: AnalysisDepth
    ) -> MobileOptimizationResult:
        viewport = snapshot.document.find("meta", attrs={"name": "viewport"})
        result = MobileOptimizationResult(
            viewport_meta=bool(viewport and (viewport.get("content") or "").strip())
        )
        if not result.viewport_meta:
            result.issues.append(
                "Missing or invalid viewport meta tag (required for mobile optimization)"
            )

        metrics = await self.measure(snapshot)
        if metrics is None:
            logger.debug("No live session; layout-based mobile checks skipped")
        else:
            result.responsive_design = not metrics.get("overflow", False)
            if not result.responsive_design:
                result.issues.append(
                    "Page content overflows on mobile screens (not fully responsive)"
                )

            too_small = int(metrics.get("tooSmallTargets", 0))
            result.touch_targets = (
                passing_ratio(int(metrics.get("targets", 0)), too_small) >= MIN_TOUCH_TARGET_RATIO
            )
            result.tap_target_results = TapTargetResults(
                passed=result.touch_targets, too_small=too_small
            )
            if not result.touch_targets:
                result.issues.append(
                    f"{too_small} tap targets are too small for mobile users "
                    f"(should be at least {MIN_TOUCH_TARGET_PX}x{MIN_TOUCH_TARGET_PX}px)"
                )

            small_text = int(metrics.get("tooSmallText", 0))
            result.font_sizes = (
                passing_ratio(int(metrics.get("textElements", 0)), small_text)
                >= MIN_READABLE_FONT_RATIO
            )
            if not result.font_sizes:
                result.issues.append(
                    f"{small_text} text elements have font size smaller than {MIN_FONT_SIZE_PX}px "
                    f"(may be difficult to read on mobile)"
                )

        # Unmeasured checks (None) count as passing
        checks = [
            result.viewport_meta,
            result.responsive_design,
            result.touch_targets,
            result.font_sizes,
        ]
        result.score = MOBILE_CHECK_POINTS * sum(1 for check in checks if check is not False)
        return result
