"""
Performance Analyzer

Reads navigation and paint timing from the live page and summarizes the
network responses recorded while it loaded.
"""

from typing import Dict, List, Optional

from seo_audit.analyzers.base import Analyzer, evaluate
from seo_audit.constants import (
    MAX_FCP_MS,
    MAX_LOAD_TIME_MS,
    MAX_PAGE_WEIGHT_BYTES,
    MAX_RESOURCE_COUNT,
    MAX_SCORE,
    MAX_TTFB_MS,
    PERFORMANCE_ISSUE_PENALTY,
    TTI_SCRIPT_BUFFER_MS,
)
from seo_audit.models import (
    AnalysisDepth,
    Category,
    PageSnapshot,
    PerformanceResult,
    ResourceSummary,
    ResourceTiming,
    round_half_up,
)

TIMING_SCRIPT = """
(buffer) => {
    const navigation = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint')
        .find(entry => entry.name === 'first-contentful-paint');
    const legacy = performance.timing;
    return {
        ttfb: navigation ? navigation.responseStart - navigation.requestStart : 0,
        loadTime: navigation ? navigation.loadEventEnd - navigation.startTime : 0,
        fcp: paint ? paint.startTime : 0,
        tti: legacy && legacy.domInteractive
            ? legacy.domInteractive - legacy.navigationStart + buffer
            : 0,
    };
}
"""

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(size: int, decimals: int = 2) -> str:
    """Human-readable 1024-based size, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, max(0, decimals)):g} {_SIZE_UNITS[index]}"


def summarize_resources(resources: List[ResourceTiming]) -> ResourceSummary:
    by_type: Dict[str, int] = {}
    total_size = 0
    for resource in resources:
        kind = resource.type or "other"
        by_type[kind] = by_type.get(kind, 0) + 1
        total_size += max(0, resource.size or 0)

    return ResourceSummary(
        total=len(resources),
        by_type=by_type,
        total_size_bytes=total_size,
        total_size=format_bytes(total_size),
    )


def _metric(timings: Optional[dict], key: str) -> float:
    if not timings:
        return 0.0
    try:
        return max(0.0, float(timings.get(key) or 0))
    except (TypeError, ValueError):
        return 0.0


class PerformanceAnalyzer(Analyzer):
    """Score load timings and page weight against fixed thresholds."""

    category = Category.PERFORMANCE

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> PerformanceResult:
        timings = await evaluate(snapshot, TIMING_SCRIPT, TTI_SCRIPT_BUFFER_MS)

        result = PerformanceResult(
            ttfb_ms=_metric(timings, "ttfb"),
            load_time_ms=_metric(timings, "loadTime"),
            fcp_ms=_metric(timings, "fcp"),
            tti_ms=_metric(timings, "tti"),
            resources=summarize_resources(snapshot.resources),
        )

        if result.ttfb_ms > MAX_TTFB_MS:
            result.issues.append(
                f"Time to First Byte (TTFB) is slow: {round_half_up(result.ttfb_ms)}ms "
                f"(should be under {MAX_TTFB_MS}ms)"
            )
        if result.load_time_ms > MAX_LOAD_TIME_MS:
            result.issues.append(
                f"Page load time is slow: {result.load_time_ms / 1000:.2f}s "
                f"(should be under {MAX_LOAD_TIME_MS / 1000:g}s)"
            )
        if result.fcp_ms > MAX_FCP_MS:
            result.issues.append(
                f"First Contentful Paint is slow: {result.fcp_ms / 1000:.2f}s "
                f"(should be under {MAX_FCP_MS / 1000:g}s)"
            )
        if result.resources.total > MAX_RESOURCE_COUNT:
            result.issues.append(
                f"High number of HTTP requests: {result.resources.total} "
                f"(try to reduce below {MAX_RESOURCE_COUNT})"
            )
        if result.resources.total_size_bytes > MAX_PAGE_WEIGHT_BYTES:
            result.issues.append(
                f"Page size is too large: {result.resources.total_size} "
                f"(should be under {format_bytes(MAX_PAGE_WEIGHT_BYTES)})"
            )

        result.score = MAX_SCORE - PERFORMANCE_ISSUE_PENALTY * len(result.issues)
        return result
