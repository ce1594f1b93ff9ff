"""
Images Analyzer

Checks alt text coverage and image weight. Sizes come from lightweight
HEAD probes through the live browser session, so they share the page's
cookies and network settings.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urljoin

from seo_audit.analyzers.base import Analyzer, gather_probes
from seo_audit.constants import (
    DEFAULT_MAX_CONCURRENT_PROBES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    IMAGE_ALT_WEIGHT,
    IMAGE_SIZE_WEIGHT,
    LARGE_AVERAGE_IMAGE_BYTES,
    LARGE_IMAGE_BYTES,
    MAX_SCORE,
    NEUTRAL_SCORE,
)
from seo_audit.models import AnalysisDepth, Category, ImagesResult, PageSnapshot, round_half_up

logger = logging.getLogger(__name__)


def has_alt_text(img) -> bool:
    alt = img.get("alt")
    return alt is not None and alt.strip() != ""


def image_url(img, base_url: str) -> Optional[str]:
    """Absolute URL of an <img>, None for missing or inline (data:) sources."""
    src = (img.get("src") or "").strip()
    if not src or src.startswith("data:"):
        return None
    return urljoin(base_url, src)


class ImagesAnalyzer(Analyzer):
    """Score alt text coverage (70%) and share of non-oversized images (30%)."""

    category = Category.IMAGES

    def __init__(
        self,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES,
    ):
        self.probe_timeout = probe_timeout
        self.max_concurrent_probes = max_concurrent_probes

    async def _probe_sizes(self, snapshot: PageSnapshot, urls: List[str]) -> Dict[str, int]:
        """Byte size per unique URL; 0 when unknown."""
        if snapshot.session is None or not urls:
            return {}

        async def _size(url: str) -> int:
            response = await snapshot.session.probe(url, method="HEAD", timeout=self.probe_timeout)
            return response.content_length if response.status == 200 else 0

        sizes = await gather_probes(
            urls,
            _size,
            limit=self.max_concurrent_probes,
            timeout=self.probe_timeout,
            default=0,
        )
        return dict(zip(urls, sizes))

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> ImagesResult:
        images = snapshot.document.find_all("img")
        result = ImagesResult(total=len(images))

        if not images:
            result.score = NEUTRAL_SCORE
            result.issues.append("No images found on the page")
            return result

        result.with_alt = sum(1 for img in images if has_alt_text(img))
        result.without_alt = result.total - result.with_alt

        sources = [image_url(img, snapshot.final_url) for img in images]
        unique_sources = list(dict.fromkeys(src for src in sources if src))
        sizes = await self._probe_sizes(snapshot, unique_sources)

        total_size = 0
        for src in sources:
            size = sizes.get(src, 0) if src else 0
            total_size += size
            if size > LARGE_IMAGE_BYTES:
                result.large_images += 1

        result.avg_size = round_half_up(total_size / result.total)
        logger.debug(
            f"Probed {len(sizes)} image(s), total {total_size} bytes, {result.large_images} large"
        )

        if result.without_alt:
            result.issues.append(f"{result.without_alt} image(s) missing alt text")
        if result.large_images:
            result.issues.append(
                f"{result.large_images} image(s) are over {LARGE_IMAGE_BYTES // 1024}KB and could be optimized"
            )
        if result.avg_size > LARGE_AVERAGE_IMAGE_BYTES:
            result.issues.append(
                f"Average image size is too large (over {LARGE_AVERAGE_IMAGE_BYTES // 1024}KB)"
            )

        alt_score = result.with_alt / result.total * MAX_SCORE
        size_score = MAX_SCORE - result.large_images / result.total * MAX_SCORE
        result.score = round_half_up(IMAGE_ALT_WEIGHT * alt_score + IMAGE_SIZE_WEIGHT * size_score)
        return result
