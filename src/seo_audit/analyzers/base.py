"""
Base class shared by all page analyzers.

Each analyzer inspects one PageSnapshot and returns the CategoryResult for
its category. Analyzers are stateless: the same instance can serve any
number of concurrent audits.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar

from seo_audit.constants import DEFAULT_MAX_CONCURRENT_PROBES, DEFAULT_PROBE_TIMEOUT_SECONDS
from seo_audit.errors import AnalyzerFault
from seo_audit.models import (
    RESULT_TYPES,
    AnalysisDepth,
    Category,
    CategoryResult,
    PageSnapshot,
    clamp_score,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Analyzer(ABC):
    """
    Common interface for the ten category analyzers.

    Subclasses set ``category`` and implement ``_analyze``. Callers use
    ``analyze``, which never raises: any exception from ``_analyze`` becomes a
    zero-score result carrying a single "Error analyzing ..." issue.
    """

    category: Category

    @property
    def result_type(self):
        return RESULT_TYPES[self.category]

    async def analyze(
        self,
        snapshot: PageSnapshot,
        depth: AnalysisDepth = AnalysisDepth.STANDARD,
    ) -> CategoryResult:
        """
        Analyze a page snapshot.

        Args:
            snapshot: Loaded page to inspect
            depth: Requested analysis depth

        Returns:
            Result for this analyzer's category, score clamped to [0, 100]
        """
        try:
            result = await self._analyze(snapshot, AnalysisDepth.parse(depth))
        except Exception as e:
            return self.failed(e)

        result.score = clamp_score(result.score)
        return result

    def failed(self, error: Exception) -> CategoryResult:
        """Convert an exception into the zero-score result for this category."""
        if not isinstance(error, AnalyzerFault):
            error = AnalyzerFault(self.category.value, str(error) or type(error).__name__)

        logger.warning(f"Analyzer '{self.category.value}' failed: {error.message}")
        return self.result_type(
            score=0,
            issues=[f"Error analyzing {self.category.label}: {error.message}"],
        )

    @abstractmethod
    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> CategoryResult:
        """Compute the category result. May raise; analyze() converts errors."""


async def gather_probes(
    items: Iterable[T],
    probe: Callable[[T], Awaitable[Any]],
    limit: int = DEFAULT_MAX_CONCURRENT_PROBES,
    timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    default: Any = None,
) -> List[Any]:
    """
    Run one probe per item concurrently and wait for all of them.

    At most ``limit`` probes are in flight at once and each is bounded by
    ``timeout`` seconds. A probe that fails or times out yields ``default``
    instead of failing the batch.

    Returns:
        Probe results in the same order as ``items``
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(item: T) -> Any:
        async with semaphore:
            try:
                return await asyncio.wait_for(probe(item), timeout)
            except asyncio.TimeoutError:
                logger.debug(f"Probe timed out after {timeout:g}s: {item}")
            except Exception as e:
                logger.debug(f"Probe failed for {item}: {e}")
            return default

    return list(await asyncio.gather(*(_run(item) for item in items)))


async def evaluate(snapshot: PageSnapshot, script: str, arg: Any = None) -> Optional[Any]:
    """
    Evaluate a script in the live page, if the snapshot has one.

    Returns:
        The script's result, or None when no live page is attached
    """
    if snapshot.page is None:
        return None
    if arg is None:
        return await snapshot.page.evaluate(script)
    return await snapshot.page.evaluate(script, arg)
