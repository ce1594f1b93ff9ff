"""
Audit pipeline orchestration.

One audit walks a fixed state machine:

    IDLE -> ACQUIRING -> NAVIGATING -> ANALYZING -> AGGREGATING -> DONE

with TIMED_OUT and FAILED as terminal states reachable from any
in-progress state. ACQUIRING through AGGREGATING race a single timeout.
Whatever the outcome, the browser session acquired for the audit is closed
exactly once before the audit returns or raises.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from seo_audit.analyzers import Analyzer, default_analyzers
from seo_audit.config import AuditConfig
from seo_audit.errors import CleanupFault, OperationTimeout
from seo_audit.fallback import MOCK_WARNING, build_simulated_result, simulated_result_for_error
from seo_audit.infrastructure import BrowserSession, SessionManager
from seo_audit.models import AnalysisDepth, AuditRequest, AuditResult
from seo_audit.navigator import PageNavigator
from seo_audit.scoring import build_audit_result

logger = logging.getLogger(__name__)


class AuditState(str, Enum):
    IDLE = "idle"
    ACQUIRING = "acquiring"
    NAVIGATING = "navigating"
    ANALYZING = "analyzing"
    AGGREGATING = "aggregating"
    DONE = "done"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (AuditState.DONE, AuditState.TIMED_OUT, AuditState.FAILED)


@dataclass
class AuditRun:
    """Mutable bookkeeping for one in-flight audit. Never shared between audits."""

    request: AuditRequest
    state: AuditState = AuditState.IDLE
    session: Optional[BrowserSession] = None
    error: Optional[BaseException] = None
    history: List[Tuple[AuditState, float]] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)

    def transition(self, state: AuditState) -> None:
        if self.state.terminal:
            logger.debug(f"Ignoring {state.value}: audit already {self.state.value}")
            return
        elapsed = time.monotonic() - self.started_at
        logger.debug(
            f"Audit {self.request.url}: {self.state.value} -> {state.value} ({elapsed:.2f}s)"
        )
        self.state = state
        self.history.append((state, elapsed))


class PageAuditor:
    """
    Runs single-page audits.

    Usage:
        auditor = PageAuditor(AuditConfig.from_env())
        result = await auditor.audit("https://example.com", depth="deep")

    A PageAuditor holds no per-audit state, so one instance can run many
    audits concurrently; each gets its own browser session.
    """

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        session_manager: Optional[SessionManager] = None,
        navigator: Optional[PageNavigator] = None,
        analyzers: Optional[Sequence[Analyzer]] = None,
    ):
        """
        Initialize the auditor.

        Args:
            config: Audit configuration (defaults to AuditConfig())
            session_manager: Browser acquisition (defaults to the config's strategy chain)
            navigator: Page loader (defaults to a PageNavigator for the config)
            analyzers: Analyzers to run (defaults to all ten)
        """
        self.config = config or AuditConfig()
        self.session_manager = session_manager or SessionManager.from_config(self.config)
        self.navigator = navigator or PageNavigator(self.config.browser_config())
        self.analyzers = list(analyzers) if analyzers is not None else default_analyzers(self.config)

    async def audit(
        self,
        url: str,
        depth: Union[str, AnalysisDepth] = AnalysisDepth.STANDARD,
    ) -> AuditResult:
        """
        Audit one page.

        Args:
            url: Page to audit
            depth: basic, standard or deep

        Returns:
            AuditResult; its ``warning`` is set when the result is simulated

        Raises:
            ValueError: If the URL is empty or the depth is invalid
            OperationTimeout: If the audit exceeded its overall timeout (no fallback)
            AuditError: If the browser or page failed (no fallback)
        """
        if not url or not url.strip():
            raise ValueError("URL is required")

        request = AuditRequest(url=url.strip(), depth=AnalysisDepth.parse(depth))
        return await self.execute(AuditRun(request))

    async def execute(self, run: AuditRun) -> AuditResult:
        """Drive one AuditRun to a terminal state."""
        request = run.request

        if self.config.use_mock:
            logger.info(f"Mock mode enabled; skipping live analysis of {request.url}")
            run.transition(AuditState.DONE)
            return build_simulated_result(request, MOCK_WARNING, self.config.general_advisories)

        logger.info(f"Starting {request.depth.value} audit of {request.url}")

        try:
            return await asyncio.wait_for(self._pipeline(run), self.config.analysis_timeout)
        except asyncio.TimeoutError:
            run.transition(AuditState.TIMED_OUT)
            run.error = OperationTimeout(self.config.analysis_timeout)
            logger.error(f"Audit of {request.url} timed out after {self.config.analysis_timeout:g}s")
            return self._recover(run)
        except Exception as e:
            run.transition(AuditState.FAILED)
            run.error = e
            logger.error(f"Audit of {request.url} failed: {e}")
            return self._recover(run)
        finally:
            await self._release(run)

    async def _pipeline(self, run: AuditRun) -> AuditResult:
        request = run.request

        run.transition(AuditState.ACQUIRING)
        run.session = await self.session_manager.acquire()

        run.transition(AuditState.NAVIGATING)
        snapshot = await self.navigator.load(
            run.session, request.url, self.config.navigation_timeout
        )

        run.transition(AuditState.ANALYZING)
        results = await asyncio.gather(
            *(analyzer.analyze(snapshot, request.depth) for analyzer in self.analyzers)
        )

        run.transition(AuditState.AGGREGATING)
        result = build_audit_result(
            request,
            {category_result.category: category_result for category_result in results},
            analyzed_url=snapshot.final_url,
            general_advisories=self.config.general_advisories,
        )

        run.transition(AuditState.DONE)
        logger.info(f"Audit of {result.analyzed_url} complete: overall score {result.overall_score}")
        return result

    def _recover(self, run: AuditRun) -> AuditResult:
        """Substitute the simulated result, or re-raise when fallback is disabled."""
        if not self.config.fallback_to_mock:
            raise run.error

        return simulated_result_for_error(run.request, run.error, self.config.general_advisories)

    async def _release(self, run: AuditRun) -> None:
        if run.session is None:
            return
        session, run.session = run.session, None
        try:
            await session.close()
        except Exception as e:
            logger.warning(CleanupFault("close session", e).message)


def run_audit(
    url: str,
    depth: Union[str, AnalysisDepth] = "standard",
    config: Optional[AuditConfig] = None,
) -> AuditResult:
    """
    Audit one page and block until the result is ready.

    Must not be called from a running event loop; use
    ``await PageAuditor(config).audit(url, depth)`` there instead.
    """
    return asyncio.run(PageAuditor(config).audit(url, depth))
