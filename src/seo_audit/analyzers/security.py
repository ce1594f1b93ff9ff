"""
Security Analyzer

Checks HTTPS and the security response headers search engines and
browsers reward.
"""

import logging
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import (
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    MAX_SCORE,
    SECURITY_HEADER_POINTS,
    SECURITY_HTTP_BASE_SCORE,
    SECURITY_HTTPS_BASE_SCORE,
)
from seo_audit.models import AnalysisDepth, Category, PageSnapshot, SecurityResult

logger = logging.getLogger(__name__)


class SecurityAnalyzer(Analyzer):
    """Score HTTPS (base) plus points per security header."""

    category = Category.SECURITY

    def __init__(self, probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS):
        self.probe_timeout = probe_timeout

    async def _headers(self, snapshot: PageSnapshot) -> Callable[[str], Optional[str]]:
        if snapshot.headers or snapshot.session is None:
            return snapshot.header

        # No navigation headers captured; ask the server directly
        try:
            response = await snapshot.session.probe(
                snapshot.final_url, method="HEAD", timeout=self.probe_timeout
            )
            probed: Dict[str, str] = {k.lower(): v for k, v in response.headers.items()}
        except Exception as e:
            logger.debug(f"Header probe failed for {snapshot.final_url}: {e}")
            probed = {}
        return lambda name: probed.get(name.lower())

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> SecurityResult:
        header = await self._headers(snapshot)

        result = SecurityResult(
            https=urlparse(snapshot.final_url).scheme == "https",
            content_security_policy=bool(header("Content-Security-Policy")),
            x_frame_options=bool(header("X-Frame-Options")),
            strict_transport_security=bool(header("Strict-Transport-Security")),
            x_content_type_options=bool(header("X-Content-Type-Options")),
        )

        if not result.https:
            result.issues.append("Site is not using HTTPS (required for better search rankings)")
        if not result.content_security_policy:
            result.issues.append("Content-Security-Policy header not found (recommended for security)")
        if not result.x_frame_options:
            result.issues.append("X-Frame-Options header not found (helps prevent clickjacking)")
        if result.https and not result.strict_transport_security:
            result.issues.append(
                "Strict-Transport-Security header not found (HSTS recommended for HTTPS sites)"
            )
        if not result.x_content_type_options:
            result.issues.append(
                "X-Content-Type-Options header not found (helps prevent MIME-type sniffing)"
            )

        present = sum([
            result.content_security_policy,
            result.x_frame_options,
            # Browsers ignore HSTS served over plain HTTP
            result.https and result.strict_transport_security,
            result.x_content_type_options,
        ])
        base = SECURITY_HTTPS_BASE_SCORE if result.https else SECURITY_HTTP_BASE_SCORE
        result.score = min(MAX_SCORE, base + SECURITY_HEADER_POINTS * present)
        return result
