"""
Links Analyzer

Classifies every <a href> as internal or external, counts nofollow-style
relations and unique targets and, for deep audits, probes each unique
target for broken links.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set
from urllib.parse import urljoin, urlparse

import httpx

from seo_audit.analyzers.base import Analyzer, gather_probes
from seo_audit.constants import (
    BROKEN_LINK_PENALTY,
    DEFAULT_MAX_CONCURRENT_PROBES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    DUPLICATE_CHECK_MIN_LINKS,
    INTERNAL_CHECK_MIN_LINKS,
    LINKS_ISSUE_PENALTY,
    MAX_BROKEN_LINK_PENALTY,
    MAX_SCORE,
    MIN_INTERNAL_LINKS,
    MIN_UNIQUE_LINK_RATIO,
    NEUTRAL_SCORE,
    NOFOLLOW_REL_VALUES,
    SKIPPED_HREF_PREFIXES,
)
from seo_audit.models import AnalysisDepth, Category, LinksResult, PageSnapshot

logger = logging.getLogger(__name__)

# Status used for a link whose host could not be reached at all
NETWORK_ERROR_STATUS = 0

# Servers that refuse HEAD are retried with GET
HEAD_NOT_SUPPORTED = (405, 501)


@dataclass
class LinkInventory:
    """Outcome of scanning the anchors of one document."""

    total: int = 0
    internal: int = 0
    external: int = 0
    nofollow: int = 0
    unique_urls: List[str] = field(default_factory=list)
    malformed: List[str] = field(default_factory=list)


def _rel_values(anchor) -> Set[str]:
    rel = anchor.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return {value.lower() for value in rel}


def resolve_link(href: str, base_url: str) -> Optional[str]:
    """
    Resolve an href against the page URL.

    Returns:
        Absolute http(s) URL, or None for hrefs that are not navigable links

    Raises:
        ValueError: If the href cannot be parsed as a URL
    """
    href = href.strip()
    if not href or href.lower().startswith(SKIPPED_HREF_PREFIXES):
        return None

    absolute = urljoin(base_url, href)
    parsed = urlparse(absolute)
    if parsed.scheme not in ("http", "https"):
        if parsed.scheme and not parsed.netloc:
            # Other non-hierarchical schemes (sms:, data:, ...)
            return None
        raise ValueError(f"unsupported URL: {href}")
    if not parsed.hostname:
        raise ValueError(f"missing host: {href}")
    return absolute


def scan_links(document, base_url: str) -> LinkInventory:
    """Classify every anchor of the document."""
    inventory = LinkInventory()
    base_host = (urlparse(base_url).hostname or "").lower()
    unique = {}

    anchors = document.find_all("a", href=True)
    inventory.total = len(anchors)

    for anchor in anchors:
        href = anchor["href"]
        try:
            url = resolve_link(href, base_url)
        except ValueError:
            inventory.malformed.append(href)
            continue
        if url is None:
            continue

        unique.setdefault(url, None)
        if (urlparse(url).hostname or "").lower() == base_host:
            inventory.internal += 1
        else:
            inventory.external += 1

        if _rel_values(anchor) & set(NOFOLLOW_REL_VALUES):
            inventory.nofollow += 1

    inventory.unique_urls = list(unique)
    return inventory


class LinksAnalyzer(Analyzer):
    """Score internal linking, duplication and (deep only) broken links."""

    category = Category.LINKS

    def __init__(
        self,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES,
        user_agent: Optional[str] = None,
    ):
        self.probe_timeout = probe_timeout
        self.max_concurrent_probes = max_concurrent_probes
        self.user_agent = user_agent

    async def check_status(self, client: httpx.AsyncClient, url: str) -> Optional[int]:
        """
        HTTP status of a link target.

        Returns:
            The status code, NETWORK_ERROR_STATUS when the host could not be
            reached, or None when the probe timed out (unknown)
        """
        try:
            response = await client.head(url)
            if response.status_code not in HEAD_NOT_SUPPORTED:
                return response.status_code
            async with client.stream("GET", url) as response:
                return response.status_code
        except httpx.TimeoutException:
            logger.debug(f"Link probe timed out: {url}")
            return None
        except httpx.TransportError as e:
            logger.debug(f"Link unreachable: {url} ({e})")
            return NETWORK_ERROR_STATUS

    async def find_broken(self, urls: List[str]) -> List[str]:
        """Probe every URL and return the broken ones, in input order."""
        if not urls:
            return []

        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        async with httpx.AsyncClient(
            timeout=self.probe_timeout,
            follow_redirects=True,
            headers=headers,
        ) as client:
            statuses = await gather_probes(
                urls,
                lambda url: self.check_status(client, url),
                limit=self.max_concurrent_probes,
                timeout=self.probe_timeout,
                default=None,
            )

        return [
            url
            for url, status in zip(urls, statuses)
            if status is not None and (status == NETWORK_ERROR_STATUS or status >= 400)
        ]

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> LinksResult:
        inventory = scan_links(snapshot.document, snapshot.final_url)
        result = LinksResult(
            total=inventory.total,
            internal=inventory.internal,
            external=inventory.external,
            nofollow=inventory.nofollow,
            unique_urls=len(inventory.unique_urls),
        )

        if inventory.total == 0:
            result.score = NEUTRAL_SCORE
            result.issues.append("No links found on the page")
            return result

        result.issues.extend(f"Malformed URL found: {href}" for href in inventory.malformed)

        if depth == AnalysisDepth.DEEP:
            logger.info(f"Checking {len(inventory.unique_urls)} unique link(s) for breakage")
            result.broken_urls = await self.find_broken(inventory.unique_urls)
            result.broken = len(result.broken_urls)

        if result.internal == 0:
            result.issues.append("No internal links found")
        if result.broken:
            result.issues.append(f"{result.broken} broken link(s) found")
        if (
            result.total > DUPLICATE_CHECK_MIN_LINKS
            and result.unique_urls / result.total < MIN_UNIQUE_LINK_RATIO
        ):
            result.issues.append(
                f"Many duplicate links found (less than {MIN_UNIQUE_LINK_RATIO:.0%} unique)"
            )
        if result.total > INTERNAL_CHECK_MIN_LINKS and result.internal < MIN_INTERNAL_LINKS:
            result.issues.append(f"Too few internal links (recommended: at least {MIN_INTERNAL_LINKS})")

        score = MAX_SCORE - LINKS_ISSUE_PENALTY * len(result.issues)
        score -= min(MAX_BROKEN_LINK_PENALTY, result.broken * BROKEN_LINK_PENALTY)
        result.score = score
        return result
