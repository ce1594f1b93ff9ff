"""
Page analyzers, one per audit category.

Every analyzer takes the same PageSnapshot and returns its own
CategoryResult subclass; see base.Analyzer for the shared contract.
"""

from typing import List

from seo_audit.analyzers.accessibility import AccessibilityAnalyzer
from seo_audit.analyzers.base import Analyzer, gather_probes
from seo_audit.analyzers.content import ContentAnalyzer
from seo_audit.analyzers.headings import HeadingsAnalyzer
from seo_audit.analyzers.images import ImagesAnalyzer
from seo_audit.analyzers.links import LinksAnalyzer
from seo_audit.analyzers.meta_tags import MetaTagsAnalyzer
from seo_audit.analyzers.mobile import MobileAnalyzer
from seo_audit.analyzers.performance import PerformanceAnalyzer, format_bytes
from seo_audit.analyzers.security import SecurityAnalyzer
from seo_audit.analyzers.structured_data import StructuredDataAnalyzer
from seo_audit.config import AuditConfig


def default_analyzers(config=None) -> List[Analyzer]:
    """
    The ten analyzers of a full audit, in category order.

    Args:
        config: Optional AuditConfig supplying probe timeout, concurrency
            and user agent

    Returns:
        Fresh analyzer instances
    """
    config = config or AuditConfig()
    return [
        MetaTagsAnalyzer(),
        HeadingsAnalyzer(),
        ContentAnalyzer(),
        ImagesAnalyzer(config.probe_timeout, config.max_concurrent_probes),
        PerformanceAnalyzer(),
        LinksAnalyzer(config.probe_timeout, config.max_concurrent_probes, config.user_agent),
        SecurityAnalyzer(config.probe_timeout),
        MobileAnalyzer(),
        AccessibilityAnalyzer(),
        StructuredDataAnalyzer(),
    ]


__all__ = [
    "Analyzer",
    "AccessibilityAnalyzer",
    "ContentAnalyzer",
    "HeadingsAnalyzer",
    "ImagesAnalyzer",
    "LinksAnalyzer",
    "MetaTagsAnalyzer",
    "MobileAnalyzer",
    "PerformanceAnalyzer",
    "SecurityAnalyzer",
    "StructuredDataAnalyzer",
    "default_analyzers",
    "format_bytes",
    "gather_probes",
]
