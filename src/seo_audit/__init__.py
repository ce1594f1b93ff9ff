"""Single-page SEO audit engine driven by a real browser."""

__version__ = "0.1.0"

from seo_audit.auditor import AuditRun, AuditState, PageAuditor, run_audit
from seo_audit.browser_config import DEFAULT_CONFIG, FAST_CONFIG, BrowserConfig
from seo_audit.config import AuditConfig
from seo_audit.errors import (
    AnalyzerFault,
    AuditError,
    CleanupFault,
    HttpError,
    NavigationFailed,
    NavigationTimeout,
    NoBrowserAvailable,
    OperationTimeout,
)
from seo_audit.models import (
    AnalysisDepth,
    AuditRequest,
    AuditResult,
    Category,
    CategoryResult,
    PageSnapshot,
)
from seo_audit.scoring import aggregate, calculate_overall_score, generate_recommendations

__all__ = [
    "__version__",
    # Pipeline
    "PageAuditor",
    "AuditRun",
    "AuditState",
    "run_audit",
    # Configuration
    "AuditConfig",
    "BrowserConfig",
    "DEFAULT_CONFIG",
    "FAST_CONFIG",
    # Models
    "AnalysisDepth",
    "AuditRequest",
    "AuditResult",
    "Category",
    "CategoryResult",
    "PageSnapshot",
    # Scoring
    "aggregate",
    "calculate_overall_score",
    "generate_recommendations",
    # Errors
    "AuditError",
    "AnalyzerFault",
    "CleanupFault",
    "HttpError",
    "NavigationFailed",
    "NavigationTimeout",
    "NoBrowserAvailable",
    "OperationTimeout",
]
