"""Data models for page audits."""

import math
from dataclasses import FrozenInstanceError, dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from bs4 import BeautifulSoup

from seo_audit.constants import MAX_SCORE, MIN_SCORE


class AnalysisDepth(str, Enum):
    """How thorough an audit should be."""
    BASIC = "basic"
    STANDARD = "standard"
    DEEP = "deep"

    @classmethod
    def parse(cls, value: Union[str, "AnalysisDepth"]) -> "AnalysisDepth":
        """Convert a user-supplied depth into an AnalysisDepth.

        Raises:
            ValueError: If the value is not one of basic, standard, deep
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Invalid depth '{value}'. Must be one of: basic, standard, deep"
            ) from None


class Category(str, Enum):
    """Audit categories, valued by their key in AuditResult.categories."""
    META_TAGS = "metaTags"
    HEADINGS = "headings"
    CONTENT = "content"
    IMAGES = "images"
    PERFORMANCE = "performance"
    LINKS = "links"
    SECURITY = "security"
    MOBILE_OPTIMIZATION = "mobileOptimization"
    ACCESSIBILITY = "accessibility"
    STRUCTURED_DATA = "structuredData"

    @property
    def label(self) -> str:
        """Human-readable name used in issue strings."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.META_TAGS: "meta tags",
    Category.HEADINGS: "headings",
    Category.CONTENT: "content",
    Category.IMAGES: "images",
    Category.PERFORMANCE: "performance",
    Category.LINKS: "links",
    Category.SECURITY: "security",
    Category.MOBILE_OPTIMIZATION: "mobile optimization",
    Category.ACCESSIBILITY: "accessibility",
    Category.STRUCTURED_DATA: "structured data",
}

# Always present in an AuditResult
MANDATORY_CATEGORIES = (
    Category.META_TAGS,
    Category.HEADINGS,
    Category.CONTENT,
    Category.IMAGES,
    Category.PERFORMANCE,
    Category.LINKS,
    Category.SECURITY,
)

# Present only when the live analysis completed
OPTIONAL_CATEGORIES = (
    Category.MOBILE_OPTIMIZATION,
    Category.ACCESSIBILITY,
    Category.STRUCTURED_DATA,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Round half-up and clamp a score into [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(value)))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _serialize(value: Any) -> Any:
    """Convert dataclasses to dicts with camelCase keys."""
    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): _serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class AuditRequest:
    """One request to audit a single page."""

    url: str
    depth: AnalysisDepth = AnalysisDepth.STANDARD


@dataclass
class ResourceTiming:
    """A network response observed while the page loaded."""

    url: str
    type: str = "other"
    status: int = 0
    size: int = 0  # bytes, from Content-Length when reported
    timing: Dict[str, float] = field(default_factory=dict)


@dataclass
class ProbeResponse:
    """Status and headers returned by a lightweight resource probe."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_length(self) -> int:
        """Content-Length in bytes, 0 when absent or unparsable."""
        for name, value in self.headers.items():
            if name.lower() == "content-length":
                try:
                    return int(value)
                except (TypeError, ValueError):
                    return 0
        return 0


@dataclass(frozen=True)
class PageSnapshot:
    """Read-only view of a loaded page shared by all analyzers.

    ``document`` is the serialized DOM parsed with BeautifulSoup. ``page`` and
    ``session`` are the live Playwright page and BrowserSession when the
    snapshot came from a browser; analyzers that need them must cope with None.
    """

    url: str
    final_url: str
    html: str
    document: BeautifulSoup
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    resources: List[ResourceTiming] = field(default_factory=list)
    page: Any = None
    session: Any = None

    @classmethod
    def from_html(
        cls,
        html: str,
        final_url: str,
        url: Optional[str] = None,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        resources: Optional[List[ResourceTiming]] = None,
        page: Any = None,
        session: Any = None,
    ) -> "PageSnapshot":
        """Build a snapshot from raw HTML."""
        return cls(
            url=url or final_url,
            final_url=final_url,
            html=html or "",
            document=BeautifulSoup(html or "", "lxml"),
            status=status,
            headers=dict(headers or {}),
            resources=list(resources or []),
            page=page,
            session=session,
        )

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive lookup of a navigation response header."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


# =============================================================================
# Category results
# =============================================================================

@dataclass
class CategoryResult:
    """Score (0-100) and issue list shared by every category."""

    category: ClassVar[Category]

    score: int = 0
    issues: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.score = clamp_score(self.score)
        if self.issues is None:
            self.issues = []

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise FrozenInstanceError(f"cannot assign to field {name!r} of a sealed result")
        super().__setattr__(name, value)

    def seal(self) -> "CategoryResult":
        """Make score and issues read-only; issues becomes a tuple."""
        self.issues = tuple(self.issues)
        object.__setattr__(self, "_sealed", True)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape used by AuditResult.to_dict()."""
        return _serialize(self)


@dataclass
class TitleTag:
    exists: bool = False
    length: int = 0
    optimal: bool = False
    value: str = ""
    includes_site_name: bool = False


@dataclass
class DescriptionTag:
    exists: bool = False
    length: int = 0
    optimal: bool = False
    value: str = ""


@dataclass
class OptionalTag:
    exists: bool = False
    value: str = ""


@dataclass
class SocialTags:
    open_graph: bool = False
    twitter_card: bool = False


@dataclass
class MetaTagsResult(CategoryResult):
    category: ClassVar[Category] = Category.META_TAGS

    title: TitleTag = field(default_factory=TitleTag)
    description: DescriptionTag = field(default_factory=DescriptionTag)
    keywords: OptionalTag = field(default_factory=OptionalTag)
    canonical: OptionalTag = field(default_factory=OptionalTag)
    social_tags: SocialTags = field(default_factory=SocialTags)


@dataclass
class HeadingLevel:
    count: int = 0
    optimal: bool = False
    values: List[str] = field(default_factory=list)


@dataclass
class HeadingsResult(CategoryResult):
    category: ClassVar[Category] = Category.HEADINGS

    h1: HeadingLevel = field(default_factory=HeadingLevel)
    h2: HeadingLevel = field(default_factory=HeadingLevel)
    h3: HeadingLevel = field(default_factory=HeadingLevel)
    h4: int = 0
    h5: int = 0
    h6: int = 0
    structure: str = "correct"
    structure_issues: int = 0


@dataclass
class ContentResult(CategoryResult):
    category: ClassVar[Category] = Category.CONTENT

    word_count: int = 0
    paragraphs: int = 0
    sentence_count: int = 0
    avg_sentence_length: int = 0
    avg_paragraph_length: int = 0
    readability: str = "medium"
    keyword_density: str = "0%"
    top_keyword: Optional[str] = None


@dataclass
class ImagesResult(CategoryResult):
    category: ClassVar[Category] = Category.IMAGES

    total: int = 0
    with_alt: int = 0
    without_alt: int = 0
    large_images: int = 0
    avg_size: int = 0  # bytes, over all images


@dataclass
class ResourceSummary:
    total: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    total_size_bytes: int = 0
    total_size: str = "0 Bytes"


@dataclass
class PerformanceResult(CategoryResult):
    category: ClassVar[Category] = Category.PERFORMANCE

    ttfb_ms: float = 0.0
    load_time_ms: float = 0.0
    fcp_ms: float = 0.0
    tti_ms: float = 0.0
    resources: ResourceSummary = field(default_factory=ResourceSummary)


@dataclass
class LinksResult(CategoryResult):
    category: ClassVar[Category] = Category.LINKS

    total: int = 0
    internal: int = 0
    external: int = 0
    broken: int = 0
    nofollow: int = 0
    unique_urls: int = 0
    broken_urls: List[str] = field(default_factory=list)


@dataclass
class SecurityResult(CategoryResult):
    category: ClassVar[Category] = Category.SECURITY

    https: bool = False
    content_security_policy: bool = False
    x_frame_options: bool = False
    strict_transport_security: bool = False
    x_content_type_options: bool = False


@dataclass
class TapTargetResults:
    passed: bool = True
    too_small: int = 0


@dataclass
class MobileOptimizationResult(CategoryResult):
    category: ClassVar[Category] = Category.MOBILE_OPTIMIZATION

    viewport_meta: bool = False
    responsive_design: Optional[bool] = None
    touch_targets: Optional[bool] = None
    font_sizes: Optional[bool] = None
    tap_target_results: TapTargetResults = field(default_factory=TapTargetResults)


@dataclass
class AccessibilityResult(CategoryResult):
    category: ClassVar[Category] = Category.ACCESSIBILITY

    has_aria_labels: bool = False
    image_alt_texts: bool = False
    contrast_ratio: Optional[bool] = None
    semantic_elements: bool = False
    form_labels: bool = False


@dataclass
class StructuredDataResult(CategoryResult):
    category: ClassVar[Category] = Category.STRUCTURED_DATA

    has_structured_data: bool = False
    types: List[str] = field(default_factory=list)
    valid_structure: bool = False
    jsonld_count: int = 0
    microdata_count: int = 0
    rdfa_count: int = 0


AnyCategoryResult = Union[
    MetaTagsResult,
    HeadingsResult,
    ContentResult,
    ImagesResult,
    PerformanceResult,
    LinksResult,
    SecurityResult,
    MobileOptimizationResult,
    AccessibilityResult,
    StructuredDataResult,
]

RESULT_TYPES = {
    result_type.category: result_type
    for result_type in (
        MetaTagsResult,
        HeadingsResult,
        ContentResult,
        ImagesResult,
        PerformanceResult,
        LinksResult,
        SecurityResult,
        MobileOptimizationResult,
        AccessibilityResult,
        StructuredDataResult,
    )
}


# =============================================================================
# Audit result
# =============================================================================

def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class AuditResult:
    """Outcome of one audit.

    Build it through ``seo_audit.scoring.build_audit_result`` so that
    ``overall_score`` and ``recommendations`` are derived from ``categories``.
    The category mapping is read-only and its results are sealed copies, so
    the stored score cannot drift from them after the result is returned.
    A populated ``warning`` means the categories are simulated, not measured.
    """

    overall_score: int
    categories: Mapping[str, CategoryResult]
    recommendations: Tuple[str, ...]
    analyzed_url: str
    analysis_depth: AnalysisDepth
    timestamp: str = field(default_factory=utc_timestamp)
    warning: Optional[str] = None

    @property
    def is_simulated(self) -> bool:
        return self.warning is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape consumed by report and storage layers."""
        data: Dict[str, Any] = {
            "overallScore": self.overall_score,
            "categories": {
                name: result.to_dict() for name, result in self.categories.items()
            },
            "recommendations": list(self.recommendations),
            "analyzedUrl": self.analyzed_url,
            "timestamp": self.timestamp,
            "analysisDepth": self.analysis_depth.value,
        }
        if self.warning is not None:
            data["warning"] = self.warning
        return data
