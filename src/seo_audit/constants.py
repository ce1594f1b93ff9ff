# src/seo_audit/constants.py
"""Centralized constants for the page audit engine.

This module contains the thresholds and magic numbers used by the analyzers,
the score aggregator and the pipeline. For runtime configuration (timeouts,
feature flags, remote browser token), see config.py and AuditConfig.
"""

# =============================================================================
# Score Bounds
# =============================================================================

MIN_SCORE = 0
MAX_SCORE = 100

# Score returned by an analyzer that had nothing to measure
NEUTRAL_SCORE = 50


# =============================================================================
# Category Weights
# =============================================================================

# Fixed weights for the overall score; only present categories contribute
CATEGORY_WEIGHTS = {
    "metaTags": 0.15,
    "headings": 0.10,
    "content": 0.20,
    "images": 0.10,
    "performance": 0.15,
    "links": 0.10,
    "security": 0.10,
    "mobileOptimization": 0.05,
    "accessibility": 0.05,
    "structuredData": 0.05,
}

# Overall score below which a general advisory is appended to recommendations
GENERAL_ADVISORY_THRESHOLD = 70


# =============================================================================
# Meta Tags Constants
# =============================================================================

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 160

META_TAGS_BASE_SCORE = 60
META_TAGS_CHECK_POINTS = 10  # title, description, canonical, social tags

# Separators that usually split "Page Name | Site Name"
TITLE_SITE_NAME_SEPARATORS = (" | ", " - ", " – ", " — ", ": ")


# =============================================================================
# Headings Constants
# =============================================================================

HEADINGS_ISSUE_PENALTY = 20


# =============================================================================
# Content Constants
# =============================================================================

CONTENT_ISSUE_PENALTY = 15
THIN_CONTENT_WORDS = 300
MIN_PARAGRAPHS = 3
MAX_AVG_PARAGRAPH_WORDS = 150
MAX_AVG_SENTENCE_WORDS = 25

# Readability bands on average sentence length (words)
EASY_SENTENCE_WORDS = 12
DIFFICULT_SENTENCE_WORDS = 20

# Keyword density (deep analysis only)
MIN_KEYWORD_LENGTH = 4  # tokens must be longer than 3 characters
HIGH_KEYWORD_DENSITY_PERCENT = 5.0
LOW_KEYWORD_DENSITY_PERCENT = 0.5

# Selectors whose text counts as page content besides <p>
CONTENT_CONTAINER_SELECTORS = "article, main, .content, #content, .post, .entry"


# =============================================================================
# Images Constants
# =============================================================================

LARGE_IMAGE_BYTES = 100 * 1024  # 100KB
LARGE_AVERAGE_IMAGE_BYTES = 200 * 1024  # 200KB
IMAGE_ALT_WEIGHT = 0.7
IMAGE_SIZE_WEIGHT = 0.3


# =============================================================================
# Links Constants
# =============================================================================

LINKS_ISSUE_PENALTY = 15
BROKEN_LINK_PENALTY = 10
MAX_BROKEN_LINK_PENALTY = 40
MIN_UNIQUE_LINK_RATIO = 0.7
DUPLICATE_CHECK_MIN_LINKS = 10
MIN_INTERNAL_LINKS = 3
INTERNAL_CHECK_MIN_LINKS = 5

# rel values that withhold ranking credit
NOFOLLOW_REL_VALUES = ("nofollow", "ugc", "sponsored")

# href prefixes that are not navigable links
SKIPPED_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:")


# =============================================================================
# Performance Constants
# =============================================================================

PERFORMANCE_ISSUE_PENALTY = 20
MAX_TTFB_MS = 200
MAX_LOAD_TIME_MS = 3000
MAX_FCP_MS = 1800
MAX_RESOURCE_COUNT = 80
MAX_PAGE_WEIGHT_BYTES = 2 * 1024 * 1024  # 2MB

# Buffer added to domInteractive for the approximate time-to-interactive
TTI_SCRIPT_BUFFER_MS = 50


# =============================================================================
# Security Constants
# =============================================================================

SECURITY_HTTPS_BASE_SCORE = 60
SECURITY_HTTP_BASE_SCORE = 20
SECURITY_HEADER_POINTS = 10


# =============================================================================
# Mobile Constants
# =============================================================================

MOBILE_CHECK_POINTS = 25
MIN_TOUCH_TARGET_PX = 48
MIN_FONT_SIZE_PX = 12
MIN_TOUCH_TARGET_RATIO = 0.9
MIN_READABLE_FONT_RATIO = 0.95

# Narrow viewport used for the overflow check (iPhone X width)
MOBILE_VIEWPORT = {"width": 375, "height": 812}


# =============================================================================
# Accessibility Constants
# =============================================================================

ACCESSIBILITY_CHECK_POINTS = 20
MIN_LABELLED_INTERACTIVE_RATIO = 0.9
MIN_IMAGE_ALT_RATIO = 0.9
CONTRAST_SAMPLE_LIMIT = 100
MIN_CONTRAST_RATIO = 4.5
MIN_GOOD_CONTRAST_RATIO = 0.85
MIN_SEMANTIC_ELEMENTS = 3
MIN_FORM_LABEL_RATIO = 0.95

SEMANTIC_ELEMENTS = ("header", "nav", "main", "footer", "article", "section")


# =============================================================================
# Structured Data Constants
# =============================================================================

STRUCTURED_DATA_BASE_SCORE = 60
STRUCTURED_DATA_VALID_POINTS = 20
STRUCTURED_DATA_TYPED_POINTS = 20

RECOMMENDED_SCHEMA_TYPES = (
    "Organization",
    "LocalBusiness",
    "Product",
    "Article",
    "BreadcrumbList",
    "Event",
    "Recipe",
    "Review",
    "FAQPage",
)


# =============================================================================
# Pipeline Constants
# =============================================================================

DEFAULT_ANALYSIS_TIMEOUT_SECONDS = 60.0
DEFAULT_NAVIGATION_TIMEOUT_SECONDS = 30.0
MIN_NAVIGATION_TIMEOUT_SECONDS = 1.0
MAX_NAVIGATION_TIMEOUT_SECONDS = 300.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_CONCURRENT_PROBES = 10

# Resource types dropped when request blocking is enabled
BLOCKABLE_RESOURCE_TYPES = ["image", "font", "stylesheet", "media"]

DEFAULT_BROWSERLESS_ENDPOINT = "wss://chrome.browserless.io?token={token}"
