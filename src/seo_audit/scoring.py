"""
Score aggregation.

Combines the category results of one audit into the overall score and
the recommendation list. AuditResult objects are only ever built here, so
the stored overall score always matches its categories.
"""

import copy
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from seo_audit.constants import CATEGORY_WEIGHTS, GENERAL_ADVISORY_THRESHOLD
from seo_audit.models import (
    AuditRequest,
    AuditResult,
    Category,
    CategoryResult,
    clamp_score,
)

logger = logging.getLogger(__name__)

GENERAL_ADVISORY = (
    "Improve overall SEO: address the issues in the highest-weighted categories "
    "(content, meta tags, performance) first"
)

CategoryMap = Mapping[Union[str, Category], CategoryResult]


def _normalize(categories: CategoryMap) -> Dict[str, CategoryResult]:
    """Key by category name, in canonical category order."""
    by_name = {Category(key).value: result for key, result in categories.items()}
    return {name: by_name[name] for name in CATEGORY_WEIGHTS if name in by_name}


def calculate_overall_score(categories: CategoryMap) -> int:
    """
    Weighted mean of the category scores present.

    Only categories present contribute to the numerator and the
    denominator, so a missing optional category does not drag the score
    down.

    Returns:
        Integer 0-100 (half-up rounding); 0 when no category is present
    """
    present = _normalize(categories)
    total_weight = sum(CATEGORY_WEIGHTS[name] for name in present)
    if total_weight == 0:
        return 0

    weighted = sum(result.score * CATEGORY_WEIGHTS[name] for name, result in present.items())
    return clamp_score(weighted / total_weight)


def generate_recommendations(
    categories: CategoryMap,
    overall_score: Optional[int] = None,
    general_advisories: bool = True,
) -> List[str]:
    """
    Flatten all category issues into one de-duplicated list.

    Issues keep their first-seen order. A general advisory is appended
    when ``overall_score`` is below GENERAL_ADVISORY_THRESHOLD.
    """
    recommendations = list(dict.fromkeys(
        issue for result in _normalize(categories).values() for issue in result.issues
    ))

    if (
        general_advisories
        and overall_score is not None
        and overall_score < GENERAL_ADVISORY_THRESHOLD
        and GENERAL_ADVISORY not in recommendations
    ):
        recommendations.append(GENERAL_ADVISORY)

    return recommendations


def aggregate(categories: CategoryMap, general_advisories: bool = True) -> Tuple[int, List[str]]:
    """Return (overall_score, recommendations) for a set of category results."""
    overall_score = calculate_overall_score(categories)
    return overall_score, generate_recommendations(categories, overall_score, general_advisories)


def build_audit_result(
    request: AuditRequest,
    categories: CategoryMap,
    analyzed_url: Optional[str] = None,
    warning: Optional[str] = None,
    general_advisories: bool = True,
) -> AuditResult:
    """
    Assemble the final AuditResult from category results.

    Args:
        request: The audit request being answered
        categories: Category results keyed by category
        analyzed_url: Final URL after redirects (defaults to the requested URL)
        warning: Set when the categories are simulated rather than measured
        general_advisories: Append general advice to low-scoring results

    Returns:
        Immutable AuditResult
    """
    normalized = _normalize(categories)
    overall_score, recommendations = aggregate(normalized, general_advisories)
    logger.debug(f"Aggregated {len(normalized)} categories into overall score {overall_score}")

    sealed = {name: copy.deepcopy(result).seal() for name, result in normalized.items()}

    return AuditResult(
        overall_score=overall_score,
        categories=MappingProxyType(sealed),
        recommendations=tuple(recommendations),
        analyzed_url=analyzed_url or request.url,
        analysis_depth=request.depth,
        warning=warning,
    )
