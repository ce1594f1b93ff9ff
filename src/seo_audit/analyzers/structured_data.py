"""
Structured Data Analyzer

Detects structured data markup and the schema types it declares:
- JSON-LD (<script type="application/ld+json">)
- Microdata (itemscope / itemtype)
- RDFa (typeof)
"""

import json
import re
from typing import Any, List, Tuple

from bs4 import BeautifulSoup

from seo_audit.analyzers.base import Analyzer
from seo_audit.constants import (
    RECOMMENDED_SCHEMA_TYPES,
    STRUCTURED_DATA_BASE_SCORE,
    STRUCTURED_DATA_TYPED_POINTS,
    STRUCTURED_DATA_VALID_POINTS,
)
from seo_audit.models import AnalysisDepth, Category, PageSnapshot, StructuredDataResult

_SCHEMA_ORG_TYPE = re.compile(r"https?://schema\.org/(\w+)")


def _declared_types(item: Any) -> List[str]:
    if not isinstance(item, dict):
        return []
    declared = item.get("@type")
    if isinstance(declared, str):
        return [declared]
    if isinstance(declared, list):
        return [t for t in declared if isinstance(t, str)]
    return []


def jsonld_types(data: Any) -> List[str]:
    """Types declared at the top level of a JSON-LD payload or its @graph."""
    items = data if isinstance(data, list) else [data]
    types = []
    for item in items:
        types.extend(_declared_types(item))
        if isinstance(item, dict) and isinstance(item.get("@graph"), list):
            for node in item["@graph"]:
                types.extend(_declared_types(node))
    return types


def extract_jsonld(document: BeautifulSoup) -> Tuple[int, List[str], bool]:
    """
    Parse every JSON-LD block.

    Returns:
        (block count, declared types, True if every block parsed)
    """
    scripts = document.find_all("script", attrs={"type": re.compile(r"^application/ld\+json$", re.I)})
    types: List[str] = []
    valid = True
    for script in scripts:
        try:
            data = json.loads(script.string or script.get_text() or "{}")
        except ValueError:
            valid = False
            continue
        types.extend(jsonld_types(data))
    return len(scripts), types, valid


def extract_microdata(document: BeautifulSoup) -> Tuple[int, List[str]]:
    elements = document.find_all(attrs={"itemscope": True})
    types = []
    for element in elements:
        for itemtype in (element.get("itemtype") or "").split():
            match = _SCHEMA_ORG_TYPE.match(itemtype)
            types.append(match.group(1) if match else itemtype)
    return len(elements), types


def extract_rdfa(document: BeautifulSoup) -> Tuple[int, List[str]]:
    elements = document.find_all(attrs={"typeof": True})
    types = []
    for element in elements:
        types.extend((element.get("typeof") or "").split())
    return len(elements), types


def has_recommended_type(types: List[str]) -> bool:
    # Substring match so "schema:Product" or "ProductGroup" count
    return any(rec in declared for declared in types for rec in RECOMMENDED_SCHEMA_TYPES)


class StructuredDataAnalyzer(Analyzer):
    """Score presence, validity and typing of structured data."""

    category = Category.STRUCTURED_DATA

    async def _analyze(
        self, snapshot: PageSnapshot, depth: AnalysisDepth
    ) -> StructuredDataResult:
        document = snapshot.document

        jsonld_count, jsonld_found, jsonld_valid = extract_jsonld(document)
        microdata_count, microdata_found = extract_microdata(document)
        rdfa_count, rdfa_found = extract_rdfa(document)

        result = StructuredDataResult(
            has_structured_data=bool(jsonld_count or microdata_count or rdfa_count),
            types=list(dict.fromkeys(jsonld_found + microdata_found + rdfa_found)),
            valid_structure=jsonld_valid if jsonld_count else True,
            jsonld_count=jsonld_count,
            microdata_count=microdata_count,
            rdfa_count=rdfa_count,
        )

        if not result.has_structured_data:
            result.issues.append(
                "No structured data found (recommended for rich snippets in search results)"
            )
            result.score = 0
            return result

        if not result.valid_structure:
            result.issues.append("Invalid JSON-LD structured data found (syntax errors)")
        if not result.types:
            result.issues.append("Structured data found but no types specified")
        elif not has_recommended_type(result.types):
            result.issues.append(
                f"Consider adding common schema types ({', '.join(RECOMMENDED_SCHEMA_TYPES)})"
            )

        score = STRUCTURED_DATA_BASE_SCORE
        if result.valid_structure:
            score += STRUCTURED_DATA_VALID_POINTS
        if result.types:
            score += STRUCTURED_DATA_TYPED_POINTS
        result.score = score
        return result
