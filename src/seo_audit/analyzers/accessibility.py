"""
Accessibility Analyzer

Five equally weighted checks:
- interactive elements carry an accessible label or visible text
- images carry alt text
- text meets the WCAG AA 4.5:1 contrast ratio (sampled, live page only)
- semantic landmark elements are used
- form inputs have an associated label
"""

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from seo_audit.analyzers.base import Analyzer, evaluate
from seo_audit.analyzers.images import has_alt_text
from seo_audit.constants import (
    ACCESSIBILITY_CHECK_POINTS,
    CONTRAST_SAMPLE_LIMIT,
    MIN_CONTRAST_RATIO,
    MIN_FORM_LABEL_RATIO,
    MIN_GOOD_CONTRAST_RATIO,
    MIN_IMAGE_ALT_RATIO,
    MIN_LABELLED_INTERACTIVE_RATIO,
    MIN_SEMANTIC_ELEMENTS,
    SEMANTIC_ELEMENTS,
)
from seo_audit.models import AccessibilityResult, AnalysisDepth, Category, PageSnapshot

logger = logging.getLogger(__name__)

INTERACTIVE_SELECTOR = "button, a[href], input, select, textarea, [role]"
FORM_INPUT_SELECTOR = "input, textarea, select"
LABEL_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")

# Returns [color, backgroundColor] pairs for a sample of text elements
COLOR_SAMPLE_SCRIPT = """
(limit) => Array.from(document.querySelectorAll(
    'p, h1, h2, h3, h4, h5, h6, a, button, li, label'
)).slice(0, limit).map(el => {
    const style = window.getComputedStyle(el);
    return [style.color, style.backgroundColor];
})
"""

_HEX_COLOR = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_RGB_COLOR = re.compile(
    r"^rgba?\(\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)\s*(?:,\s*([\d.]+)\s*)?\)$",
    re.IGNORECASE,
)

RGB = Tuple[float, float, float]


def parse_color(value: str) -> Optional[Tuple[RGB, float]]:
    """Parse '#rrggbb', '#rgb', 'rgb(...)' or 'rgba(...)' into (rgb, alpha)."""
    value = (value or "").strip()
    match = _HEX_COLOR.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        rgb = tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
        return rgb, 1.0

    match = _RGB_COLOR.match(value)
    if match:
        rgb = tuple(float(match.group(i)) for i in (1, 2, 3))
        alpha = float(match.group(4)) if match.group(4) is not None else 1.0
        return rgb, alpha

    return None


def relative_luminance(rgb: RGB) -> float:
    """WCAG relative luminance of an sRGB color (0-255 channels)."""
    channels = []
    for channel in rgb:
        c = channel / 255
        channels.append(c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4)
    r, g, b = channels
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: RGB, background: RGB) -> float:
    lighter, darker = sorted(
        (relative_luminance(foreground), relative_luminance(background)), reverse=True
    )
    return (lighter + 0.05) / (darker + 0.05)


def count_low_contrast(pairs: List[List[str]]) -> Tuple[int, int]:
    """
    Count sampled elements below MIN_CONTRAST_RATIO.

    Elements with a transparent background are not judged (their real
    backdrop is an ancestor's) but still count as sampled.

    Returns:
        (sampled, low_contrast)
    """
    low = 0
    for color, background in pairs:
        bg = parse_color(background)
        if background == "transparent" or bg is None or bg[1] == 0:
            continue
        fg = parse_color(color)
        if fg is None:
            continue
        if contrast_ratio(fg[0], bg[0]) < MIN_CONTRAST_RATIO:
            low += 1
    return len(pairs), low


def _ratio(total: int, missing: int) -> float:
    return (total - missing) / total if total > 0 else 1.0


def _is_hidden_input(element) -> bool:
    return element.name == "input" and (element.get("type") or "").lower() == "hidden"


def _has_label(element, document: BeautifulSoup) -> bool:
    element_id = element.get("id")
    if element_id and document.find("label", attrs={"for": element_id}) is not None:
        return True
    if element.find_parent("label") is not None:
        return True
    return bool(element.get("aria-label") or element.get("aria-labelledby"))


class AccessibilityAnalyzer(Analyzer):
    """Score five accessibility heuristics, 20 points each."""

    category = Category.ACCESSIBILITY

    async def _analyze(self, snapshot: PageSnapshot, depth: AnalysisDepth) -> AccessibilityResult:
        document = snapshot.document
        result = AccessibilityResult()

        interactive = [el for el in document.select(INTERACTIVE_SELECTOR) if not _is_hidden_input(el)]
        unlabelled = sum(
            1 for el in interactive
            if not any(el.has_attr(attr) for attr in LABEL_ATTRIBUTES)
            and not el.get_text(strip=True)
        )
        result.has_aria_labels = _ratio(len(interactive), unlabelled) >= MIN_LABELLED_INTERACTIVE_RATIO
        if not result.has_aria_labels:
            result.issues.append(
                f"{unlabelled} interactive elements missing proper labels (ARIA or text)"
            )

        images = document.find_all("img")
        missing_alt = sum(1 for img in images if not has_alt_text(img))
        result.image_alt_texts = _ratio(len(images), missing_alt) >= MIN_IMAGE_ALT_RATIO
        if not result.image_alt_texts:
            result.issues.append(f"{missing_alt} images missing alt text (required for screen readers)")

        pairs = await evaluate(snapshot, COLOR_SAMPLE_SCRIPT, CONTRAST_SAMPLE_LIMIT)
        if pairs is not None:
            sampled, low = count_low_contrast(pairs[:CONTRAST_SAMPLE_LIMIT])
            result.contrast_ratio = _ratio(sampled, low) >= MIN_GOOD_CONTRAST_RATIO
            if not result.contrast_ratio:
                result.issues.append(
                    f"{low} text elements have insufficient contrast ratio "
                    f"(should be at least {MIN_CONTRAST_RATIO:g}:1)"
                )

        missing_semantic = [tag for tag in SEMANTIC_ELEMENTS if document.find(tag) is None]
        result.semantic_elements = (
            len(SEMANTIC_ELEMENTS) - len(missing_semantic) >= MIN_SEMANTIC_ELEMENTS
        )
        if not result.semantic_elements:
            result.issues.append(
                f"Missing semantic HTML elements: {', '.join(missing_semantic)} "
                f"(improves SEO and accessibility)"
            )

        inputs = [el for el in document.select(FORM_INPUT_SELECTOR) if not _is_hidden_input(el)]
        unlabelled_inputs = sum(1 for el in inputs if not _has_label(el, document))
        result.form_labels = _ratio(len(inputs), unlabelled_inputs) >= MIN_FORM_LABEL_RATIO
        if not result.form_labels:
            result.issues.append(
                f"{unlabelled_inputs} form inputs missing labels (required for accessibility)"
            )

        # Contrast is None without a live page and counts as passing
        checks = [
            result.has_aria_labels,
            result.image_alt_texts,
            result.contrast_ratio,
            result.semantic_elements,
            result.form_labels,
        ]
        result.score = ACCESSIBILITY_CHECK_POINTS * sum(1 for check in checks if check is not False)
        return result
