"""Live audits against a real browser and the network.

Run with: SEO_AUDIT_INTEGRATION=1 pytest -m integration
"""

import os

import pytest

from seo_audit import AuditConfig, PageAuditor
from seo_audit.models import Category

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.getenv("SEO_AUDIT_INTEGRATION"),
        reason="set SEO_AUDIT_INTEGRATION=1 to launch a browser",
    ),
]


class TestLiveAudit:
    """End-to-end audits of a public page."""

    @pytest.mark.asyncio
    async def test_audit_example_domain(self):
        auditor = PageAuditor(AuditConfig(analysis_timeout=90, fallback_to_mock=False))

        result = await auditor.audit("https://example.com/", "standard")

        assert result.warning is None
        assert set(result.categories) == {category.value for category in Category}
        assert result.categories["security"].to_dict()["https"] is True
        assert 0 <= result.overall_score <= 100
