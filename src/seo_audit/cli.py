"""Command-line interface for the page audit engine."""

import json
import sys
from dataclasses import replace
from typing import List, Optional
from urllib.parse import urlparse

from seo_audit.auditor import run_audit
from seo_audit.config import AuditConfig
from seo_audit.errors import AuditError
from seo_audit.logging_config import setup_logging
from seo_audit.models import AuditResult


def _score_marker(score: int) -> str:
    if score >= 80:
        return "✅"
    if score >= 50:
        return "⚠️ "
    return "❌"


def print_audit_result(result: AuditResult):
    """Print an audit result in a formatted way.

    Args:
        result: AuditResult to print
    """
    print(f"\n{'=' * 60}")
    print(f"SEO Audit for: {result.analyzed_url}")
    print(f"Depth: {result.analysis_depth.value}   Time: {result.timestamp}")
    print(f"{'=' * 60}")

    if result.warning:
        print(f"\n{'!' * 60}")
        print(f"⚠️  SIMULATED RESULT: {result.warning}")
        print(f"{'!' * 60}")

    print(f"\n📊 Overall Score: {result.overall_score}/100")
    print(f"\nCategory Scores:")
    for category in result.categories.values():
        label = category.category.label.capitalize()
        print(f"  {_score_marker(category.score)} {label}: {category.score}/100")

    if result.recommendations:
        print(f"\n💡 Recommendations:")
        for rec in result.recommendations:
            print(f"  • {rec}")

    print(f"\n{'=' * 60}\n")


def build_config(args) -> AuditConfig:
    """Environment configuration with command-line overrides applied."""
    config = AuditConfig.from_env()
    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.timeout is not None:
        overrides["analysis_timeout"] = args.timeout
    if args.fallback is not None:
        overrides["fallback_to_mock"] = args.fallback
    if args.mock:
        overrides["use_mock"] = True
    if args.block_resources:
        overrides["block_resources"] = True
    return replace(config, **overrides)


def audit_command(args, config: AuditConfig) -> int:
    """Audit a single URL and print or save the result."""
    url = args.url
    if urlparse(url).scheme not in ("http", "https"):
        url = f"https://{url}"

    try:
        result = run_audit(url, args.depth, config)
    except (AuditError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output == "json":
        output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
        if args.output_file:
            with open(args.output_file, "w", encoding="utf-8") as f:
                f.write(output)
            print(f"Results written to {args.output_file}")
        else:
            print(output)
    else:
        print_audit_result(result)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="SEO Audit - Load a page in a browser and score it across ten SEO categories"
    )
    parser.add_argument("url", help="URL to audit")
    parser.add_argument(
        "--depth",
        "-d",
        choices=["basic", "standard", "deep"],
        default="standard",
        help="Analysis depth; deep adds keyword density and broken-link checks (default: standard)",
    )
    parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Overall audit timeout in seconds (default: AUDIT_TIMEOUT_SECONDS or 60)",
    )
    parser.add_argument(
        "--fallback",
        dest="fallback",
        action="store_true",
        default=None,
        help="Return simulated data if the live audit fails",
    )
    parser.add_argument(
        "--no-fallback",
        dest="fallback",
        action="store_false",
        help="Fail instead of returning simulated data",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Skip the browser and return simulated data",
    )
    parser.add_argument(
        "--block-resources",
        action="store_true",
        help="Abort image, font, stylesheet and media requests while loading",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging verbosity (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    args = parser.parse_args(argv)

    config = build_config(args)

    # --log-level wins over LOG_LEVEL
    setup_logging(
        level=config.log_level,
        log_file=args.log_file,
    )

    return audit_command(args, config)


if __name__ == "__main__":
    sys.exit(main())
