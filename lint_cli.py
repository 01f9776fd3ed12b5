#!/usr/bin/env python3
"""
Lint a MathML file and print a report grouped by severity.

Usage: python lint_cli.py FILE|- [--profile P] [--strict-renderer-attributes] [--json]
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from core.config import settings
from services.lint.engine import LintOptions, LintResult, run_lint
from services.lint.findings import SEVERITY_ERROR, SEVERITY_INFO, SEVERITY_OK, SEVERITY_WARN
from services.lint.profiles import PROFILE_ALIASES, PROFILE_REGISTRY

_SECTIONS = (
    (SEVERITY_ERROR, "ERRORS"),
    (SEVERITY_WARN, "WARNINGS"),
    (SEVERITY_INFO, "INFO"),
    (SEVERITY_OK, "OK"),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lint MathML against a versioned schema profile.")
    parser.add_argument("path", help="MathML file to lint, or - for stdin")
    parser.add_argument(
        "--profile",
        default=settings.default_profile,
        help=f"lint profile ({', '.join([*PROFILE_ALIASES, *PROFILE_REGISTRY])})",
    )
    parser.add_argument(
        "--strict-renderer-attributes",
        action="store_true",
        help="report renderer metadata attributes (data-mjx-*) as unknown",
    )
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    return parser


def read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def format_report(result: LintResult) -> str:
    lines = [
        "=" * 80,
        f"MATHML LINT REPORT  (profile: {result.profile.id}, {result.source_length} characters)",
        "=" * 80,
    ]
    for severity, heading in _SECTIONS:
        group = [finding for finding in result.findings if finding.severity == severity]
        if not group:
            continue
        lines.append("")
        lines.append(f"{heading} ({len(group)}):")
        lines.append("-" * 80)
        for finding in group:
            lines.append(f"  [{finding.code}] {finding.title}: {finding.message}")
            if finding.reference:
                lines.append(f"         {finding.reference}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        source = read_source(args.path)
    except OSError as exc:
        print(f"Cannot read {args.path}: {exc}", file=sys.stderr)
        return 2

    options = LintOptions(
        profile=args.profile,
        ignore_data_mjx_attributes=not args.strict_renderer_attributes,
    )
    result = run_lint(source, options)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(format_report(result))
    return 1 if result.has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
