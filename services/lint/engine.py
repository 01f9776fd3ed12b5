"""
Lint engine.

run_lint parses one MathML document, sweeps every element with the
structural validators and the notation heuristics, and returns a
deduplicated, never-empty list of findings. Nothing here raises for bad
user content: unparseable input becomes a single error finding.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, fields
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from core.config import settings
from core.logger import logger
from services.lint.dom import MathNode, build_tree
from services.lint.findings import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_OK,
    SEVERITY_WARN,
    Finding,
    dedupe_findings,
    has_errors,
    make_finding,
)
from services.lint.heuristics import HEURISTIC_VALIDATORS
from services.lint.profiles import Profile, resolve_profile
from services.lint.schema_adapter import get_rule_set
from services.lint.schema_data import MATHML_NAMESPACE
from services.lint.validators import STRUCTURAL_VALIDATORS, LintContext, Validator
from utils.xml_utils import declares_namespace_prefix, find_root_start_tag, root_tag_name, split_qname

DEFAULT_VALIDATORS: tuple[Validator, ...] = STRUCTURAL_VALIDATORS + HEURISTIC_VALIDATORS

ASSUMED_PREFIX = "m"

# Accepted spellings for option keys coming from JSON clients
_OPTION_ALIASES = {
    "ignoreDataMjxAttributes": "ignore_data_mjx_attributes",
    "foreignAttributePrefixes": "foreign_attribute_prefixes",
}


@dataclass(frozen=True)
class LintOptions:
    profile: Union[str, Profile] = settings.default_profile
    ignore_data_mjx_attributes: bool = settings.ignore_data_mjx_attributes
    foreign_attribute_prefixes: tuple[str, ...] = settings.foreign_attribute_prefixes

    @classmethod
    def from_mapping(cls, values: Mapping) -> "LintOptions":
        """Build options from a dict using camelCase or snake_case keys; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            key = _OPTION_ALIASES.get(key, key)
            if key in known and value is not None:
                kwargs[key] = value
        if "foreign_attribute_prefixes" in kwargs:
            kwargs["foreign_attribute_prefixes"] = tuple(
                str(prefix).lower() for prefix in kwargs["foreign_attribute_prefixes"]
            )
        if "ignore_data_mjx_attributes" in kwargs:
            kwargs["ignore_data_mjx_attributes"] = bool(kwargs["ignore_data_mjx_attributes"])
        return cls(**kwargs)


def coerce_options(options: Union[LintOptions, Mapping, None]) -> LintOptions:
    if options is None:
        return LintOptions()
    if isinstance(options, LintOptions):
        return options
    return LintOptions.from_mapping(options)


@dataclass(frozen=True)
class LintResult:
    source_length: int
    findings: tuple[Finding, ...]
    profile: Profile

    @property
    def codes(self) -> List[str]:
        return [finding.code for finding in self.findings]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.findings)

    def to_dict(self) -> dict:
        return {
            "sourceLength": self.source_length,
            "profile": self.profile.id,
            "findings": [finding.to_dict() for finding in self.findings],
        }


def apply_namespace_prefix_fixup(source: str) -> tuple[str, Optional[Finding]]:
    """
    Declare the conventional ``m:`` prefix when the root uses it undeclared.

    Returns the (possibly rewritten) source and the disclosure finding, or
    None when nothing was assumed.
    """
    match = find_root_start_tag(source)
    if match is None:
        return source, None
    prefix, sep, _ = match.group(1).partition(":")
    if not sep or prefix != ASSUMED_PREFIX:
        return source, None
    if declares_namespace_prefix(match.group(2), ASSUMED_PREFIX):
        return source, None

    insert_at = match.end(1)
    fixed = f'{source[:insert_at]} xmlns:{ASSUMED_PREFIX}="{MATHML_NAMESPACE}"{source[insert_at:]}'
    finding = make_finding(
        SEVERITY_INFO, "L006", "Namespace prefix assumed",
        f'Root element uses the "{ASSUMED_PREFIX}:" prefix without declaring it; '
        f"assuming xmlns:{ASSUMED_PREFIX}=\"{MATHML_NAMESPACE}\".",
        "namespace",
    )
    return fixed, finding


def _check_root(root: ET.Element, raw_name: str) -> List[Finding]:
    findings = []
    namespace, local = split_qname(root.tag)
    if local != "math":
        findings.append(make_finding(
            SEVERITY_WARN, "L003", "Unexpected root",
            f"Root element is <{raw_name or local}>, expected <math>.",
            "syntax",
        ))
        return findings

    if not namespace:
        findings.append(make_finding(
            SEVERITY_WARN, "L005", "Missing namespace",
            f'<math> has no namespace declaration. Add xmlns="{MATHML_NAMESPACE}" '
            "so XML consumers recognize it as MathML.",
            "namespace",
        ))
    elif namespace != MATHML_NAMESPACE:
        findings.append(make_finding(
            SEVERITY_WARN, "L004", "Unexpected namespace",
            f'<math> is in namespace "{namespace}", expected "{MATHML_NAMESPACE}".',
            "namespace",
        ))
    return findings


def iter_lintable_nodes(root: MathNode) -> Iterator[MathNode]:
    """Every MathML element in document order, including math embedded in foreign wrappers."""
    for node in root.iter():
        if not node.is_foreign:
            yield node


def run_lint(
    source: Optional[str],
    options: Union[LintOptions, Mapping, None] = None,
    validators: Optional[Sequence[Validator]] = None,
) -> LintResult:
    """Lint one MathML document. ``validators`` defaults to the full battery."""
    if source is not None and not isinstance(source, str):
        raise TypeError(f"MathML source must be a string, got {type(source).__name__}")

    source = source or ""
    options = coerce_options(options)
    profile = resolve_profile(options.profile)
    logger.debug("Linting %d characters with profile %s", len(source), profile.id)

    findings = _lint_findings(source, options, profile, DEFAULT_VALIDATORS if validators is None else validators)
    if not findings:
        findings.append(make_finding(
            SEVERITY_OK, "L000", "No findings",
            "No structural or authoring issues were detected.",
            "core",
        ))

    unique = dedupe_findings(findings)
    logger.debug("Lint produced %d findings (%d before dedupe)", len(unique), len(findings))
    return LintResult(source_length=len(source), findings=tuple(unique), profile=profile)


def _lint_findings(
    source: str,
    options: LintOptions,
    profile: Profile,
    validators: Iterable[Validator],
) -> List[Finding]:
    if not source.strip():
        return [make_finding(
            SEVERITY_INFO, "L001", "Empty expression",
            "Enter MathML to lint.",
            "syntax",
        )]

    findings: List[Finding] = []
    source, assumption = apply_namespace_prefix_fixup(source)
    if assumption is not None:
        findings.append(assumption)

    try:
        root = ET.fromstring(source)
    except ET.ParseError as exc:
        logger.debug("MathML parse failed: %s", exc)
        return [make_finding(
            SEVERITY_ERROR, "L002", "Invalid XML",
            f"MathML is not well-formed XML: {exc}",
            "syntax",
        )]

    findings.extend(_check_root(root, root_tag_name(source)))

    context = LintContext(
        profile=profile,
        rules=get_rule_set(profile.version),
        ignore_data_mjx_attributes=options.ignore_data_mjx_attributes,
        foreign_attribute_prefixes=tuple(options.foreign_attribute_prefixes),
    )
    for node in iter_lintable_nodes(build_tree(root)):
        for validator in validators:
            validator(findings, node, context)
    return findings


@dataclass(frozen=True)
class LintComparison:
    """Two expressions linted under one profile, with their code sets compared."""

    first: LintResult
    second: LintResult
    only_first: tuple[str, ...] = field(default_factory=tuple)
    only_second: tuple[str, ...] = field(default_factory=tuple)
    shared: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "a": self.first.to_dict(),
            "b": self.second.to_dict(),
            "onlyA": list(self.only_first),
            "onlyB": list(self.only_second),
            "shared": list(self.shared),
        }


def _ordered_codes(result: LintResult) -> List[str]:
    return list(dict.fromkeys(result.codes))


def compare_lint(
    source_a: Optional[str],
    source_b: Optional[str],
    options: Union[LintOptions, Mapping, None] = None,
) -> LintComparison:
    options = coerce_options(options)
    first = run_lint(source_a, options)
    second = run_lint(source_b, options)
    codes_a = _ordered_codes(first)
    codes_b = _ordered_codes(second)
    return LintComparison(
        first=first,
        second=second,
        only_first=tuple(code for code in codes_a if code not in codes_b),
        only_second=tuple(code for code in codes_b if code not in codes_a),
        shared=tuple(code for code in codes_a if code in codes_b),
    )
