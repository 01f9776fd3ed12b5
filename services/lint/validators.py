"""
Structural validators.

Each validator has the signature ``validator(findings, node, context)`` and
only appends to ``findings``. Validators never read each other's output, so
any one of them can be disabled without changing what the others report.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Optional

from services.lint.dom import MathNode
from services.lint.findings import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARN,
    Finding,
    make_finding,
)
from services.lint.profiles import Profile
from services.lint.schema_adapter import RULE_SETS, LintRuleSet, is_allowed_attribute_name


@dataclass(frozen=True)
class LintContext:
    """Per-call, read-only inputs shared by every validator."""

    profile: Profile
    rules: LintRuleSet
    ignore_data_mjx_attributes: bool = True
    foreign_attribute_prefixes: tuple[str, ...] = ("data-mjx-",)


Validator = Callable[[List[Finding], MathNode, LintContext], None]

TOKEN_ELEMENTS = frozenset({"mi", "mn", "mo", "mtext", "ms"})
# Legal element content of tokens
TOKEN_INNER_ELEMENTS = frozenset({"mglyph", "malignmark"})

DEPRECATED_MATH_ATTRIBUTES = frozenset({"macros", "mode"})

COMMON_MATHVARIANTS = (
    "normal", "bold", "italic", "bold-italic", "double-struck",
    "script", "fraktur", "sans-serif", "monospace",
)


def _severity_for_profile(context: LintContext, default: str = SEVERITY_INFO) -> str:
    return SEVERITY_WARN if context.profile.is_core else default


def validate_tag(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    tag = node.tag
    rules = context.rules

    if not rules.is_known(tag):
        findings.append(make_finding(
            SEVERITY_WARN, "L010", "Unknown tag",
            f"Element <{tag}> is not recognized in the current lint profile.",
            "core",
        ))
        return

    profile = context.profile
    if profile.warn_for_profile_boundary and profile.active_spec not in rules.specs_for(tag):
        in_annotation = node.has_ancestor("annotation-xml")
        if not (profile.allow_content_in_annotations and in_annotation and rules.is_content(tag)):
            findings.append(make_finding(
                SEVERITY_WARN, "L070", "Outside profile subset",
                f"Element <{tag}> is not part of {profile.active_spec} "
                f"(active profile: {profile.id}).",
                "core",
            ))

    rule = rules.rule_for(tag)
    if rule is not None and rule.deprecated:
        severity = SEVERITY_ERROR if profile.is_core else SEVERITY_WARN
        findings.append(make_finding(
            severity, "L011", "Deprecated pattern",
            f"Element <{tag}> is legacy in many workflows. Prefer modern structure where possible.",
            "presentation",
        ))


def validate_parent_context(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    rule = context.rules.rule_for(node.tag)
    if rule is None or not rule.only_valid_in:
        return

    parent = node.parent
    if parent is not None and parent.tag in rule.only_valid_in:
        return

    # A parent with its own child list already reports the misplacement
    parent_rule = context.rules.rule_for(parent.tag) if parent is not None else None
    if parent_rule is not None and not parent_rule.accepts_any_children and node.tag not in parent_rule.children:
        return

    expected = ", ".join(f"<{tag}>" for tag in sorted(rule.only_valid_in))
    where = f"inside <{parent.tag}>" if parent is not None else "as the document root"
    findings.append(make_finding(
        SEVERITY_WARN, "L013", "Misplaced element",
        f"<{node.tag}> appears {where}; it is only valid inside {expected}.",
        "presentation",
    ))


def _is_namespace_declaration(name: str) -> bool:
    return name == "xmlns" or name.startswith("xmlns:") or name.startswith("xml:")


DEPRECATED_ATTRIBUTES_BY_VERSION = MappingProxyType({
    version: frozenset(
        name for name, definition in rule_set.bundle.attribute_definitions.items()
        if definition.get("deprecated")
    )
    for version, rule_set in RULE_SETS.items()
})


def _deprecated_attribute_names(context: LintContext) -> frozenset[str]:
    return DEPRECATED_ATTRIBUTES_BY_VERSION[context.rules.mathml_version]


def validate_attributes(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    tag = node.tag
    rule = context.rules.rule_for(tag)
    allowed = set(context.rules.global_attributes)
    if rule is not None:
        allowed |= rule.attributes
    deprecated = _deprecated_attribute_names(context)

    for attr_name in node.attributes:
        if _is_namespace_declaration(attr_name):
            continue

        if tag == "math" and attr_name in DEPRECATED_MATH_ATTRIBUTES:
            findings.append(make_finding(
                SEVERITY_WARN, "L021", "Deprecated attribute",
                f'Attribute "{attr_name}" on <math> is deprecated and ignored by modern renderers.',
                "deprecated",
            ))
            continue

        if attr_name.startswith(context.foreign_attribute_prefixes):
            if context.ignore_data_mjx_attributes:
                continue
            findings.append(make_finding(
                SEVERITY_WARN, "L020", "Unknown attribute",
                f'Attribute "{attr_name}" on <{tag}> is renderer metadata, not MathML.',
                "presentation",
            ))
            continue

        # Reported by validate_deprecated_attributes instead
        if attr_name in deprecated and attr_name not in DEPRECATED_MATH_ATTRIBUTES:
            continue

        if not is_allowed_attribute_name(attr_name, allowed):
            findings.append(make_finding(
                SEVERITY_WARN, "L020", "Unknown attribute",
                f'Attribute "{attr_name}" is not recognized on <{tag}>.',
                "presentation",
            ))


def validate_deprecated_attributes(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    rule = context.rules.rule_for(node.tag)
    deprecated = set(_deprecated_attribute_names(context))
    if rule is not None:
        deprecated |= rule.deprecated_attributes
    deprecated -= DEPRECATED_MATH_ATTRIBUTES

    for attr_name in node.attributes:
        if attr_name in deprecated:
            findings.append(make_finding(
                SEVERITY_WARN, "L023", "Deprecated attribute",
                f'Attribute "{attr_name}" on <{node.tag}> is deprecated; use CSS or mathvariant-free markup instead.',
                "deprecated",
            ))


def validate_required_attributes(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    rule = context.rules.rule_for(node.tag)
    if rule is None or not rule.required_attributes:
        return
    present = set(node.attributes)
    if any(group <= present for group in rule.required_attributes):
        return
    options = " or ".join(
        "+".join(f'"{name}"' for name in sorted(group)) for group in rule.required_attributes
    )
    findings.append(make_finding(
        SEVERITY_WARN, "L012", "Missing required attribute",
        f"<{node.tag}> requires {options}.",
        "core",
    ))


# Attribute value grammars

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)"
_UNIT_NAMES = r"px|in|cm|mm|pt|pc|em|ex|rem|ch|vw|vh|mu"
_NAMED_SPACE = r"(?:negative)?(?:very){0,2}(?:thin|thick|medium)mathspace"
_LENGTH_RE = re.compile(rf"^(?:{_NUMBER}\s*(?:{_UNIT_NAMES}|%)?|{_NAMED_SPACE})$", re.IGNORECASE)
# mpadded also accepts pseudo-units relative to the content box
_PSEUDO_LENGTH_RE = re.compile(
    rf"^(?:{_NUMBER}(?:%)?(?:{_UNIT_NAMES}|width|height|depth|lspace|{_NAMED_SPACE})?"
    rf"|[+-]?{_NAMED_SPACE})$",
    re.IGNORECASE,
)
_COLOR_RE = re.compile(r"^(?:#[0-9a-fA-F]{3,8}|[a-zA-Z]+|(?:rgb|rgba|hsl|hsla)\([^)]*\))$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_ALIGN_RE = re.compile(r"^(?:top|bottom|center|baseline|axis)(?:\s+[+-]?\d+)?$")


@dataclass(frozen=True)
class AttributeValueRule:
    """Value grammar for one attribute on a set of tags (None means any tag)."""

    attribute: str
    expected: str
    predicate: Callable[[str], bool]
    tags: Optional[frozenset[str]] = None
    excluded_tags: frozenset[str] = frozenset()

    def applies_to(self, tag: str) -> bool:
        if tag in self.excluded_tags:
            return False
        return self.tags is None or tag in self.tags


def _enum_rule(name: str, values, **kwargs) -> AttributeValueRule:
    allowed = frozenset(values)
    return AttributeValueRule(name, "one of " + ", ".join(values), lambda v: v in allowed, **kwargs)


def _list_rule(name: str, values, **kwargs) -> AttributeValueRule:
    allowed = frozenset(values)
    return AttributeValueRule(
        name,
        "a space-separated list of " + ", ".join(values),
        lambda v: all(token in allowed for token in v.split()),
        **kwargs,
    )


def _length_or_keyword_rule(name: str, values, **kwargs) -> AttributeValueRule:
    allowed = frozenset(values or ())
    expected = "a length" + (" or one of " + ", ".join(values) if values else "")
    return AttributeValueRule(name, expected, lambda v: v in allowed or bool(_LENGTH_RE.match(v)), **kwargs)


_PADDED_ATTRIBUTES = ("width", "height", "depth", "lspace", "voffset")
# Free-form or HTML-semantics attributes with no MathML value grammar
_UNCHECKED_TYPES = {"string", "uri"}
_UNCHECKED_ATTRIBUTES = {"autofocus", "data-*", "on*"}


def build_attribute_value_rules(attribute_definitions) -> tuple[AttributeValueRule, ...]:
    """Derive value grammars from the attribute catalog."""
    rules = []
    for name, definition in sorted(attribute_definitions.items()):
        kind = definition.get("type")
        values = definition.get("values")
        if kind in _UNCHECKED_TYPES or name in _UNCHECKED_ATTRIBUTES:
            continue
        excluded = frozenset({"mpadded"}) if name in _PADDED_ATTRIBUTES else frozenset()
        if name == "align":
            rules.append(AttributeValueRule(
                name, "top, bottom, center, baseline or axis, optionally followed by a row number",
                lambda v: bool(_ALIGN_RE.match(v)),
            ))
        elif kind == "enum":
            rules.append(_enum_rule(name, values))
        elif kind == "boolean":
            rules.append(_enum_rule(name, ("true", "false")))
        elif kind == "string-list" and values:
            rules.append(_list_rule(name, values))
        elif kind == "positive-integer":
            rules.append(AttributeValueRule(name, "a positive integer", lambda v: v.isdigit() and int(v) > 0))
        elif kind in ("integer", "integer-or-signed"):
            rules.append(AttributeValueRule(name, "an integer", lambda v: bool(_INTEGER_RE.match(v))))
        elif kind in ("length", "length-or-keyword"):
            rules.append(_length_or_keyword_rule(name, values, excluded_tags=excluded))
        elif kind == "color":
            rules.append(AttributeValueRule(name, "a color", lambda v: bool(_COLOR_RE.match(v))))

    for name in _PADDED_ATTRIBUTES:
        rules.append(AttributeValueRule(
            name, "a length, optionally relative to width, height or depth",
            lambda v: bool(_PSEUDO_LENGTH_RE.match(v.replace(" ", ""))),
            tags=frozenset({"mpadded"}),
        ))
    return tuple(rules)


VALUE_RULES_BY_VERSION = MappingProxyType({
    version: build_attribute_value_rules(rule_set.bundle.attribute_definitions)
    for version, rule_set in RULE_SETS.items()
})


def validate_attribute_values(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    rules = VALUE_RULES_BY_VERSION[context.rules.mathml_version]
    for attr_name, raw_value in node.attributes.items():
        value = raw_value.strip()
        for rule in rules:
            if rule.attribute != attr_name or not rule.applies_to(node.tag):
                continue
            if not value:
                findings.append(make_finding(
                    SEVERITY_WARN, "L022", "Invalid attribute value",
                    f'Attribute "{attr_name}" on <{node.tag}> is empty; expected {rule.expected}.',
                    "attributes",
                ))
            elif not rule.predicate(value):
                findings.append(make_finding(
                    SEVERITY_WARN, "L022", "Invalid attribute value",
                    f'Attribute "{attr_name}" on <{node.tag}> has value "{value}"; expected {rule.expected}.',
                    "attributes",
                ))


def validate_mathvariant_usage(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    value = node.get("mathvariant")
    if value is None:
        return
    value = value.strip()

    if node.tag != "mi":
        findings.append(make_finding(
            SEVERITY_WARN, "L026", "mathvariant usage",
            f"mathvariant on <{node.tag}> is discouraged; use styled Unicode characters or CSS instead.",
            "mathvariant",
        ))

    definition = context.rules.bundle.attribute_definitions.get("mathvariant", {})
    if value in definition.get("values", ()) and value not in COMMON_MATHVARIANTS:
        findings.append(make_finding(
            SEVERITY_INFO, "L033", "Uncommon mathvariant",
            f'mathvariant="{value}" is rarely supported. Common values: {", ".join(COMMON_MATHVARIANTS)}.',
            "mathvariant",
        ))


def validate_children(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    parent_rule = context.rules.rule_for(node.tag)
    if parent_rule is None or parent_rule.accepts_any_children:
        return

    for child in node.children:
        if child.is_foreign:
            continue
        if child.tag not in parent_rule.children:
            findings.append(make_finding(
                SEVERITY_WARN, "L030", "Invalid child",
                f"<{child.tag}> is not listed as a valid child of <{node.tag}>.",
                "core",
            ))


def validate_arity(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    rule = context.rules.rule_for(node.tag)
    arity = rule.arity if rule is not None else None
    if arity is None:
        return

    count = len(node.children)
    if arity.exact is not None and count != arity.exact:
        roles = " (" + ", ".join(rule.child_roles) + ")" if rule.child_roles else ""
        findings.append(make_finding(
            SEVERITY_WARN, "L040", "Unexpected child count",
            f"<{node.tag}> should have exactly {arity.exact} element children{roles}; found {count}.",
            "core",
        ))
    if arity.min is not None and count < arity.min:
        findings.append(make_finding(
            SEVERITY_WARN, "L041", "Too few children",
            f"<{node.tag}> should have at least {arity.min} element children; found {count}.",
            "core",
        ))


def validate_token_content(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if node.tag not in TOKEN_ELEMENTS:
        return
    if any(child.tag not in TOKEN_INNER_ELEMENTS for child in node.children):
        findings.append(make_finding(
            SEVERITY_WARN, "L050", "Token structure",
            f"<{node.tag}> should generally contain text content, not nested elements.",
            "tokens",
        ))


# (tier, concern) for markup that browser-native MathML Core rendering drops or treats differently
CORE_COMPATIBILITY_ELEMENTS = {
    "mfenced": ("non-core", "browsers render it as a plain row without the fences"),
    "menclose": ("non-core", "notations are not drawn by browser-native rendering"),
    "mlabeledtr": ("non-core", "the label cell is not displayed"),
    "maligngroup": ("non-core", "alignment groups are ignored"),
    "malignmark": ("non-core", "alignment marks are ignored"),
    "mglyph": ("non-core", "custom glyph images are not rendered"),
    "maction": ("at-risk", "only the selected child is rendered; actions are not interactive"),
    "semantics": ("at-risk", "only the first child is rendered; annotations are hidden"),
}

CORE_COMPATIBILITY_ATTRIBUTES = {
    "numalign": ("non-core", "fraction alignment is ignored"),
    "denomalign": ("non-core", "fraction alignment is ignored"),
    "bevelled": ("non-core", "bevelled fractions render upright"),
    "notation": ("non-core", "enclosure notations are not drawn"),
    "lquote": ("non-core", "string quotes cannot be customized"),
    "rquote": ("non-core", "string quotes cannot be customized"),
    "open": ("non-core", "mfenced delimiters are not rendered"),
    "close": ("non-core", "mfenced delimiters are not rendered"),
    "separators": ("non-core", "mfenced separators are not rendered"),
    "align": ("at-risk", "table alignment needs CSS in browser-native rendering"),
    "rowalign": ("at-risk", "table alignment needs CSS in browser-native rendering"),
    "columnalign": ("at-risk", "table alignment needs CSS in browser-native rendering"),
    "actiontype": ("at-risk", "maction behaviour is not implemented by browsers"),
}


def validate_core_compatibility(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    severity = _severity_for_profile(context)

    entry = CORE_COMPATIBILITY_ELEMENTS.get(node.tag)
    if entry is not None:
        tier, concern = entry
        findings.append(make_finding(
            severity, "L071", "Core compatibility",
            f"<{node.tag}> is {tier} for MathML Core: {concern}.",
            "core",
        ))

    for attr_name, value in node.attributes.items():
        entry = CORE_COMPATIBILITY_ATTRIBUTES.get(attr_name)
        if attr_name == "mathvariant" and (node.tag != "mi" or value.strip() != "normal"):
            entry = ("at-risk", 'MathML Core only honours mathvariant="normal" on <mi>')
        if entry is None:
            continue
        tier, concern = entry
        findings.append(make_finding(
            severity, "L072", "Core compatibility",
            f'Attribute "{attr_name}" on <{node.tag}> is {tier} for MathML Core: {concern}.',
            "core",
        ))


STRUCTURAL_VALIDATORS: tuple[Validator, ...] = (
    validate_tag,
    validate_parent_context,
    validate_attributes,
    validate_deprecated_attributes,
    validate_required_attributes,
    validate_attribute_values,
    validate_mathvariant_usage,
    validate_children,
    validate_arity,
    validate_token_content,
    validate_core_compatibility,
)
