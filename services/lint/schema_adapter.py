"""
Normalize the MathML catalog into immutable lookup tables.

build_schema_bundle(version) turns schema_data into a SchemaBundle:
lowercased tags and attributes, "any-content"/"any-xml" collapsed to a
single "any" wildcard, text pseudo-children dropped, child counts turned
into arity constraints, and (for mathml4) the provisional overlays applied.

build_rule_set(bundle) merges the bundle with the engine-local overrides
into the one effective ElementRule per tag that the validators read.
Both are built once per version at import time and never mutated.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from services.lint.schema_data import SCHEMA_CATALOGS, SCHEMA_VERSIONS

ANY_CHILD = "any"
_PSEUDO_CHILDREN = {"text", "html-phrasing"}
_ANY_SENTINELS = {"any-content", "any-xml", ANY_CHILD}


@dataclass(frozen=True)
class Arity:
    exact: Optional[int] = None
    min: Optional[int] = None


@dataclass(frozen=True)
class ElementRule:
    """Effective rule for one tag."""

    tag: str
    children: tuple[str, ...] = ()
    attributes: frozenset[str] = frozenset()
    arity: Optional[Arity] = None
    specs: frozenset[str] = frozenset()
    deprecated: bool = False
    only_valid_in: frozenset[str] = frozenset()
    deprecated_attributes: frozenset[str] = frozenset()
    # Alternative attribute sets; one of them must be fully present
    required_attributes: tuple[frozenset[str], ...] = ()
    child_roles: tuple[str, ...] = ()

    @property
    def accepts_any_children(self) -> bool:
        return ANY_CHILD in self.children


@dataclass(frozen=True)
class Overlay:
    id: str
    description: str
    attribute: str


PROVISIONAL_MATHML4_OVERLAYS = (
    Overlay(
        id="mathml4-intent-global",
        description='Allow "intent" across presentation elements for MathML3-based '
                    'pipelines adopting MathML4 intent authoring.',
        attribute="intent",
    ),
    Overlay(
        id="mathml4-arg-global",
        description='Allow "arg" across presentation elements so intent expressions '
                    'can reference children by name.',
        attribute="arg",
    ),
)


@dataclass(frozen=True)
class SchemaBundle:
    mathml_version: str
    provisional_overlays: tuple[Overlay, ...]
    presentation_rules: Mapping[str, ElementRule]
    content_rules: Mapping[str, ElementRule]
    specs_by_tag: Mapping[str, frozenset[str]]
    content_tags: frozenset[str]
    known_tags: frozenset[str]
    universal_attributes: tuple[str, ...]
    attribute_definitions: Mapping[str, Mapping]


def normalize_schema_tag(value) -> str:
    return str(value or "").lower()


def dedupe_values(values: Iterable[str]) -> list[str]:
    """Drop repeats while keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def normalize_schema_children(allowed_children) -> tuple[str, ...]:
    if isinstance(allowed_children, str):
        return (ANY_CHILD,) if allowed_children in _ANY_SENTINELS else ()
    if not isinstance(allowed_children, (list, tuple)):
        return ()
    return tuple(dedupe_values(
        tag
        for tag in (normalize_schema_tag(entry) for entry in allowed_children)
        if tag and tag not in _PSEUDO_CHILDREN
    ))


def normalize_schema_attributes(allowed_attributes, include_on_star: bool = True) -> list[str]:
    if not isinstance(allowed_attributes, (list, tuple)):
        return []
    return dedupe_values(
        name
        for name in (normalize_schema_tag(entry) for entry in allowed_attributes)
        if name and (include_on_star or name != "on*")
    )


def schema_child_count_to_arity(child_count) -> Optional[Arity]:
    """Map {min, max} bounds to an arity check; open-ended zero minimums need none."""
    if not isinstance(child_count, dict):
        return None
    low = child_count.get("min")
    high = child_count.get("max")
    low = low if isinstance(low, int) else None
    high = high if isinstance(high, int) and not math.isinf(high) else None
    if low is None and high is None:
        return None
    if low is not None and high is not None and low == high:
        return Arity(exact=low)
    if low is not None and low > 0:
        return Arity(min=low)
    return None


def _rule_from_definition(tag: str, definition: dict, extra_attributes=(),
                          include_on_star: bool = True) -> ElementRule:
    attributes = normalize_schema_attributes(definition.get("allowed_attributes"), include_on_star)
    for name in extra_attributes:
        if name not in attributes:
            attributes.append(name)
    return ElementRule(
        tag=tag,
        children=normalize_schema_children(definition.get("allowed_children")),
        attributes=frozenset(attributes),
        arity=schema_child_count_to_arity(definition.get("child_count")),
        specs=frozenset(normalize_schema_tag(spec) for spec in definition.get("specs", ())),
        deprecated=bool(definition.get("deprecated", False)),
        only_valid_in=frozenset(normalize_schema_tag(t) for t in definition.get("only_valid_in", ())),
        deprecated_attributes=frozenset(
            normalize_schema_tag(a) for a in definition.get("deprecated_attributes", ())
        ),
        required_attributes=tuple(
            frozenset(normalize_schema_tag(a) for a in group)
            for group in definition.get("required_attributes", ())
        ),
        child_roles=tuple(definition.get("child_roles", ())),
    )


def build_schema_bundle(mathml_version: str = "mathml3", include_on_star_in_attributes: bool = True) -> SchemaBundle:
    """Build the normalized, read-only schema view for one MathML version."""
    version = normalize_schema_tag(mathml_version or "mathml3")
    if version not in SCHEMA_CATALOGS:
        raise ValueError(f"Unsupported MathML schema version: {mathml_version!r}")
    catalog = SCHEMA_CATALOGS[version]

    overlays = PROVISIONAL_MATHML4_OVERLAYS if version == "mathml4" else ()
    overlay_attributes = [overlay.attribute for overlay in overlays]

    presentation_rules = {}
    for raw_tag, definition in catalog["presentation"].items():
        tag = normalize_schema_tag(raw_tag)
        presentation_rules[tag] = _rule_from_definition(
            tag, definition, overlay_attributes, include_on_star_in_attributes
        )

    content_rules = {}
    for raw_tag, definition in catalog["content"].items():
        tag = normalize_schema_tag(raw_tag)
        content_rules[tag] = _rule_from_definition(
            tag, definition, (), include_on_star_in_attributes
        )

    specs_by_tag = {tag: rule.specs for tag, rule in presentation_rules.items()}
    specs_by_tag.update({tag: rule.specs for tag, rule in content_rules.items()})

    content_tags = frozenset(content_rules)
    attribute_definitions = {
        normalize_schema_tag(name): MappingProxyType(dict(definition))
        for name, definition in {**catalog["content_attributes"], **catalog["attributes"]}.items()
    }

    return SchemaBundle(
        mathml_version=version,
        provisional_overlays=tuple(overlays),
        presentation_rules=MappingProxyType(presentation_rules),
        content_rules=MappingProxyType(content_rules),
        specs_by_tag=MappingProxyType(specs_by_tag),
        content_tags=content_tags,
        known_tags=frozenset(presentation_rules) | content_tags,
        universal_attributes=tuple(normalize_schema_tag(a) for a in catalog["universal_attributes"]),
        attribute_definitions=MappingProxyType(attribute_definitions),
    )


def is_allowed_attribute_name(attr_name: str, allowed: Iterable[str]) -> bool:
    normalized = normalize_schema_tag(attr_name)
    allowed = allowed if isinstance(allowed, (set, frozenset)) else set(allowed)
    if normalized in allowed:
        return True
    if "data-*" in allowed and normalized.startswith("data-"):
        return True
    if "on*" in allowed and re.match(r"^on", normalized):
        return True
    return False


# Engine-local overrides. Attribute and child sets are unioned with the
# versioned rule; a local arity replaces the versioned one.
_INTENT_ATTRIBUTES = ("intent", "arg")
_INTENT_TAGS = (
    "math", "mrow", "mi", "mn", "mo", "mtext", "mfrac", "msup", "msub",
    "msubsup", "msqrt", "mroot", "mfenced", "mtable", "mtr", "mlabeledtr",
    "mtd", "semantics",
)
# mstyle accepts any attribute it can pass on to its descendants
_MSTYLE_INHERITED = (
    "form", "fence", "separator", "lspace", "rspace", "stretchy", "symmetric",
    "maxsize", "minsize", "largeop", "movablelimits", "accent", "accentunder",
    "linethickness", "numalign", "denomalign", "bevelled", "notation",
    "scriptsizemultiplier", "scriptminsize", "infixlinebreakstyle", "decimalpoint",
)

LOCAL_RULE_OVERRIDES = MappingProxyType({
    **{tag: {"attributes": _INTENT_ATTRIBUTES} for tag in _INTENT_TAGS},
    "math": {"attributes": (*_INTENT_ATTRIBUTES, "display"), "arity": Arity(min=1)},
    "semantics": {"attributes": _INTENT_ATTRIBUTES, "arity": Arity(min=1)},
    "mlabeledtr": {"attributes": _INTENT_ATTRIBUTES, "arity": Arity(min=2)},
    "mstyle": {"attributes": _MSTYLE_INHERITED},
})


def merge_rule(base: ElementRule, override: Mapping) -> ElementRule:
    children = base.children
    extra_children = tuple(normalize_schema_tag(c) for c in override.get("children", ()))
    if extra_children:
        children = tuple(dedupe_values([*children, *extra_children]))
    attributes = base.attributes | {normalize_schema_tag(a) for a in override.get("attributes", ())}
    arity = override.get("arity") or base.arity
    return ElementRule(
        tag=base.tag,
        children=children,
        attributes=frozenset(attributes),
        arity=arity,
        specs=base.specs,
        deprecated=bool(override.get("deprecated", base.deprecated)),
        only_valid_in=base.only_valid_in,
        deprecated_attributes=base.deprecated_attributes,
        required_attributes=base.required_attributes,
        child_roles=base.child_roles,
    )


@dataclass(frozen=True)
class LintRuleSet:
    """Merged, lookup-ready view the lint engine consumes."""

    bundle: SchemaBundle
    rules: Mapping[str, ElementRule]
    global_attributes: frozenset[str] = field(default_factory=frozenset)

    @property
    def mathml_version(self) -> str:
        return self.bundle.mathml_version

    def rule_for(self, tag: str) -> Optional[ElementRule]:
        return self.rules.get(normalize_schema_tag(tag))

    def is_known(self, tag: str) -> bool:
        return normalize_schema_tag(tag) in self.bundle.known_tags

    def is_content(self, tag: str) -> bool:
        return normalize_schema_tag(tag) in self.bundle.content_tags

    def specs_for(self, tag: str) -> frozenset[str]:
        return self.bundle.specs_by_tag.get(normalize_schema_tag(tag), frozenset())


def build_rule_set(bundle: SchemaBundle, overrides: Mapping = LOCAL_RULE_OVERRIDES) -> LintRuleSet:
    rules = {}
    for tag, rule in (*bundle.presentation_rules.items(), *bundle.content_rules.items()):
        override = overrides.get(tag)
        rules[tag] = merge_rule(rule, override) if override else rule
    return LintRuleSet(
        bundle=bundle,
        rules=MappingProxyType(rules),
        global_attributes=frozenset(bundle.universal_attributes),
    )


SCHEMA_BUNDLES = MappingProxyType({version: build_schema_bundle(version) for version in SCHEMA_VERSIONS})
RULE_SETS = MappingProxyType({version: build_rule_set(bundle) for version, bundle in SCHEMA_BUNDLES.items()})


def get_rule_set(mathml_version: str) -> LintRuleSet:
    """Return the prebuilt rule set; unknown versions fall back to mathml3."""
    return RULE_SETS.get(normalize_schema_tag(mathml_version), RULE_SETS["mathml3"])
