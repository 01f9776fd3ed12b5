"""Finding records, reference links and deduplication."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

SEVERITY_OK = "ok"
SEVERITY_INFO = "info"
SEVERITY_WARN = "warn"
SEVERITY_ERROR = "error"

SPEC_LINKS = {
    "core": "https://w3c.github.io/mathml-core/",
    "intent": "https://w3c.github.io/mathml/#intent-expressions",
    "presentation": "https://w3c.github.io/mathml/#presentation-markup",
    "syntax": "https://w3c.github.io/mathml/#fundamentals",
    "namespace": "https://w3c.github.io/mathml/#interf_namespace",
    "tokens": "https://w3c.github.io/mathml/#presm_tokel",
    "attributes": "https://w3c.github.io/mathml/#fund_attval",
    "mathvariant": "https://w3c.github.io/mathml-core/#the-mathvariant-attribute",
    "invisible": "https://w3c.github.io/mathml/#presm_invisibleops",
    "scripts": "https://w3c.github.io/mathml/#presm_scrlim",
    "semantics": "https://w3c.github.io/mathml/#mixing_semantic_annotations",
    "spacing": "https://w3c.github.io/mathml/#presm_mspace",
    "deprecated": "https://w3c.github.io/mathml/#presm_deprecatt",
    "authoring": "https://www.w3.org/WAI/tutorials/",
}

_LINK_LABELS = {
    "core": ("MathML Core", "spec"),
    "intent": ("MathML 4: intent expressions", "spec"),
    "presentation": ("MathML 4: presentation markup", "spec"),
    "syntax": ("MathML 4: fundamentals", "spec"),
    "namespace": ("MathML 4: namespace", "spec"),
    "tokens": ("MathML 4: token elements", "spec"),
    "attributes": ("MathML 4: attribute values", "spec"),
    "mathvariant": ("MathML Core: mathvariant", "spec"),
    "invisible": ("MathML 4: invisible operators", "spec"),
    "scripts": ("MathML 4: script and limit schemata", "spec"),
    "semantics": ("MathML 4: semantic annotations", "spec"),
    "spacing": ("MathML 4: mspace", "spec"),
    "deprecated": ("MathML 4: deprecated attributes", "spec"),
    "authoring": ("WAI tutorials", "guide"),
}


@dataclass(frozen=True)
class Reference:
    label: str
    url: str
    type: str = "spec"

    def to_dict(self) -> dict:
        return {"label": self.label, "url": self.url, "type": self.type}


@dataclass(frozen=True)
class Finding:
    """One reported issue."""

    severity: str
    code: str
    title: str
    message: str
    references: tuple[Reference, ...] = field(default_factory=tuple)

    @property
    def reference(self) -> str:
        return self.references[0].url if self.references else ""

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.severity, self.code, self.title, self.message)

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "code": self.code,
            "title": self.title,
            "message": self.message,
            "reference": self.reference,
            "references": [ref.to_dict() for ref in self.references],
        }


def make_reference(link_key: str) -> Reference:
    label, ref_type = _LINK_LABELS[link_key]
    return Reference(label=label, url=SPEC_LINKS[link_key], type=ref_type)


def make_finding(severity: str, code: str, title: str, message: str, *link_keys: str) -> Finding:
    """Build a Finding; link_keys name SPEC_LINKS entries in display order."""
    references = tuple(make_reference(key) for key in (link_keys or ("syntax",)))
    return Finding(severity, code, title, message, references)


def dedupe_findings(findings: Iterable[Finding]) -> List[Finding]:
    seen = set()
    unique = []
    for finding in findings:
        if finding.key in seen:
            continue
        seen.add(finding.key)
        unique.append(finding)
    return unique


def has_errors(findings: Iterable[Finding]) -> bool:
    return any(finding.severity == SEVERITY_ERROR for finding in findings)
