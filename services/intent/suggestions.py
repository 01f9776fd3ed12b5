"""Intent attribute authoring suggestions."""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import asdict, dataclass
from typing import List, Optional

from core.logger import logger
from services.lint.dom import MathNode, build_tree
from services.lint.findings import SEVERITY_INFO, SEVERITY_OK, SEVERITY_WARN

INTENT_OVERVIEW = "https://w3c.github.io/mathml/#intent-expressions"
INTENT_MIXING = "https://w3c.github.io/mathml/#mixing-intent-and-presentation"

RELATION_OPERATORS = frozenset({"=", "<", ">", "≤", "≥"})
GROUPING_MIN_CHILDREN = 3

_REPEATED_SPACE_RE = re.compile(r"\s{2,}")
_INTENT_CHARS_RE = re.compile(r"^[\w\s()_:\-*+,./]+$", re.ASCII)


@dataclass(frozen=True)
class Suggestion:
    severity: str
    title: str
    message: str
    link: str

    def to_dict(self) -> dict:
        return asdict(self)


def _check_intent_syntax(node: MathNode, suggestions: List[Suggestion]) -> None:
    if not node.has_attribute("intent"):
        return
    intent = node.get("intent").strip()
    if not intent:
        suggestions.append(Suggestion(
            SEVERITY_WARN, "Empty intent",
            "An empty intent attribute was found. Remove it or provide a valid intent expression.",
            INTENT_OVERVIEW,
        ))
        return
    if _REPEATED_SPACE_RE.search(intent):
        suggestions.append(Suggestion(
            SEVERITY_INFO, "Intent formatting",
            "Intent expression has repeated whitespace; normalize spacing for readability.",
            INTENT_OVERVIEW,
        ))
    if not _INTENT_CHARS_RE.match(intent):
        suggestions.append(Suggestion(
            SEVERITY_WARN, "Intent characters",
            "Intent expression contains unusual characters that may not parse as expected.",
            INTENT_OVERVIEW,
        ))


def _check_grouping(node: MathNode, suggestions: List[Suggestion]) -> None:
    if node.tag == "mrow" and len(node.children) >= GROUPING_MIN_CHILDREN and not node.has_attribute("intent"):
        suggestions.append(Suggestion(
            SEVERITY_INFO, "Grouped expression",
            "This <mrow> groups multiple children. Consider intent if grouping is semantically significant.",
            INTENT_MIXING,
        ))


def _check_relation(node: MathNode, suggestions: List[Suggestion]) -> None:
    if node.tag != "mo" or node.stripped_text not in RELATION_OPERATORS:
        return
    parent = node.parent
    if parent is not None and parent.tag == "mrow" and not parent.has_attribute("intent"):
        suggestions.append(Suggestion(
            SEVERITY_INFO, "Relational structure",
            'Relation operator detected in <mrow>. Consider intent like "equation($lhs,$rhs)" '
            "when semantics matter.",
            INTENT_MIXING,
        ))


def _check_fenced(node: MathNode, suggestions: List[Suggestion]) -> None:
    if node.tag == "mfenced" and not node.has_attribute("intent"):
        suggestions.append(Suggestion(
            SEVERITY_INFO, "Fenced structure",
            "Fenced expression often encodes function application; consider explicit intent "
            "for function-call semantics.",
            INTENT_MIXING,
        ))


def _check_token_granularity(node: MathNode, suggestions: List[Suggestion]) -> None:
    if node.tag in ("mi", "mn") and node.has_attribute("intent") and len(node.stripped_text) <= 1:
        suggestions.append(Suggestion(
            SEVERITY_INFO, "Check granularity",
            f"Token-level intent on <{node.tag}> may be unnecessary unless disambiguation is needed.",
            INTENT_MIXING,
        ))


_CHECKS = (
    _check_intent_syntax,
    _check_grouping,
    _check_relation,
    _check_fenced,
    _check_token_granularity,
)


def _dedupe(suggestions: List[Suggestion]) -> List[Suggestion]:
    # Suggestions are frozen dataclasses, so equality covers every field
    return list(dict.fromkeys(suggestions))


def get_intent_suggestions(source: Optional[str]) -> dict:
    """Heuristic intent hints for a MathML expression; never raises on bad markup."""
    source = source or ""
    suggestions: List[Suggestion] = []

    if not source.strip():
        suggestions.append(Suggestion(
            SEVERITY_INFO, "No input", "Add MathML to receive intent suggestions.", INTENT_OVERVIEW,
        ))
        return {"sourceLength": len(source), "suggestions": [s.to_dict() for s in suggestions]}

    try:
        root = ET.fromstring(source)
    except ET.ParseError as exc:
        logger.debug("Intent analysis skipped: %s", exc)
        suggestions.append(Suggestion(
            SEVERITY_WARN, "Intent analysis skipped",
            "Intent suggestions require valid XML/MathML.", INTENT_OVERVIEW,
        ))
        return {"sourceLength": len(source), "suggestions": [s.to_dict() for s in suggestions]}

    for node in build_tree(root).iter():
        for check in _CHECKS:
            check(node, suggestions)

    if not suggestions:
        suggestions.append(Suggestion(
            SEVERITY_OK, "Intent looks reasonable",
            "No obvious intent issues detected for current heuristics.", INTENT_OVERVIEW,
        ))

    return {
        "sourceLength": len(source),
        "suggestions": [s.to_dict() for s in _dedupe(suggestions)],
    }
