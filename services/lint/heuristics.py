"""
Ambiguous-notation heuristics.

These look for markup that renders fine but reads ambiguously to speech
engines and converters: split numbers and function names, lost grouping,
missing invisible operators, overstrike spacing tricks and semantics
fallbacks. Same validator contract as validators.py.
"""
from __future__ import annotations

import re
from typing import List, Optional

from services.lint.dom import MathNode
from services.lint.findings import SEVERITY_INFO, SEVERITY_WARN, Finding, make_finding
from services.lint.validators import LintContext, Validator

FUNCTION_APPLICATION = "⁡"
INVISIBLE_TIMES = "⁢"
INVISIBLE_SEPARATOR = "⁣"
INVISIBLE_PLUS = "⁤"
INVISIBLE_OPERATORS = frozenset({FUNCTION_APPLICATION, INVISIBLE_TIMES, INVISIBLE_SEPARATOR, INVISIBLE_PLUS})

ROW_LIKE = frozenset({"math", "mrow", "msqrt", "menclose", "mstyle", "merror", "mpadded", "mphantom", "mtd"})
SCRIPTED = frozenset({"msub", "msup", "msubsup", "munder", "mover", "munderover", "mmultiscripts"})
LIMIT_SCRIPTED = SCRIPTED - {"mmultiscripts"}
OPERAND_TAGS = frozenset({
    "mi", "mn", "mrow", "mfrac", "msqrt", "mroot",
    "msub", "msup", "msubsup", "munder", "mover", "munderover", "mmultiscripts",
})

CLOSING_FENCES = frozenset(")]}⟩〉〉》」』】〕〗〙〛）］｝｠⦆⌉⌋")
LARGE_OPERATORS = frozenset("∑∏∐∫∬∭∮∯∰⋀⋁⋂⋃⨀⨁⨂⨄⨆")
COMMA_OPERATORS = frozenset({",", "，", INVISIBLE_SEPARATOR})

# Function names with a dedicated LaTeX command (\sin, \log, ...)
BUILTIN_FUNCTIONS = frozenset({
    "sin", "cos", "tan", "cot", "sec", "csc", "sinh", "cosh", "tanh", "coth",
    "arcsin", "arccos", "arctan", "exp", "log", "ln", "lg", "det", "dim",
    "gcd", "hom", "ker", "lim", "liminf", "limsup", "max", "min", "sup",
    "inf", "deg", "arg",
})
# Function names conventionally written with \operatorname
OPERATORNAME_FUNCTIONS = frozenset({
    "sech", "csch", "arcsec", "arccsc", "arccot", "arcsinh", "arccosh",
    "arctanh", "arcsech", "arccsch", "arccoth", "sgn", "sign", "tr", "rank",
    "lcm", "erf", "erfc", "span", "diag",
})
KNOWN_FUNCTIONS = BUILTIN_FUNCTIONS | OPERATORNAME_FUNCTIONS
_FUNCTIONS_LONGEST_FIRST = sorted(KNOWN_FUNCTIONS, key=lambda name: (-len(name), name))

# Short words that are prose rather than products of variables
PROSE_SHORT_WORDS = frozenset({"if", "and", "or", "for", "the", "is", "of", "to", "let", "as"})
PROSE_MIN_RUN = 4
WORD_RUN_MIN = 3
LARGE_MROW_CHILDREN = 5

_NUMERIC_LITERAL_RE = re.compile(r"^[+-]?(?:\d+(?:[.,]\d+)*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_GROUP_HEAD_RE = re.compile(r"^\d{1,3}$")
_GROUP_TAIL_RE = re.compile(r"^\d{3}(?:\.\d+)?$")


def _text_is(node: Optional[MathNode], tag: str, values) -> bool:
    return node is not None and node.tag == tag and node.stripped_text in values


def is_single_letter_mi(node: MathNode, lowercase: bool = False) -> bool:
    if node.tag != "mi":
        return False
    text = node.stripped_text
    if len(text) != 1 or not text.isalpha():
        return False
    return not lowercase or (text.isascii() and text.islower())


def is_index_like(node: MathNode) -> bool:
    """Subscript slots of msub/msubsup and the script slots of mmultiscripts."""
    parent = node.parent
    if parent is None:
        return False
    if parent.tag in ("msub", "msubsup"):
        return node.index == 1
    if parent.tag == "mmultiscripts":
        return node.index >= 1 and node.tag != "mprescripts"
    return False


def _in_row_context(node: MathNode) -> bool:
    return node.tag in ROW_LIKE and not is_index_like(node)


def _is_large_operator_token(node: Optional[MathNode]) -> bool:
    if node is None or node.tag not in ("mo", "mi"):
        return False
    text = node.stripped_text
    return text in LARGE_OPERATORS or text == "lim"


def is_large_operator_construct(node: MathNode) -> bool:
    if _is_large_operator_token(node):
        return True
    return node.tag in LIMIT_SCRIPTED and _is_large_operator_token(node.first_child)


def _is_function_name_mi(node: Optional[MathNode]) -> bool:
    return node is not None and node.tag == "mi" and node.stripped_text in KNOWN_FUNCTIONS


def _is_function_head(node: MathNode) -> bool:
    """A function-name identifier, bare or as the base of a script (sin²)."""
    if _is_function_name_mi(node):
        return True
    return node.tag in LIMIT_SCRIPTED and _is_function_name_mi(node.first_child)


def _letter_runs(children: List[MathNode], lowercase: bool) -> List[List[MathNode]]:
    runs, current = [], []
    for child in children:
        if is_single_letter_mi(child, lowercase):
            current.append(child)
            continue
        if current:
            runs.append(current)
        current = []
    if current:
        runs.append(current)
    return runs


def find_function_names(word: str) -> List[str]:
    """Function names spelled inside a run of letters, scanning longest match first.

    A name counts when it opens the run, directly follows another name or
    closes the run, so "xsin" and "sincos" match but "using" does not.
    """
    found, position, anchor = [], 0, 0
    while position < len(word):
        for name in _FUNCTIONS_LONGEST_FIRST:
            if not word.startswith(name, position):
                continue
            end = position + len(name)
            if position != anchor and end != len(word):
                continue
            # Two-letter names only count when they are the whole run (l, n -> ln)
            if len(name) >= 3 or len(name) == len(word):
                found.append(name)
                position = anchor = end
                break
        else:
            position += 1
    return found


def check_split_number_literal(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    children = node.children
    for index in range(len(children) - 2):
        head, comma, tail = children[index:index + 3]
        if (
            head.tag == "mn" and tail.tag == "mn"
            and _text_is(comma, "mo", {","})
            and _GROUP_HEAD_RE.match(head.stripped_text)
            and _GROUP_TAIL_RE.match(tail.stripped_text)
        ):
            findings.append(make_finding(
                SEVERITY_WARN, "L024", "Split number literal",
                f'"{head.stripped_text},{tail.stripped_text}" is split across <mn>, <mo>, <mn>. '
                "Write a grouped number as a single <mn>.",
                "tokens",
            ))
            return


def check_suspicious_script_base(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if node.tag not in SCRIPTED:
        return
    base = node.first_child
    if base is not None and base.tag == "mo" and not base.children and base.stripped_text in CLOSING_FENCES:
        findings.append(make_finding(
            SEVERITY_WARN, "L025", "Suspicious script base",
            f'<{node.tag}> has a lone closing fence "{base.stripped_text}" as its base. '
            "Wrap the whole fenced group in an <mrow> so the script applies to it.",
            "scripts",
        ))


def check_split_function_names(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    for run in _letter_runs(node.children, lowercase=True):
        if len(run) < 2:
            continue
        word = "".join(child.stripped_text for child in run)
        names = find_function_names(word)
        for name in names:
            letters = ", ".join(name)
            if name in BUILTIN_FUNCTIONS:
                findings.append(make_finding(
                    SEVERITY_WARN, "L028", "Split function name",
                    f'Single-letter identifiers {letters} spell "{name}". '
                    f"Use one <mi>{name}</mi> (LaTeX \\{name}).",
                    "tokens", "invisible",
                ))
            else:
                findings.append(make_finding(
                    SEVERITY_WARN, "L029", "Split function name",
                    f'Single-letter identifiers {letters} spell "{name}". '
                    f"Use one <mi>{name}</mi> (LaTeX \\operatorname{{{name}}}).",
                    "tokens", "invisible",
                ))
        if not names and (len(word) >= PROSE_MIN_RUN or word in PROSE_SHORT_WORDS):
            findings.append(make_finding(
                SEVERITY_WARN, "L032", "Plain language in mi",
                f'Identifiers spell the word "{word}". Put prose in <mtext> instead of one <mi> per letter.',
                "tokens",
            ))


def check_function_application(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if not _is_function_name_mi(node):
        return

    parent = node.parent
    target = node
    if parent is not None and parent.tag in SCRIPTED:
        # Names in script positions are labels (x_min), not applications
        if node.index != 0:
            return
        target = parent

    if _text_is(target.next_sibling, "mo", {FUNCTION_APPLICATION}):
        return

    findings.append(make_finding(
        SEVERITY_WARN, "L031", "Missing function application",
        f'<mi>{node.stripped_text}</mi> is not followed by U+2061 FUNCTION APPLICATION. '
        "Add <mo>&#x2061;</mo> so the argument is read as applied to the function.",
        "invisible",
    ))


def _first_meaningful(siblings: List[MathNode]) -> Optional[MathNode]:
    for sibling in siblings:
        if not _text_is(sibling, "mo", INVISIBLE_OPERATORS):
            return sibling
    return None


def check_large_operator_operand(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if not is_large_operator_construct(node):
        return
    parent = node.parent
    # A base inside its own limits construct; the construct is checked instead
    if parent is not None and parent.tag in SCRIPTED and node.index == 0:
        return
    following = node.following_siblings
    if len(following) < 2:
        return
    operand = _first_meaningful(following)
    if operand is not None and operand.tag != "mrow":
        findings.append(make_finding(
            SEVERITY_WARN, "L027", "Ambiguous operand",
            "A large operator is followed by several ungrouped siblings. "
            "Wrap its operand in an <mrow> to make the scope explicit.",
            "scripts",
        ))


def check_semantics_fallback(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if node.tag != "semantics":
        return

    for child in node.children:
        if child.tag == "annotation-xml" and (child.children or child.stripped_text):
            findings.append(make_finding(
                SEVERITY_WARN, "L036", "Annotation fallback",
                "<semantics> carries an <annotation-xml> payload. Assistive technology support for "
                "this fallback pattern is inconsistent; do not rely on it for meaning.",
                "semantics",
            ))
            break

    if not context.profile.show_semantics_hints:
        return
    if not any(d.tag in ("annotation", "annotation-xml") for d in node.descendants()):
        findings.append(make_finding(
            SEVERITY_INFO, "L062", "Semantics hint",
            "<semantics> is present without annotation payload; verify intent of using semantics wrapper.",
            "presentation",
        ))


def _is_negative_length(value: Optional[str]) -> bool:
    value = (value or "").strip().lower()
    return value.startswith("-") or value.startswith("negative")


def check_negative_spacing(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if node.tag == "mspace" and _is_negative_length(node.get("width")):
        findings.append(make_finding(
            SEVERITY_WARN, "L034", "Negative space",
            f'<mspace width="{node.get("width").strip()}"> pulls content backwards and often hides '
            "overlapping glyphs from assistive technology.",
            "spacing",
        ))
        return

    if node.tag != "mpadded":
        return
    negative_padding = any(
        _is_negative_length(node.get(name)) for name in ("width", "lspace", "voffset", "height", "depth")
    )
    negative_space = any(
        child.tag == "mspace" and _is_negative_length(child.get("width")) for child in node.children
    )
    visible_sibling = any(
        child.tag in ("mi", "mo", "mn", "mtext") and child.stripped_text for child in node.children
    )
    if negative_padding or (negative_space and visible_sibling):
        findings.append(make_finding(
            SEVERITY_WARN, "L035", "Potential overstrike construct",
            "<mpadded> uses negative spacing to overlap content. If this builds a composite symbol, "
            "use the corresponding Unicode character instead.",
            "spacing",
        ))


def _word_run_indexes(children: List[MathNode]) -> set:
    indexes = set()
    for run in _letter_runs(children, lowercase=False):
        if len(run) >= WORD_RUN_MIN:
            indexes.update(child.index for child in run)
    return indexes


def check_invisible_times(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if not _in_row_context(node):
        return
    children = node.children
    word_indexes = _word_run_indexes(children)

    for left, right in zip(children, children[1:]):
        if left.tag not in OPERAND_TAGS or right.tag not in OPERAND_TAGS:
            continue
        # Mixed fractions belong to the invisible-plus check
        if left.tag == "mn" and right.tag == "mfrac":
            continue
        if left.index in word_indexes and right.index in word_indexes:
            continue
        if _is_function_head(left) or is_large_operator_construct(left):
            continue
        findings.append(make_finding(
            SEVERITY_INFO, "L037", "Possible missing invisible times",
            f"<{left.tag}> is directly followed by <{right.tag}>. If this is multiplication, "
            "insert <mo>&#x2062;</mo> (INVISIBLE TIMES).",
            "invisible",
        ))


def check_invisible_separator(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if node.tag != "mrow" or not is_index_like(node):
        return
    children = node.children
    if any(_text_is(child, "mo", COMMA_OPERATORS) for child in children):
        return

    def single_char_token(child: MathNode) -> bool:
        return child.tag in ("mi", "mn") and len(child.stripped_text) == 1

    if any(single_char_token(a) and single_char_token(b) for a, b in zip(children, children[1:])):
        findings.append(make_finding(
            SEVERITY_WARN, "L038", "Missing invisible separator",
            "An index contains adjacent single-character tokens without a separator. "
            "Insert <mo>&#x2063;</mo> (INVISIBLE SEPARATOR) between indices such as i and j.",
            "invisible",
        ))


def check_invisible_plus(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if not _in_row_context(node):
        return
    for left, right in zip(node.children, node.children[1:]):
        if left.tag == "mn" and right.tag == "mfrac":
            findings.append(make_finding(
                SEVERITY_WARN, "L039", "Missing invisible plus",
                f"<mn>{left.stripped_text}</mn> directly followed by <mfrac> reads as a mixed number. "
                "Insert <mo>&#x2064;</mo> (INVISIBLE PLUS) between them.",
                "invisible",
            ))


def check_semantics_hints(findings: List[Finding], node: MathNode, context: LintContext) -> None:
    if not context.profile.show_semantics_hints:
        return

    tag = node.tag
    if tag == "mrow" and len(node.children) > LARGE_MROW_CHILDREN and not node.has_attribute("intent"):
        findings.append(make_finding(
            SEVERITY_INFO, "L060", "Semantics hint",
            "Large <mrow> group has no intent. Consider intent for disambiguation.",
            "intent",
        ))

    if tag not in ("mi", "mn") or node.has_attribute("intent"):
        return
    text = node.stripped_text
    if len(text) <= 1:
        return
    if tag == "mn" and _NUMERIC_LITERAL_RE.match(text):
        return
    findings.append(make_finding(
        SEVERITY_INFO, "L061", "Semantics hint",
        f"<{tag}> with multi-character token may need explicit intent depending on meaning.",
        "intent",
    ))


HEURISTIC_VALIDATORS: tuple[Validator, ...] = (
    check_split_number_literal,
    check_suspicious_script_base,
    check_split_function_names,
    check_function_application,
    check_large_operator_operand,
    check_semantics_fallback,
    check_negative_spacing,
    check_invisible_times,
    check_invisible_separator,
    check_invisible_plus,
    check_semantics_hints,
)
